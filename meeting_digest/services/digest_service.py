import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional
from uuid import uuid4

from meeting_digest.core import config
from meeting_digest.core.errors import ProviderError, classify
from meeting_digest.providers.base import Provider
from meeting_digest.providers.factory import get_provider
from meeting_digest.schemas.digest import StoredDigest
from meeting_digest.services.digest_store import DigestStore
from meeting_digest.services.prompt import build_digest_prompt
from meeting_digest.services.retry import retry_with_backoff

logger = logging.getLogger(__name__)

NO_RESPONSE_PLACEHOLDER = "No response generated"

Event = Dict[str, Any]


class TranscriptRequiredError(ValueError):
    def __init__(self) -> None:
        super().__init__("Transcript is required")


def require_transcript(transcript: Optional[str]) -> str:
    if not transcript or not transcript.strip():
        raise TranscriptRequiredError()
    return transcript


async def generate_digest(transcript: str, *, provider: Optional[Provider] = None) -> str:
    # single provider call, no retry on this path
    provider = provider or get_provider()
    text = await provider.generate(build_digest_prompt(transcript))
    return text or NO_RESPONSE_PLACEHOLDER


async def create_digest(
    transcript: Optional[str],
    *,
    store: DigestStore,
    provider: Optional[Provider] = None,
) -> StoredDigest:
    transcript = require_transcript(transcript)
    summary = await generate_digest(transcript, provider=provider)
    return await store.create(public_id=str(uuid4()), original_transcript=transcript, summary=summary)


def stream_digest(
    transcript: Optional[str],
    *,
    store: DigestStore,
    provider: Provider,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[Event]:
    """
    Validate eagerly, then return the event sequence for one streaming request:
    one `start`, zero or more `chunk`, then exactly one of `complete` / `error`.

    The record is written once, after the provider stream is exhausted. If that write
    fails the generated text is dropped and the client gets an `error` event.
    """
    transcript = require_transcript(transcript)
    return _digest_events(transcript, store, provider, sleep)


async def _open(provider: Provider, prompt: str, sleep: Callable[[float], Awaitable[None]]) -> AsyncIterator[str]:
    if not provider.retryable:
        return await provider.open_stream(prompt)
    # only opening the stream is retried; a failure mid-stream ends the request
    return await retry_with_backoff(
        lambda: provider.open_stream(prompt),
        config.RETRY_MAX_ATTEMPTS,
        config.RETRY_BASE_DELAY_MS,
        sleep=sleep,
    )


async def _digest_events(
    transcript: str,
    store: DigestStore,
    provider: Provider,
    sleep: Callable[[float], Awaitable[None]],
) -> AsyncIterator[Event]:
    public_id = str(uuid4())
    yield {"type": "start", "publicId": public_id}

    if provider.name == "mock":
        logger.info("using mock responses for offline testing")

    prompt = build_digest_prompt(transcript)
    parts: List[str] = []
    try:
        chunks = await _open(provider, prompt, sleep)
        async for text in chunks:
            if not text:
                continue
            parts.append(text)
            yield {"type": "chunk", "content": text}

        full_summary = "".join(parts)
        if not full_summary.strip():
            raise ProviderError("No content generated from the model")

        digest = await store.create(public_id=public_id, original_transcript=transcript, summary=full_summary)
    except Exception as e:
        classified = classify(e)
        logger.error(
            "streaming digest %s failed (%s, %d): %s",
            public_id, classified.code.value, classified.status_code, classified.details,
        )
        yield {"type": "error", "message": classified.message, "code": classified.code.value}
        return

    logger.info("digest %s stored (%d chars, %d chunks)", public_id, len(full_summary), len(parts))
    yield {"type": "complete", "digest": digest.public().model_dump(mode="json", by_alias=True)}
