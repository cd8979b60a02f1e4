import logging
from typing import AsyncIterator, List
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from meeting_digest.api.deps import get_digest_store
from meeting_digest.core.errors import ProviderError, classify
from meeting_digest.providers.factory import get_provider
from meeting_digest.schemas.digest import Digest, DigestRequest
from meeting_digest.services.digest_service import (
    TranscriptRequiredError,
    create_digest,
    require_transcript,
    stream_digest,
)
from meeting_digest.services.digest_store import DigestStore, DigestStoreError
from meeting_digest.services.sse import encode_event

router = APIRouter(tags=["digests"])
logger = logging.getLogger(__name__)

STREAM_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


@router.post("/digests", response_model=Digest, status_code=201)
async def create(req: DigestRequest, store: DigestStore = Depends(get_digest_store)):
    try:
        transcript = require_transcript(req.transcript)
    except TranscriptRequiredError as e:
        return _error(str(e), 400)

    try:
        record = await create_digest(transcript, store=store, provider=get_provider())
    except (ProviderError, DigestStoreError) as e:
        classified = classify(e)
        logger.error("error generating digest (%s): %s", classified.code.value, classified.details)
        return _error("Failed to generate digest", 500, code=classified.code.value)
    return record.public()


@router.get("/digests", response_model=List[Digest])
async def list_digests(store: DigestStore = Depends(get_digest_store)):
    return [d.public() for d in await store.find_all()]


@router.get("/digests/{public_id}", response_model=Digest)
async def get_digest(public_id: str, store: DigestStore = Depends(get_digest_store)):
    record = await store.find_by_public_id(public_id)
    if record is None:
        return _error("Digest not found", 404)
    return record.public()


@router.post("/digests/stream")
async def create_streaming(req: DigestRequest, store: DigestStore = Depends(get_digest_store)):
    # both checks happen before the channel opens, so they get a plain JSON status
    try:
        transcript = require_transcript(req.transcript)
    except TranscriptRequiredError as e:
        return _error(str(e), 400)
    try:
        provider = get_provider()
    except ProviderError as e:
        logger.error("streaming digest rejected: %s", e)
        return _error("Google API key not configured", 500)

    events = stream_digest(transcript, store=store, provider=provider)

    async def streamer() -> AsyncIterator[bytes]:
        async for event in events:
            yield encode_event(event)

    return StreamingResponse(streamer(), media_type="text/event-stream", headers=STREAM_HEADERS)
