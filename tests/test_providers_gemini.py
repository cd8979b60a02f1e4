# tests/test_providers_gemini.py
import json

import httpx
import pytest
import respx

from meeting_digest.core.errors import ErrorCode, ProviderError, classify
from meeting_digest.providers.gemini import GeminiProvider
from conftest import GEMINI_BASE

MODEL = "gemini-2.0-flash"
GENERATE = f"{GEMINI_BASE}/v1beta/models/{MODEL}:generateContent"
STREAM = f"{GEMINI_BASE}/v1beta/models/{MODEL}:streamGenerateContent"


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def sse(*payloads):
    return "".join(f"data: {json.dumps(p)}\r\n\r\n" for p in payloads).encode("utf-8")


def provider():
    return GeminiProvider("secret-key", model=MODEL, base_url=GEMINI_BASE)


@pytest.mark.asyncio
@respx.mock
async def test_generate_ok():
    # Non-streaming call returns the candidate text and sends key + generation config.
    route = respx.post(GENERATE).mock(return_value=httpx.Response(200, json=candidate("hello")))
    out = await provider().generate("hi")
    assert out == "hello"
    request = route.calls.last.request
    assert request.headers["x-goog-api-key"] == "secret-key"
    body = json.loads(request.content)
    assert body["contents"][0]["parts"][0]["text"] == "hi"
    assert body["generationConfig"]["maxOutputTokens"] == 2048


@pytest.mark.asyncio
@respx.mock
async def test_generate_empty_candidates_returns_empty_text():
    respx.post(GENERATE).mock(return_value=httpx.Response(200, json={"candidates": []}))
    assert await provider().generate("hi") == ""


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize("body", [{"candidates": ["oops"]}, ["not", "an", "object"], {"candidates": "x"}])
async def test_generate_malformed_payload_is_provider_error(body):
    respx.post(GENERATE).mock(return_value=httpx.Response(200, json=body))
    with pytest.raises(ProviderError, match="Unexpected response from Gemini"):
        await provider().generate("hi")


@pytest.mark.asyncio
@respx.mock
async def test_generate_status_error_carries_code_and_detail():
    respx.post(GENERATE).mock(
        return_value=httpx.Response(400, json={"error": {"message": "API key not valid. Please pass a valid API key."}})
    )
    with pytest.raises(ProviderError) as exc:
        await provider().generate("hi")
    assert "400" in str(exc.value)
    assert "secret-key" not in str(exc.value)
    # Gemini reports a bad key as a 400; the detail text keeps it an auth error
    assert classify(exc.value).code is ErrorCode.API_KEY_ERROR


@pytest.mark.asyncio
@respx.mock
async def test_generate_connect_error_is_network_error():
    respx.post(GENERATE).mock(side_effect=httpx.ConnectError("Connection refused"))
    with pytest.raises(ProviderError) as exc:
        await provider().generate("hi")
    assert classify(exc.value).code is ErrorCode.NETWORK_ERROR


@pytest.mark.asyncio
@respx.mock
async def test_generate_timeout_is_timeout_error():
    respx.post(GENERATE).mock(side_effect=httpx.ReadTimeout("read timed out"))
    with pytest.raises(ProviderError) as exc:
        await provider().generate("hi")
    assert classify(exc.value).code is ErrorCode.TIMEOUT_ERROR


@pytest.mark.asyncio
@respx.mock
async def test_stream_ok():
    # SSE frames are parsed in order; frames without text are skipped.
    route = respx.post(STREAM).mock(
        return_value=httpx.Response(
            200,
            content=sse(candidate("he"), {"candidates": []}, candidate("llo")),
            headers={"Content-Type": "text/event-stream"},
        )
    )
    chunks = await provider().open_stream("hi")
    acc = [c async for c in chunks]
    assert acc == ["he", "llo"]
    assert route.calls.last.request.url.params["alt"] == "sse"


@pytest.mark.asyncio
@respx.mock
async def test_stream_status_error_raised_on_open():
    # Errors before the first byte surface from open_stream itself, where a retry can see them.
    respx.post(STREAM).mock(return_value=httpx.Response(503, text="overloaded"))
    with pytest.raises(ProviderError) as exc:
        await provider().open_stream("hi")
    assert classify(exc.value).code is ErrorCode.SERVER_ERROR


@pytest.mark.asyncio
@respx.mock
async def test_stream_error_mid():
    respx.post(STREAM).mock(
        return_value=httpx.Response(
            200,
            content=sse(candidate("he"), {"error": {"message": "boom"}}),
            headers={"Content-Type": "text/event-stream"},
        )
    )
    chunks = await provider().open_stream("hi")
    acc = []
    with pytest.raises(ProviderError, match="boom"):
        async for c in chunks:
            acc.append(c)
    assert acc == ["he"]
