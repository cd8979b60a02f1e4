# async HTTP client for the digest API
# stream_digest() yields decoded events in order and raises DigestStreamError on an error event

from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from meeting_digest.services.sse import SSEDecoder


class DigestStreamError(Exception):
    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class DigestClient:
    def __init__(
        self,
        base_url: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 120.0,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "DigestClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_digest(self, transcript: str) -> Dict[str, Any]:
        r = await self._client.post("/digests", json={"transcript": transcript})
        r.raise_for_status()
        return r.json()

    async def list_digests(self) -> List[Dict[str, Any]]:
        r = await self._client.get("/digests")
        r.raise_for_status()
        return r.json()

    async def get_digest(self, public_id: str) -> Optional[Dict[str, Any]]:
        r = await self._client.get(f"/digests/{public_id}")
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return r.json()

    async def stream_digest(self, transcript: str) -> AsyncIterator[Dict[str, Any]]:
        decoder = SSEDecoder()
        async with self._client.stream("POST", "/digests/stream", json={"transcript": transcript}) as r:
            if r.is_error:
                await r.aread()
                r.raise_for_status()
            async for raw in r.aiter_bytes():
                for event in decoder.feed(raw):
                    if event.get("type") == "error":
                        raise DigestStreamError(event.get("message", "Failed to generate digest"), event.get("code"))
                    yield event
        for event in decoder.flush():
            if event.get("type") == "error":
                raise DigestStreamError(event.get("message", "Failed to generate digest"), event.get("code"))
            yield event
