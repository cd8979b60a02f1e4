# tests/test_client.py
import pytest
from httpx import ASGITransport

from meeting_digest.api.routers import digests as digests_router
from meeting_digest.client import DigestClient, DigestStreamError
from meeting_digest.core.errors import ProviderError
from meeting_digest.providers.mock import MOCK_SUMMARY
from conftest import FakeProvider


@pytest.mark.asyncio
async def test_stream_then_fetch_same_summary(app, mock_mode):
    async with DigestClient("http://test", transport=ASGITransport(app=app)) as dc:
        events = [e async for e in dc.stream_digest("Quarterly review meeting, all hands.")]
        assert events[0]["type"] == "start"
        assert events[-1]["type"] == "complete"

        streamed = "".join(e["content"] for e in events if e["type"] == "chunk")
        assert streamed == MOCK_SUMMARY

        fetched = await dc.get_digest(events[0]["publicId"])
        assert fetched["summary"] == streamed
        assert [d["publicId"] for d in await dc.list_digests()] == [events[0]["publicId"]]


@pytest.mark.asyncio
async def test_error_event_raises(app, monkeypatch):
    provider = FakeProvider(open_failures=[ProviderError("quota exceeded")])
    monkeypatch.setattr(digests_router, "get_provider", lambda: provider)
    async with DigestClient("http://test", transport=ASGITransport(app=app)) as dc:
        seen = []
        with pytest.raises(DigestStreamError) as exc:
            async for e in dc.stream_digest("some meeting"):
                seen.append(e["type"])
        assert seen == ["start"]
        assert exc.value.code == "QUOTA_ERROR"


@pytest.mark.asyncio
async def test_create_and_missing(app, monkeypatch):
    monkeypatch.setattr(digests_router, "get_provider", lambda: FakeProvider(text="done"))
    async with DigestClient("http://test", transport=ASGITransport(app=app)) as dc:
        created = await dc.create_digest("a meeting")
        assert created["summary"] == "done"
        assert await dc.get_digest("nope") is None
