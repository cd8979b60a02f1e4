# tests/test_digest_store.py
import asyncio
import pytest

from meeting_digest.services.digest_store import DigestStore, DigestStoreError


@pytest.mark.asyncio
async def test_create_and_find():
    s = DigestStore()
    rec = await s.create(public_id="pub-1", original_transcript="t", summary="s")
    assert rec.id and rec.id != "pub-1"
    assert rec.created_at.tzinfo is not None
    found = await s.find_by_public_id("pub-1")
    assert found == rec
    assert await s.find_by_public_id("missing") is None


@pytest.mark.asyncio
async def test_find_all_newest_first():
    s = DigestStore()
    for i in range(3):
        await s.create(public_id=f"p{i}", original_transcript="t", summary=f"s{i}")
        await asyncio.sleep(0.002)
    assert [d.public_id for d in await s.find_all()] == ["p2", "p1", "p0"]


@pytest.mark.asyncio
async def test_duplicate_public_id_rejected():
    s = DigestStore()
    await s.create(public_id="dup", original_transcript="t", summary="s")
    with pytest.raises(DigestStoreError):
        await s.create(public_id="dup", original_transcript="t", summary="other")
    assert len(await s.find_all()) == 1


@pytest.mark.asyncio
async def test_public_view_drops_transcript():
    s = DigestStore()
    rec = await s.create(public_id="p", original_transcript="secret transcript", summary="s")
    data = rec.public().model_dump(mode="json", by_alias=True)
    assert set(data) == {"id", "publicId", "summary", "createdAt"}


@pytest.mark.asyncio
async def test_concurrent_creates():
    s = DigestStore()
    await asyncio.gather(*(s.create(public_id=f"c{i}", original_transcript="t", summary="s") for i in range(20)))
    assert len(await s.find_all()) == 20
