# append-only digest records, one instance per app (app.state.digest_store)
# records are created once after a successful generation and never updated or deleted

from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4
import asyncio

from meeting_digest.schemas.digest import StoredDigest


class DigestStoreError(Exception):
    pass


class DigestStore:
    def __init__(self) -> None:
        """
        self._by_id: internal id -> record
        self._by_public_id: public (shareable) id -> internal id
        """
        self._by_id: Dict[str, StoredDigest] = {}
        self._by_public_id: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def create(self, *, public_id: str, original_transcript: str, summary: str) -> StoredDigest:
        record = StoredDigest(
            id=str(uuid4()),
            public_id=public_id,
            original_transcript=original_transcript,
            summary=summary,
            created_at=datetime.now(timezone.utc),
        )
        async with self._lock:
            # uuid4 collisions are not retried; a duplicate here is a caller bug
            if public_id in self._by_public_id:
                raise DigestStoreError(f"Digest {public_id} already exists")
            self._by_id[record.id] = record
            self._by_public_id[public_id] = record.id
        return record

    async def find_by_public_id(self, public_id: str) -> Optional[StoredDigest]:
        async with self._lock:
            internal_id = self._by_public_id.get(public_id)
            return self._by_id.get(internal_id) if internal_id else None

    async def find_all(self) -> List[StoredDigest]:
        # newest first
        async with self._lock:
            records = list(self._by_id.values())
        return sorted(records, key=lambda d: d.created_at, reverse=True)
