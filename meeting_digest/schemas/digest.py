from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class DigestRequest(BaseModel):
    # optional so an empty/missing transcript gets the 400 body instead of a 422
    transcript: Optional[str] = None


class Digest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    public_id: str = Field(alias="publicId")
    summary: str
    created_at: datetime = Field(alias="createdAt")


class StoredDigest(Digest):
    original_transcript: str = Field(alias="originalTranscript")

    def public(self) -> Digest:
        return Digest(id=self.id, public_id=self.public_id, summary=self.summary, created_at=self.created_at)
