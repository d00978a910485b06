from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptionStatus(str, Enum):
    NOT_STARTED = "not_started"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class Recording(SQLModel, table=True):
    """A user's audio recording together with its transcript and chat."""

    __tablename__ = "recordings"
    # NULL keys never collide, so recordings without audio are unaffected.
    __table_args__ = (
        UniqueConstraint("owner_id", "audio_object_key", name="uq_recordings_owner_object"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: str = Field(max_length=255, index=True)
    name: str = Field(default="", max_length=1024)

    # Object key inside the owner's bucket; None for recordings without audio.
    audio_object_key: Optional[str] = Field(default=None, max_length=1024, index=True)
    audio_url: str = Field(default="")

    transcription_status: TranscriptionStatus = Field(
        default=TranscriptionStatus.NOT_STARTED
    )
    transcript: List[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    summary: str = Field(default="")
    action_items: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    chat_history: List[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_object_key)


class StorageCredentials(SQLModel, table=True):
    """Per-user bucket credentials and transcription provider key."""

    __tablename__ = "storage_credentials"

    owner_id: str = Field(primary_key=True, max_length=255)
    # base64-encoded JSON, see omi_common.config.MinioConfig
    credentials: str
    bucket_name: str = Field(max_length=255)
    provider_api_key: str
