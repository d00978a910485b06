"""Domain models for the conversation transcription pipeline."""

from datetime import datetime
from uuid import UUID, uuid4

from omi_common import TranscriptionStatus
from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

PROCESSING_SENTINEL = "Processing transcription..."
FAILED_TRANSCRIPT_SENTINEL = "Error transcribing audio after multiple attempts"
FAILED_SUMMARY_SENTINEL = "Error generating summary"
FAILED_ACTION_ITEMS_SENTINEL = "Error generating action items"

# Prompt texts sent to the provider; action items are matched on exact text.
ACTION_ITEMS_PROMPT = "Extract the key action items the transcription as bullet points"
TITLE_PROMPT = "Generate a title from this transcription"

# Statuses the bucket scan re-triggers transcription for.
RETRIGGERABLE_STATUSES = frozenset(
    {TranscriptionStatus.NOT_STARTED, TranscriptionStatus.PROCESSING}
)


class Word(BaseModel, frozen=True):
    """A single recognised word with timing."""

    word: str
    start: float = 0.0
    end: float = 0.0
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class Sentence(BaseModel, frozen=True):
    """
    A transcript segment as returned by the provider, in provider order.

    Utterance-level segments carry their text under ``text`` rather than
    ``sentence``; both spellings are accepted so either segmentation can be
    stored as-is.
    """

    sentence: str = Field(validation_alias=AliasChoices("sentence", "text"))
    start: float = 0.0
    end: float = 0.0
    words: list[Word] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    speaker: str | None = None
    channel: int | None = None

    @field_validator("speaker", mode="before")
    @classmethod
    def _speaker_as_text(cls, value):
        # Providers label speakers with integers.
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @model_validator(mode="after")
    def _check_offsets(self) -> "Sentence":
        if self.end < self.start:
            raise ValueError(f"sentence ends ({self.end}) before it starts ({self.start})")
        return self


class TranscriptionOutcome(BaseModel, frozen=True):
    """Successful provider result mapped into the domain."""

    sentences: list[Sentence]
    # Full transcript text; the provider field is named "summary" downstream.
    summary: str
    action_items: list[str]


class TranscriptionUpdate(BaseModel, frozen=True):
    """The fields overwritten on a recording by a status transition."""

    status: TranscriptionStatus
    transcript: list[Sentence]
    summary: str
    action_items: list[str]
    updated_at: datetime


class ChatMessage(BaseModel, frozen=True):
    """A chat message attached to a recording."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    content: str
    timestamp: datetime


class Credentials(BaseModel, frozen=True):
    """Read-only view of an owner's storage and provider credentials."""

    owner_id: str
    encoded_credentials: SecretStr
    bucket_name: str
    provider_api_key: SecretStr
