"""Request and response models for the conversation API."""

from datetime import datetime
from uuid import UUID

from omi_common import TranscriptionStatus
from omi_common.db_models import Recording
from pydantic import BaseModel, Field

from domain import ChatMessage, Sentence


class AudioFileResponse(BaseModel):
    """Audio object reference with its (possibly empty) retrieval URL."""

    name: str
    url: str


class ConversationResponse(BaseModel):
    """A recording as seen by clients."""

    id: UUID
    user_id: str
    name: str
    audio_file: AudioFileResponse | None
    transcript: list[Sentence]
    chat_history: list[ChatMessage]
    summary: str
    action_items: list[str]
    transcription_status: TranscriptionStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_recording(cls, recording: Recording) -> "ConversationResponse":
        audio_file = None
        if recording.has_audio:
            audio_file = AudioFileResponse(
                name=recording.audio_object_key, url=recording.audio_url
            )
        return cls(
            id=recording.id,
            user_id=recording.owner_id,
            name=recording.name,
            audio_file=audio_file,
            transcript=[Sentence.model_validate(s) for s in recording.transcript],
            chat_history=[ChatMessage.model_validate(m) for m in recording.chat_history],
            summary=recording.summary,
            action_items=list(recording.action_items),
            transcription_status=recording.transcription_status,
            created_at=recording.created_at,
            updated_at=recording.updated_at,
        )


class BucketSyncResponse(BaseModel):
    """Recordings created by a bucket scan."""

    new_conversations: list[ConversationResponse]


class AudioEnvelope(BaseModel):
    """Playback reference for a recording's audio."""

    audio_file: AudioFileResponse | None


class AddMessageRequest(BaseModel):
    """A chat message posted to a recording."""

    content: str = Field(min_length=1)


class CredentialsRequest(BaseModel):
    """Storage and provider credentials registered by a user."""

    credentials: str = Field(min_length=1, description="base64-encoded JSON")
    bucket_name: str = Field(min_length=1)
    provider_api_key: str = Field(min_length=1)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
