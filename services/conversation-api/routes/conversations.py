"""Conversation-related API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from omi_common import InvalidCredentialsError, SigningError
from omi_common.logging import setup_logging

from dependencies import (
    get_audio_handler,
    get_current_user_id,
    get_message_handler,
    get_recording_repository,
)
from exceptions import CredentialsNotFoundError, RecordingNotFoundError
from handlers import AudioHandler, MessageHandler
from repositories import RecordingRepository
from response_models import (
    AddMessageRequest,
    AudioEnvelope,
    AudioFileResponse,
    ConversationResponse,
)

logger = setup_logging()

router = APIRouter(prefix="/conversations", tags=["conversations"])

UserIdDep = Annotated[str, Depends(get_current_user_id)]
MessageHandlerDep = Annotated[MessageHandler, Depends(get_message_handler)]
AudioHandlerDep = Annotated[AudioHandler, Depends(get_audio_handler)]
RepositoryDep = Annotated[RecordingRepository, Depends(get_recording_repository)]


@router.get("/search", response_model=list[ConversationResponse])
def search_conversations(
    user_id: UserIdDep, repo: RepositoryDep, q: str = ""
) -> list[ConversationResponse]:
    """Finds the caller's conversations by name or transcript text, ignoring case."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        recordings = repo.search(user_id, q)
    except Exception as e:
        logger.error(f"Error searching conversations for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return [ConversationResponse.from_recording(r) for r in recordings]


@router.post(
    "/{conversation_id}/messages",
    response_model=ConversationResponse,
    status_code=201,
)
def add_message(
    conversation_id: UUID,
    request: AddMessageRequest,
    user_id: UserIdDep,
    handler: MessageHandlerDep,
) -> ConversationResponse:
    """
    Appends a chat message to a conversation.

    The first message on an untranscribed conversation starts its
    transcription in the background.
    """
    try:
        recording = handler.add_message(conversation_id, user_id, request.content)
    except RecordingNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except Exception as e:
        logger.error(f"Error adding message to conversation {conversation_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return ConversationResponse.from_recording(recording)


@router.get("/{conversation_id}/audio", response_model=AudioEnvelope)
def get_audio(
    conversation_id: UUID, user_id: UserIdDep, handler: AudioHandlerDep
) -> AudioEnvelope:
    """Returns a freshly signed playback URL for the conversation's audio."""
    try:
        recording = handler.playback_url(conversation_id, user_id)
    except RecordingNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except CredentialsNotFoundError:
        raise HTTPException(status_code=404, detail="Storage credentials not found")
    except (InvalidCredentialsError, SigningError) as e:
        logger.error(f"Error signing audio URL for {conversation_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not sign audio URL")
    except Exception as e:
        logger.error(f"Error getting audio for conversation {conversation_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    if not recording.has_audio:
        return AudioEnvelope(audio_file=None)
    return AudioEnvelope(
        audio_file=AudioFileResponse(
            name=recording.audio_object_key, url=recording.audio_url
        )
    )
