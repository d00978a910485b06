"""Handler for chat messages added to a recording."""

from datetime import datetime, timezone
from uuid import UUID

from omi_common import TranscriptionStatus
from omi_common.db_models import Recording
from omi_common.logging import setup_logging

from domain import ChatMessage
from exceptions import RecordingNotFoundError
from repositories import CredentialsRepository, RecordingRepository

from .transcription_dispatcher import TranscriptionDispatcher

logger = setup_logging()


class MessageHandler:
    """Appends chat messages and kicks off transcription on the first one."""

    def __init__(
        self,
        recording_repository: RecordingRepository,
        credentials_repository: CredentialsRepository,
        dispatcher: TranscriptionDispatcher,
    ):
        self._recordings = recording_repository
        self._credentials = credentials_repository
        self._dispatcher = dispatcher

    def add_message(self, recording_id: UUID, owner_id: str, content: str) -> Recording:
        """
        Adds a chat message to the owner's recording.

        The first message on a recording that has audio but was never
        transcribed schedules a transcription, provided the owner has
        credentials. A recording already processing is left to the run that
        is handling it.

        Returns:
            The updated recording.

        Raises:
            RecordingNotFoundError: If the owner has no such recording.
            RecordingPersistenceError: If the recording store fails.
        """
        recording = self._recordings.find_by_id(recording_id, owner_id)
        if recording is None:
            raise RecordingNotFoundError(recording_id)

        if self._should_transcribe(recording):
            credentials = self._credentials.find(owner_id)
            if credentials is not None:
                self._dispatcher.dispatch(recording.id, owner_id, credentials)
            else:
                logger.info(
                    "No credentials, transcription not started",
                    extra={"recording_id": str(recording_id)},
                )

        message = ChatMessage(
            user_id=owner_id,
            content=content,
            timestamp=datetime.now(timezone.utc),
        )
        updated = self._recordings.append_message(recording_id, owner_id, message)
        if updated is None:
            raise RecordingNotFoundError(recording_id)

        logger.info(
            "Message added",
            extra={"recording_id": str(recording_id), "message_id": str(message.id)},
        )
        return updated

    @staticmethod
    def _should_transcribe(recording: Recording) -> bool:
        return (
            not recording.chat_history
            and recording.has_audio
            and recording.transcription_status == TranscriptionStatus.NOT_STARTED
        )
