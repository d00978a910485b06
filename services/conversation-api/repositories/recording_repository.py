"""Repository for recording persistence."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from uuid import UUID

from omi_common.db_models import Recording
from omi_common.logging import setup_logging
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from domain.models import ChatMessage, TranscriptionUpdate
from exceptions import DuplicateRecordingError, RecordingPersistenceError

logger = setup_logging()

SessionFactory = Callable[[], AbstractContextManager[Session]]


class RecordingRepository:
    """
    Handles database operations for recordings.

    Every lookup is scoped by owner: a recording that belongs to someone else
    is reported exactly like a missing one. Returned entities are detached
    from their session with all columns loaded.
    """

    def __init__(self, session_factory: SessionFactory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def find_by_id(self, recording_id: UUID, owner_id: str) -> Recording | None:
        """Returns the owner's recording with this id, or None."""
        statement = select(Recording).where(
            Recording.id == recording_id, Recording.owner_id == owner_id
        )
        return self._first(statement, "find_by_id")

    def find_by_audio_object_key(
        self, owner_id: str, object_key: str
    ) -> Recording | None:
        """Returns the owner's recording referencing this storage object, or None."""
        statement = select(Recording).where(
            Recording.owner_id == owner_id,
            Recording.audio_object_key == object_key,
        )
        return self._first(statement, "find_by_audio_object_key")

    def insert(self, recording: Recording) -> Recording:
        """
        Persists a new recording.

        Raises:
            DuplicateRecordingError: If the owner already has a recording for
                the same storage object.
            RecordingPersistenceError: If the insert fails.
        """
        owner_id, object_key = recording.owner_id, recording.audio_object_key
        try:
            with self._session_factory() as db_session:
                db_session.add(recording)
                db_session.commit()
                db_session.refresh(recording)
        except IntegrityError as e:
            if object_key is None:
                raise RecordingPersistenceError("insert", cause=e) from e
            logger.info(
                "Recording already exists",
                extra={"owner_id": owner_id, "object_key": object_key},
            )
            raise DuplicateRecordingError(owner_id, object_key, cause=e) from e
        except Exception as e:
            logger.exception(
                "Failed to insert recording",
                extra={"owner_id": owner_id, "object_key": object_key},
            )
            raise RecordingPersistenceError("insert", cause=e) from e

        logger.info(
            "Recording created",
            extra={"recording_id": str(recording.id), "owner_id": recording.owner_id},
        )
        return recording

    def update_transcription_result(
        self, recording_id: UUID, update: TranscriptionUpdate
    ) -> bool:
        """
        Overwrites transcript, summary, action items, status and update time.

        The write is unconditional: concurrent writers for the same recording
        resolve as last-write-wins.

        Returns:
            False if the recording no longer exists, True otherwise.

        Raises:
            RecordingPersistenceError: If the update fails.
        """
        try:
            with self._session_factory() as db_session:
                recording = db_session.get(Recording, recording_id)
                if recording is None:
                    return False

                recording.transcription_status = update.status
                recording.transcript = [
                    sentence.model_dump(mode="json") for sentence in update.transcript
                ]
                recording.summary = update.summary
                recording.action_items = list(update.action_items)
                recording.updated_at = update.updated_at
                db_session.add(recording)
                db_session.commit()
        except Exception as e:
            logger.exception(
                "Failed to store transcription result",
                extra={"recording_id": str(recording_id)},
            )
            raise RecordingPersistenceError("update_transcription_result", cause=e) from e

        logger.info(
            "Transcription result stored",
            extra={"recording_id": str(recording_id), "status": update.status.value},
        )
        return True

    def append_message(
        self, recording_id: UUID, owner_id: str, message: ChatMessage
    ) -> Recording | None:
        """
        Appends a chat message to the owner's recording.

        Returns:
            The updated recording, or None if the owner has no such recording.

        Raises:
            RecordingPersistenceError: If the update fails.
        """
        try:
            with self._session_factory() as db_session:
                statement = select(Recording).where(
                    Recording.id == recording_id, Recording.owner_id == owner_id
                )
                recording = db_session.exec(statement).first()
                if recording is None:
                    return None

                # Reassign so the JSON column is flagged as modified.
                recording.chat_history = [
                    *recording.chat_history,
                    message.model_dump(mode="json"),
                ]
                recording.updated_at = message.timestamp
                db_session.add(recording)
                db_session.commit()
                db_session.refresh(recording)
                return recording
        except Exception as e:
            logger.exception(
                "Failed to append message",
                extra={"recording_id": str(recording_id)},
            )
            raise RecordingPersistenceError("append_message", cause=e) from e

    def search(self, owner_id: str, query: str) -> list[Recording]:
        """
        Returns the owner's recordings whose name or any transcript sentence
        contains ``query``, ignoring case, oldest first.

        The query is matched as plain text. Transcript sentences live in a
        JSON column, so matching happens after loading the owner's rows.

        Raises:
            RecordingPersistenceError: If the lookup fails.
        """
        needle = query.casefold()
        statement = (
            select(Recording)
            .where(Recording.owner_id == owner_id)
            .order_by(Recording.created_at)
        )
        try:
            with self._session_factory() as db_session:
                recordings = db_session.exec(statement).all()
        except Exception as e:
            logger.exception("Recording search failed", extra={"owner_id": owner_id})
            raise RecordingPersistenceError("search", cause=e) from e

        return [r for r in recordings if self._matches(r, needle)]

    @staticmethod
    def _matches(recording: Recording, needle: str) -> bool:
        if needle in recording.name.casefold():
            return True
        return any(
            needle in str(sentence.get("sentence", "")).casefold()
            for sentence in recording.transcript
        )

    def _first(self, statement, operation: str) -> Recording | None:
        try:
            with self._session_factory() as db_session:
                return db_session.exec(statement).first()
        except Exception as e:
            logger.exception("Recording lookup failed", extra={"operation": operation})
            raise RecordingPersistenceError(operation, cause=e) from e
