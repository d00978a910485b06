"""Handler for audio uploads and playback URLs."""

import mimetypes
import time
from collections.abc import Callable
from datetime import timedelta
from typing import BinaryIO
from uuid import UUID

from omi_common import TranscriptionStatus
from omi_common.db_models import Recording
from omi_common.logging import setup_logging

from domain import TranscriptBuilder
from exceptions import RecordingNotFoundError
from infrastructure.interfaces import StorageClientFactory
from repositories import CredentialsRepository, RecordingRepository

from .transcription_dispatcher import TranscriptionDispatcher

logger = setup_logging()


class AudioHandler:
    """Stores uploaded audio in the owner's bucket and signs playback URLs."""

    def __init__(
        self,
        credentials_repository: CredentialsRepository,
        recording_repository: RecordingRepository,
        storage_factory: StorageClientFactory,
        dispatcher: TranscriptionDispatcher,
        transcript_builder: TranscriptBuilder,
        signed_url_ttl: timedelta = timedelta(minutes=15),
        default_content_type: str = "audio/mpeg",
        clock_ns: Callable[[], int] = time.time_ns,
    ):
        self._credentials = credentials_repository
        self._recordings = recording_repository
        self._storage_factory = storage_factory
        self._dispatcher = dispatcher
        self._transcript_builder = transcript_builder
        self._signed_url_ttl = signed_url_ttl
        self._default_content_type = default_content_type
        self._clock_ns = clock_ns

    def upload(
        self,
        owner_id: str,
        filename: str,
        data: BinaryIO,
        size: int,
        content_type: str | None = None,
    ) -> Recording:
        """
        Uploads an audio file and schedules its transcription.

        The upload happens in-line; transcription runs in the background.
        If the recording cannot be stored after the upload succeeded, the
        uploaded object stays in the bucket.

        Returns:
            The new recording, in processing state.

        Raises:
            CredentialsNotFoundError: If the owner has no credentials.
            InvalidCredentialsError: If the stored credentials cannot be decoded.
            StorageUploadError: If the upload fails.
            SigningError: If no read URL can be generated.
            RecordingPersistenceError: If the recording cannot be stored.
        """
        credentials = self._credentials.get(owner_id)
        storage = self._storage_factory.for_credentials(credentials)

        object_name = self._transcript_builder.upload_object_key(
            filename, self._clock_ns()
        )
        storage.upload(
            bucket_name=credentials.bucket_name,
            object_name=object_name,
            data=data,
            size=size,
            content_type=content_type or self._guess_content_type(filename),
        )
        audio_url = storage.signed_read_url(
            credentials.bucket_name, object_name, self._signed_url_ttl
        )

        recording = self._recordings.insert(
            Recording(
                owner_id=owner_id,
                name=filename,
                audio_object_key=object_name,
                audio_url=audio_url,
                transcription_status=TranscriptionStatus.PROCESSING,
                transcript=[
                    s.model_dump(mode="json")
                    for s in self._transcript_builder.processing_transcript()
                ],
            )
        )
        self._dispatcher.dispatch(recording.id, owner_id, credentials)

        logger.info(
            "Audio uploaded",
            extra={
                "recording_id": str(recording.id),
                "object_name": object_name,
                "size": size,
            },
        )
        return recording

    def playback_url(self, recording_id: UUID, owner_id: str) -> Recording:
        """
        Returns the recording with a freshly signed audio URL.

        The URL is not persisted. Recordings without audio are returned
        unchanged and do not require credentials.

        Raises:
            RecordingNotFoundError: If the owner has no such recording.
            CredentialsNotFoundError: If the owner has no credentials.
            SigningError: If no read URL can be generated.
        """
        recording = self._recordings.find_by_id(recording_id, owner_id)
        if recording is None:
            raise RecordingNotFoundError(recording_id)
        if not recording.has_audio:
            return recording

        credentials = self._credentials.get(owner_id)
        storage = self._storage_factory.for_credentials(credentials)
        recording.audio_url = storage.signed_read_url(
            credentials.bucket_name, recording.audio_object_key, self._signed_url_ttl
        )
        return recording

    def _guess_content_type(self, filename: str) -> str:
        guessed, _ = mimetypes.guess_type(filename)
        return guessed or self._default_content_type
