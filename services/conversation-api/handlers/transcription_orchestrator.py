"""Drives a single recording from available audio to a terminal transcript."""

import time
from collections.abc import Callable
from datetime import timedelta
from uuid import UUID

from omi_common import InvalidCredentialsError, SigningError, TranscriptionStatus
from omi_common.logging import setup_logging
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from domain import (
    Credentials,
    TranscriptBuilder,
    TranscriptionOutcome,
    TranscriptionUpdate,
)
from exceptions import (
    AudioReferenceMissingError,
    ProviderError,
    RecordingVanishedError,
)
from infrastructure.interfaces import StorageClientFactory, TranscriptionService
from repositories import RecordingRepository

logger = setup_logging()


class TranscriptionOrchestrator:
    """
    Runs the bounded-retry transcription state machine for one recording.

    Each attempt re-reads the recording, signs a fresh read URL for its
    audio object and hands it to the transcription service. Provider
    failures are retried with a linear backoff (``attempt * backoff``);
    once the attempts are exhausted the recording is marked failed. Missing
    recordings, missing audio and signing problems end the run immediately
    without touching the recording.

    Only terminal states are written, so re-running the orchestrator for a
    recording that is still processing is harmless apart from the extra
    provider calls.
    """

    def __init__(
        self,
        repository: RecordingRepository,
        transcription_service: TranscriptionService,
        storage_factory: StorageClientFactory,
        transcript_builder: TranscriptBuilder,
        max_attempts: int = 3,
        backoff_seconds: float = 5.0,
        signed_url_ttl: timedelta = timedelta(minutes=15),
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._repository = repository
        self._transcription_service = transcription_service
        self._storage_factory = storage_factory
        self._transcript_builder = transcript_builder
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._signed_url_ttl = signed_url_ttl
        self._sleep = sleep

    def run(
        self, recording_id: UUID, owner_id: str, credentials: Credentials
    ) -> TranscriptionStatus:
        """
        Transcribes a recording and stores the terminal result.

        Args:
            recording_id: The recording to transcribe.
            owner_id: The recording's owner.
            credentials: The owner's storage and provider credentials.

        Returns:
            The terminal status written: DONE or FAILED.

        Raises:
            RecordingVanishedError: If the recording no longer exists.
            AudioReferenceMissingError: If the recording has no audio object.
            SigningError: If no read URL can be generated for the audio.
            RecordingPersistenceError: If the recording store fails.
        """
        api_key = credentials.provider_api_key.get_secret_value()
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(
                start=self._backoff_seconds, increment=self._backoff_seconds
            ),
            retry=retry_if_exception_type(ProviderError),
            sleep=self._sleep,
            before_sleep=lambda state: self._log_failed_attempt(
                recording_id, state.attempt_number, state.outcome.exception()
            ),
        )

        try:
            outcome = retrying(
                self._attempt, recording_id, owner_id, credentials, api_key
            )
        except RetryError as e:
            last = e.last_attempt
            self._log_failed_attempt(recording_id, last.attempt_number, last.exception())
            self._store(recording_id, self._transcript_builder.failed())
            return TranscriptionStatus.FAILED

        self._store(recording_id, self._transcript_builder.completed(outcome))
        return TranscriptionStatus.DONE

    def _attempt(
        self, recording_id: UUID, owner_id: str, credentials: Credentials, api_key: str
    ) -> TranscriptionOutcome:
        audio_url = self._signed_audio_url(recording_id, owner_id, credentials)
        logger.info(
            "Transcription attempt started",
            extra={"recording_id": str(recording_id), "max_attempts": self._max_attempts},
        )
        return self._transcription_service.transcribe(audio_url, api_key)

    @staticmethod
    def _log_failed_attempt(
        recording_id: UUID, attempt_number: int, error: ProviderError
    ) -> None:
        logger.warning(
            "Transcription attempt failed",
            extra={
                "recording_id": str(recording_id),
                "attempt": attempt_number,
                "phase": error.phase,
                "error": str(error),
            },
        )

    def _signed_audio_url(
        self, recording_id: UUID, owner_id: str, credentials: Credentials
    ) -> str:
        # Re-read every attempt: the audio reference may have been edited.
        recording = self._repository.find_by_id(recording_id, owner_id)
        if recording is None:
            raise RecordingVanishedError(recording_id)
        if not recording.has_audio:
            raise AudioReferenceMissingError(recording_id)

        try:
            storage = self._storage_factory.for_credentials(credentials)
        except InvalidCredentialsError as e:
            raise SigningError(recording.audio_object_key, e) from e

        return storage.signed_read_url(
            credentials.bucket_name, recording.audio_object_key, self._signed_url_ttl
        )

    def _store(self, recording_id: UUID, update: TranscriptionUpdate) -> None:
        if not self._repository.update_transcription_result(recording_id, update):
            raise RecordingVanishedError(recording_id)
        logger.info(
            "Transcription finished",
            extra={"recording_id": str(recording_id), "status": update.status.value},
        )
