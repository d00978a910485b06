"""Reconciles an owner's bucket contents with their recordings."""

from omi_common import StorageListError, TranscriptionStatus
from omi_common.db_models import Recording
from omi_common.infrastructure import StorageObject
from omi_common.logging import setup_logging

from domain import RETRIGGERABLE_STATUSES, TranscriptBuilder
from exceptions import DuplicateRecordingError
from infrastructure.interfaces import StorageClientFactory
from repositories import CredentialsRepository, RecordingRepository

from .transcription_dispatcher import TranscriptionDispatcher

logger = setup_logging()


class BucketReconciler:
    """Creates recordings for unseen bucket objects and restarts stalled ones."""

    def __init__(
        self,
        credentials_repository: CredentialsRepository,
        recording_repository: RecordingRepository,
        storage_factory: StorageClientFactory,
        dispatcher: TranscriptionDispatcher,
        transcript_builder: TranscriptBuilder,
    ):
        self._credentials = credentials_repository
        self._recordings = recording_repository
        self._storage_factory = storage_factory
        self._dispatcher = dispatcher
        self._transcript_builder = transcript_builder

    def reconcile(self, owner_id: str) -> list[Recording]:
        """
        Scans the owner's bucket and brings their recordings up to date.

        Objects without a recording get one, seeded as processing, and are
        queued for transcription. Existing recordings that never started or
        are still processing are queued again. Transcription runs in the
        background; this call does not wait for it.

        Args:
            owner_id: The bucket owner.

        Returns:
            The recordings created by this scan, in listing order.

        Raises:
            CredentialsNotFoundError: If the owner has no credentials.
            InvalidCredentialsError: If the stored credentials cannot be decoded.
            StorageListError: If listing fails; ``created`` holds the
                recordings created before the failure, which are kept.
            RecordingPersistenceError: If the recording store fails.
        """
        credentials = self._credentials.get(owner_id)
        storage = self._storage_factory.for_credentials(credentials)

        created: list[Recording] = []
        retriggered = 0
        try:
            for stored in storage.list_objects(credentials.bucket_name):
                existing = self._recordings.find_by_audio_object_key(
                    owner_id, stored.name
                )
                if existing is None:
                    recording = self._create(owner_id, stored)
                    if recording is None:
                        continue
                    created.append(recording)
                    self._dispatcher.dispatch(recording.id, owner_id, credentials)
                elif existing.transcription_status in RETRIGGERABLE_STATUSES:
                    retriggered += 1
                    self._dispatcher.dispatch(existing.id, owner_id, credentials)
        except StorageListError as e:
            e.created = created
            logger.error(
                "Bucket scan aborted",
                extra={"owner_id": owner_id, "created": len(created)},
            )
            raise

        logger.info(
            "Bucket reconciled",
            extra={
                "owner_id": owner_id,
                "created": len(created),
                "retriggered": retriggered,
            },
        )
        return created

    def _create(self, owner_id: str, stored: StorageObject) -> Recording | None:
        """Inserts a recording for the object; None if a concurrent scan won."""
        recording = Recording(
            owner_id=owner_id,
            name=self._transcript_builder.name_from_object_key(stored.name),
            audio_object_key=stored.name,
            audio_url="",
            transcription_status=TranscriptionStatus.PROCESSING,
            transcript=[
                s.model_dump(mode="json")
                for s in self._transcript_builder.processing_transcript()
            ],
            created_at=stored.created_at,
            updated_at=stored.updated_at,
        )
        try:
            return self._recordings.insert(recording)
        except DuplicateRecordingError:
            return None
