"""Repository for per-owner storage credentials."""

from omi_common.db_models import StorageCredentials
from omi_common.logging import setup_logging

from domain.models import Credentials
from exceptions import CredentialsNotFoundError, RecordingPersistenceError

from .recording_repository import SessionFactory

logger = setup_logging()


class CredentialsRepository:
    """
    Handles database operations for storage credentials.

    Entities are converted to the read-only Credentials view before they
    leave the repository, so secrets travel as SecretStr.
    """

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def find(self, owner_id: str) -> Credentials | None:
        """Returns the owner's credentials, or None if none are registered."""
        try:
            with self._session_factory() as db_session:
                entity = db_session.get(StorageCredentials, owner_id)
                return self._to_view(entity) if entity else None
        except Exception as e:
            logger.exception("Credentials lookup failed", extra={"owner_id": owner_id})
            raise RecordingPersistenceError("find_credentials", cause=e) from e

    def get(self, owner_id: str) -> Credentials:
        """
        Returns the owner's credentials.

        Raises:
            CredentialsNotFoundError: If the owner has none.
        """
        credentials = self.find(owner_id)
        if credentials is None:
            raise CredentialsNotFoundError(owner_id)
        return credentials

    def upsert(
        self,
        owner_id: str,
        encoded_credentials: str,
        bucket_name: str,
        provider_api_key: str,
    ) -> Credentials:
        """Creates or replaces the owner's credentials."""
        entity = StorageCredentials(
            owner_id=owner_id,
            credentials=encoded_credentials,
            bucket_name=bucket_name,
            provider_api_key=provider_api_key,
        )
        try:
            with self._session_factory() as db_session:
                entity = db_session.merge(entity)
                db_session.commit()
                db_session.refresh(entity)
                view = self._to_view(entity)
        except Exception as e:
            logger.exception("Failed to save credentials", extra={"owner_id": owner_id})
            raise RecordingPersistenceError("upsert_credentials", cause=e) from e

        logger.info(
            "Credentials saved", extra={"owner_id": owner_id, "bucket_name": bucket_name}
        )
        return view

    @staticmethod
    def _to_view(entity: StorageCredentials) -> Credentials:
        return Credentials(
            owner_id=entity.owner_id,
            encoded_credentials=entity.credentials,
            bucket_name=entity.bucket_name,
            provider_api_key=entity.provider_api_key,
        )
