"""Abstract interface for building per-owner storage clients."""

from abc import ABC, abstractmethod

from omi_common.infrastructure import StorageClient

from domain.models import Credentials


class StorageClientFactory(ABC):
    """Builds a storage client bound to an owner's credentials."""

    @abstractmethod
    def for_credentials(self, credentials: Credentials) -> StorageClient:
        """
        Builds a client for the owner's bucket endpoint.

        Raises:
            InvalidCredentialsError: If the stored credentials cannot be decoded.
        """
        pass
