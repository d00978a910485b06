"""Infrastructure interface exports."""

from omi_common.infrastructure import StorageClient, StorageObject

from .auth_provider import AuthProvider
from .storage_factory import StorageClientFactory
from .transcription_service import TranscriptionService

__all__ = [
    "AuthProvider",
    "StorageClient",
    "StorageClientFactory",
    "StorageObject",
    "TranscriptionService",
]
