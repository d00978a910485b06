from omi_common.infrastructure.interfaces.storage import StorageClient, StorageObject

__all__ = [
    "StorageClient",
    "StorageObject",
]
