from omi_common.infrastructure.interfaces import StorageClient, StorageObject

__all__ = ["StorageClient", "StorageObject"]
