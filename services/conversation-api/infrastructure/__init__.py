"""Infrastructure layer exports."""

from .gladia_transcriber import GladiaTranscriber
from .jwt_auth import JWTAuthProvider
from .minio_storage import MinioStorageClient, MinioStorageFactory

__all__ = [
    "GladiaTranscriber",
    "JWTAuthProvider",
    "MinioStorageClient",
    "MinioStorageFactory",
]
