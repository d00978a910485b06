from omi_common.config import DatabaseConfig, MinioConfig
from omi_common.db_models import Recording, StorageCredentials, TranscriptionStatus
from omi_common.exceptions import (
    InvalidCredentialsError,
    SigningError,
    StorageListError,
    StorageUploadError,
)
from omi_common.logging import setup_logging

__all__ = [
    "setup_logging",
    "InvalidCredentialsError",
    "SigningError",
    "StorageListError",
    "StorageUploadError",
    "DatabaseConfig",
    "MinioConfig",
    "Recording",
    "StorageCredentials",
    "TranscriptionStatus",
]
