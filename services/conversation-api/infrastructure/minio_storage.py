"""MinIO implementation of the StorageClient interface."""

import base64
import binascii
from collections.abc import Callable, Iterator
from datetime import timedelta
from typing import BinaryIO

from minio import Minio
from omi_common import (
    InvalidCredentialsError,
    MinioConfig,
    SigningError,
    StorageListError,
    StorageUploadError,
    setup_logging,
)
from omi_common.infrastructure import StorageClient, StorageObject
from omi_common.minio import get_minio_client
from pydantic import ValidationError

from domain.models import Credentials

from .interfaces import StorageClientFactory

logger = setup_logging()

# Multipart chunk size for uploads of unknown length.
_PART_SIZE = 10 * 1024 * 1024


class MinioStorageClient(StorageClient):
    """Handles bucket listing, URL signing and uploads using MinIO."""

    def __init__(self, client: Minio):
        self._client = client

    def list_objects(self, bucket_name: str) -> Iterator[StorageObject]:
        count = 0
        try:
            for obj in self._client.list_objects(bucket_name, recursive=True):
                if obj.is_dir:
                    continue
                count += 1
                # S3 listings only report a modification time.
                yield StorageObject(
                    name=obj.object_name,
                    created_at=obj.last_modified,
                    updated_at=obj.last_modified,
                )
        except Exception as e:
            logger.exception(
                "MinIO listing failed",
                extra={"bucket_name": bucket_name, "listed": count},
            )
            raise StorageListError(bucket_name, e) from e

        logger.info(
            "Bucket listed", extra={"bucket_name": bucket_name, "object_count": count}
        )

    def signed_read_url(
        self, bucket_name: str, object_name: str, ttl: timedelta
    ) -> str:
        try:
            return self._client.presigned_get_object(
                bucket_name, object_name, expires=ttl
            )
        except Exception as e:
            logger.exception(
                "MinIO URL signing failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise SigningError(object_name, e) from e

    def upload(
        self,
        bucket_name: str,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        try:
            self._client.put_object(
                bucket_name=bucket_name,
                object_name=object_name,
                data=data,
                length=size,
                part_size=_PART_SIZE if size < 0 else 0,
                content_type=content_type,
            )
            logger.info(
                "File uploaded to MinIO",
                extra={
                    "bucket_name": bucket_name,
                    "object_name": object_name,
                    "size": size,
                },
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e


class MinioStorageFactory(StorageClientFactory):
    """Builds MinIO clients from an owner's base64-encoded credentials."""

    def __init__(self, client_builder: Callable[[MinioConfig], Minio] = get_minio_client):
        self._client_builder = client_builder

    def for_credentials(self, credentials: Credentials) -> StorageClient:
        return MinioStorageClient(self._client_builder(self.decode(credentials)))

    @staticmethod
    def decode(credentials: Credentials) -> MinioConfig:
        """Decodes the stored credentials document into connection settings."""
        encoded = credentials.encoded_credentials.get_secret_value()
        try:
            raw = base64.b64decode(encoded, validate=True)
            return MinioConfig.model_validate_json(raw)
        except (binascii.Error, ValueError, ValidationError) as e:
            # The cause may echo secret material; only the owner is logged.
            logger.error(
                "Stored storage credentials are invalid",
                extra={"owner_id": credentials.owner_id},
            )
            raise InvalidCredentialsError(credentials.owner_id, e) from e
