"""Abstract interface for object storage operations."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import datetime, timedelta
from typing import BinaryIO

from pydantic import BaseModel


class StorageObject(BaseModel, frozen=True):
    """An object as reported by a bucket listing."""

    name: str
    created_at: datetime
    updated_at: datetime


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def list_objects(self, bucket_name: str) -> Iterator[StorageObject]:
        """
        Streams every object in a bucket, in the backend's native order.

        Args:
            bucket_name: The storage bucket name.

        Yields:
            One StorageObject per stored object.

        Raises:
            StorageListError: If the listing fails at any point.
        """

    @abstractmethod
    def signed_read_url(
        self, bucket_name: str, object_name: str, ttl: timedelta
    ) -> str:
        """
        Generates a time-limited URL granting read access to an object.

        Args:
            bucket_name: The storage bucket name.
            object_name: The object path/name in storage.
            ttl: How long the URL stays valid.

        Returns:
            The signed URL.

        Raises:
            SigningError: If the URL cannot be generated.
        """

    @abstractmethod
    def upload(
        self,
        bucket_name: str,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        """
        Uploads a file to storage.

        Args:
            bucket_name: The storage bucket name.
            object_name: The destination path/name in storage.
            data: File-like object containing the data.
            size: Size of the file in bytes, or -1 if unknown.
            content_type: MIME type of the file.

        Raises:
            StorageUploadError: If the upload fails.
        """
