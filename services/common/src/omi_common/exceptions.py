"""Storage exceptions shared by every service that touches a user's bucket."""


class StorageListError(Exception):
    """Raised when listing the objects of a bucket fails mid-iteration."""

    def __init__(self, bucket_name: str, cause: Exception | None = None):
        self.bucket_name = bucket_name
        self.cause = cause
        self.created: list = []
        super().__init__(f"Failed to list objects in bucket '{bucket_name}'")


class StorageUploadError(Exception):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")


class SigningError(Exception):
    """Raised when a signed retrieval URL cannot be generated."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to sign a read URL for '{object_name}'")


class InvalidCredentialsError(Exception):
    """Raised when stored storage credentials cannot be decoded."""

    def __init__(self, owner_id: str, cause: Exception | None = None):
        self.owner_id = owner_id
        self.cause = cause
        super().__init__(f"Storage credentials for owner '{owner_id}' are invalid")
