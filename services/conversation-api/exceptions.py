"""Custom exceptions for the conversation-api service."""

from typing import Literal
from uuid import UUID

ProviderPhase = Literal["submit", "poll"]


class UnauthenticatedError(Exception):
    """Raised when a request carries no valid identity."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Unauthenticated: {reason}")


class CredentialsNotFoundError(Exception):
    """Raised when an owner has not registered storage credentials."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__(f"No storage credentials registered for owner '{owner_id}'")


class RecordingNotFoundError(Exception):
    """Raised when a recording does not exist for the requesting owner."""

    def __init__(self, recording_id: UUID):
        self.recording_id = recording_id
        super().__init__(f"Recording {recording_id} not found")


class RecordingVanishedError(Exception):
    """Raised when a recording disappears while its transcription is running."""

    def __init__(self, recording_id: UUID):
        self.recording_id = recording_id
        super().__init__(f"Recording {recording_id} no longer exists")


class AudioReferenceMissingError(Exception):
    """Raised when transcription is requested for a recording without audio."""

    def __init__(self, recording_id: UUID):
        self.recording_id = recording_id
        super().__init__(f"Recording {recording_id} has no audio reference")


class ProviderError(Exception):
    """Raised when the transcription provider fails during submit or poll."""

    def __init__(
        self, phase: ProviderPhase, message: str, cause: Exception | None = None
    ):
        self.phase = phase
        self.cause = cause
        super().__init__(f"Transcription provider {phase} failed: {message}")


class RecordingPersistenceError(Exception):
    """Raised when reading or writing recording data fails."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Recording store operation '{operation}' failed")


class DuplicateRecordingError(Exception):
    """Raised when an owner already has a recording for a storage object."""

    def __init__(self, owner_id: str, object_key: str, cause: Exception | None = None):
        self.owner_id = owner_id
        self.object_key = object_key
        self.cause = cause
        super().__init__(f"Owner '{owner_id}' already has a recording for '{object_key}'")
