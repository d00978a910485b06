"""Repository layer exports."""

from .credentials_repository import CredentialsRepository
from .recording_repository import RecordingRepository, SessionFactory

__all__ = ["CredentialsRepository", "RecordingRepository", "SessionFactory"]
