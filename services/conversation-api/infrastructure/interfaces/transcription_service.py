"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod

from domain.models import TranscriptionOutcome


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text providers."""

    @abstractmethod
    def transcribe(self, audio_url: str, api_key: str) -> TranscriptionOutcome:
        """
        Submits an audio file for transcription and waits for the result.

        Args:
            audio_url: A URL the provider can fetch the audio from.
            api_key: The owner's provider API key.

        Returns:
            TranscriptionOutcome with sentences, summary and action items.

        Raises:
            ProviderError: If submitting or polling fails.
        """
        pass
