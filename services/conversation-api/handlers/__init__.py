"""Handler layer exports."""

from .audio_handler import AudioHandler
from .bucket_reconciler import BucketReconciler
from .message_handler import MessageHandler
from .transcription_dispatcher import TranscriptionDispatcher
from .transcription_orchestrator import TranscriptionOrchestrator

__all__ = [
    "AudioHandler",
    "BucketReconciler",
    "MessageHandler",
    "TranscriptionDispatcher",
    "TranscriptionOrchestrator",
]
