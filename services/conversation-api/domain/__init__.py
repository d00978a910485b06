"""Domain layer exports."""

from .models import (
    ACTION_ITEMS_PROMPT,
    FAILED_ACTION_ITEMS_SENTINEL,
    FAILED_SUMMARY_SENTINEL,
    FAILED_TRANSCRIPT_SENTINEL,
    PROCESSING_SENTINEL,
    RETRIGGERABLE_STATUSES,
    TITLE_PROMPT,
    ChatMessage,
    Credentials,
    Sentence,
    TranscriptionOutcome,
    TranscriptionUpdate,
    Word,
)
from .transcript_builder import TranscriptBuilder

__all__ = [
    "ACTION_ITEMS_PROMPT",
    "FAILED_ACTION_ITEMS_SENTINEL",
    "FAILED_SUMMARY_SENTINEL",
    "FAILED_TRANSCRIPT_SENTINEL",
    "PROCESSING_SENTINEL",
    "RETRIGGERABLE_STATUSES",
    "TITLE_PROMPT",
    "ChatMessage",
    "Credentials",
    "Sentence",
    "TranscriptionOutcome",
    "TranscriptionUpdate",
    "Word",
    "TranscriptBuilder",
]
