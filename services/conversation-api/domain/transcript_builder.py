"""Core business logic for transcript state transitions."""

import os
from datetime import datetime, timezone

from omi_common import TranscriptionStatus

from .models import (
    FAILED_ACTION_ITEMS_SENTINEL,
    FAILED_SUMMARY_SENTINEL,
    FAILED_TRANSCRIPT_SENTINEL,
    PROCESSING_SENTINEL,
    Sentence,
    TranscriptionOutcome,
    TranscriptionUpdate,
)


class TranscriptBuilder:
    """
    Builds the field values a recording takes at each transcription state.

    The explicit status is always paired with the legacy sentinel texts so
    clients that only read the transcript field keep working.
    """

    def processing_transcript(self) -> list[Sentence]:
        """Returns the single-entry transcript shown while a job is running."""
        return [Sentence(sentence=PROCESSING_SENTINEL)]

    def completed(
        self, outcome: TranscriptionOutcome, now: datetime | None = None
    ) -> TranscriptionUpdate:
        """Builds the terminal update for a successful transcription."""
        return TranscriptionUpdate(
            status=TranscriptionStatus.DONE,
            transcript=list(outcome.sentences),
            summary=outcome.summary,
            action_items=list(outcome.action_items),
            updated_at=now or datetime.now(timezone.utc),
        )

    def failed(self, now: datetime | None = None) -> TranscriptionUpdate:
        """Builds the terminal update once every attempt has failed."""
        return TranscriptionUpdate(
            status=TranscriptionStatus.FAILED,
            transcript=[Sentence(sentence=FAILED_TRANSCRIPT_SENTINEL)],
            summary=FAILED_SUMMARY_SENTINEL,
            action_items=[FAILED_ACTION_ITEMS_SENTINEL],
            updated_at=now or datetime.now(timezone.utc),
        )

    def name_from_object_key(self, object_name: str) -> str:
        """Derives a display name from an object key: base filename, no extension."""
        return os.path.splitext(os.path.basename(object_name))[0]

    def upload_object_key(self, filename: str, timestamp_ns: int) -> str:
        """Derives a collision-resistant object key for an uploaded file."""
        return f"{timestamp_ns}_{os.path.basename(filename)}"
