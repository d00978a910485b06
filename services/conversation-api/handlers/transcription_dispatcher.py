"""Schedules transcription runs in the background."""

import threading
from concurrent.futures import Executor, Future
from uuid import UUID

from omi_common import TranscriptionStatus
from omi_common.logging import setup_logging

from domain import Credentials

from .transcription_orchestrator import TranscriptionOrchestrator

logger = setup_logging()


class TranscriptionDispatcher:
    """
    Runs the orchestrator off the request path and hands back a Future.

    Runs are best effort: they live in this process only and are lost on
    restart. With ``single_flight`` enabled, a dispatch for a recording that
    already has a run in flight returns that run's Future instead of
    starting a second one. The guard is per process; two processes can
    still transcribe the same recording, in which case the last terminal
    write wins.
    """

    def __init__(
        self,
        orchestrator: TranscriptionOrchestrator,
        executor: Executor,
        single_flight: bool = True,
    ):
        self._orchestrator = orchestrator
        self._executor = executor
        self._single_flight = single_flight
        self._in_flight: dict[UUID, Future] = {}
        self._lock = threading.Lock()

    def dispatch(
        self, recording_id: UUID, owner_id: str, credentials: Credentials
    ) -> Future:
        """
        Schedules a transcription run for a recording.

        Returns:
            A Future resolving to the terminal TranscriptionStatus, or
            carrying the fatal error that ended the run.
        """
        with self._lock:
            if self._single_flight:
                running = self._in_flight.get(recording_id)
                if running is not None:
                    logger.info(
                        "Transcription already in flight",
                        extra={"recording_id": str(recording_id)},
                    )
                    return running

            future = self._executor.submit(
                self._orchestrator.run, recording_id, owner_id, credentials
            )
            if self._single_flight and not future.done():
                self._in_flight[recording_id] = future

        logger.info(
            "Transcription scheduled",
            extra={"recording_id": str(recording_id), "owner_id": owner_id},
        )
        future.add_done_callback(lambda f: self._on_done(recording_id, f))
        return future

    def in_flight(self, recording_id: UUID) -> bool:
        with self._lock:
            return recording_id in self._in_flight

    def shutdown(self, wait: bool = True) -> None:
        """Stops accepting runs; with ``wait`` blocks until running ones finish."""
        self._executor.shutdown(wait=wait)

    def _on_done(self, recording_id: UUID, future: Future) -> None:
        with self._lock:
            if self._in_flight.get(recording_id) is future:
                del self._in_flight[recording_id]

        if future.cancelled():
            logger.warning(
                "Transcription cancelled", extra={"recording_id": str(recording_id)}
            )
            return

        error = future.exception()
        if error is not None:
            logger.error(
                "Transcription aborted",
                extra={
                    "recording_id": str(recording_id),
                    "error_type": type(error).__name__,
                    "error": str(error),
                },
                exc_info=(type(error), error, error.__traceback__),
            )
            return

        status: TranscriptionStatus = future.result()
        logger.info(
            "Transcription run completed",
            extra={"recording_id": str(recording_id), "status": status.value},
        )
