import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

from omi_common import TranscriptionStatus

from conftest import OWNER_ID, InlineExecutor
from exceptions import RecordingVanishedError
from handlers import TranscriptionDispatcher


class BlockingOrchestrator:
    def __init__(self):
        self.release = threading.Event()
        self.calls = []

    def run(self, recording_id, owner_id, credentials):
        self.calls.append(recording_id)
        self.release.wait(timeout=5)
        return TranscriptionStatus.DONE


class CountingOrchestrator:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def run(self, recording_id, owner_id, credentials):
        self.calls.append(recording_id)
        if self.error is not None:
            raise self.error
        return TranscriptionStatus.FAILED


def test_second_dispatch_joins_the_run_in_flight(credentials):
    orchestrator = BlockingOrchestrator()
    dispatcher = TranscriptionDispatcher(orchestrator, ThreadPoolExecutor(max_workers=2))
    recording_id = uuid.uuid4()

    first = dispatcher.dispatch(recording_id, OWNER_ID, credentials)
    second = dispatcher.dispatch(recording_id, OWNER_ID, credentials)

    assert second is first
    assert dispatcher.in_flight(recording_id)

    orchestrator.release.set()
    assert first.result(timeout=5) is TranscriptionStatus.DONE
    dispatcher.shutdown(wait=True)

    assert orchestrator.calls == [recording_id]
    assert not dispatcher.in_flight(recording_id)


def test_without_single_flight_every_dispatch_runs(credentials):
    orchestrator = CountingOrchestrator()
    dispatcher = TranscriptionDispatcher(orchestrator, InlineExecutor(), single_flight=False)
    recording_id = uuid.uuid4()

    first = dispatcher.dispatch(recording_id, OWNER_ID, credentials)
    second = dispatcher.dispatch(recording_id, OWNER_ID, credentials)

    assert first is not second
    assert orchestrator.calls == [recording_id, recording_id]
    assert second.result() is TranscriptionStatus.FAILED


def test_completed_run_allows_a_new_dispatch(credentials):
    orchestrator = CountingOrchestrator()
    dispatcher = TranscriptionDispatcher(orchestrator, InlineExecutor())
    recording_id = uuid.uuid4()

    dispatcher.dispatch(recording_id, OWNER_ID, credentials)
    dispatcher.dispatch(recording_id, OWNER_ID, credentials)

    assert len(orchestrator.calls) == 2
    assert not dispatcher.in_flight(recording_id)


def test_fatal_error_is_carried_by_the_future(credentials):
    recording_id = uuid.uuid4()
    orchestrator = CountingOrchestrator(error=RecordingVanishedError(recording_id))
    dispatcher = TranscriptionDispatcher(orchestrator, InlineExecutor())

    future = dispatcher.dispatch(recording_id, OWNER_ID, credentials)

    assert isinstance(future.exception(), RecordingVanishedError)
    assert not dispatcher.in_flight(recording_id)
