from concurrent.futures import Executor, Future
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest
from omi_common import StorageListError
from omi_common.infrastructure import StorageClient, StorageObject
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from domain import Sentence, TranscriptBuilder, TranscriptionOutcome
from handlers import TranscriptionDispatcher, TranscriptionOrchestrator
from infrastructure.interfaces import StorageClientFactory, TranscriptionService
from repositories import CredentialsRepository, RecordingRepository

OWNER_ID = "user-1"
BUCKET = "omi-audio"
API_KEY = "gladia-key"
# base64 of {"endpoint":"minio:9000","access_key":"ak","secret_key":"sk"}
ENCODED_CREDENTIALS = (
    "eyJlbmRwb2ludCI6Im1pbmlvOjkwMDAiLCJhY2Nlc3Nfa2V5IjoiYWsiLCJzZWNyZXRfa2V5Ijoic2sifQ=="
)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class FakeStorage(StorageClient):
    def __init__(self):
        self.objects: list[StorageObject] = []
        self.uploads: dict[str, dict] = {}
        self.signed: list[str] = []
        self.fail_listing_after: int | None = None

    def add_object(self, name: str, modified: datetime | None = None) -> None:
        modified = modified or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.objects.append(StorageObject(name=name, created_at=modified, updated_at=modified))

    def list_objects(self, bucket_name):
        for index, obj in enumerate(self.objects):
            if self.fail_listing_after is not None and index >= self.fail_listing_after:
                raise StorageListError(bucket_name, RuntimeError("connection reset"))
            yield obj

    def signed_read_url(self, bucket_name, object_name, ttl: timedelta):
        self.signed.append(object_name)
        return f"https://storage.test/{bucket_name}/{object_name}?ttl={int(ttl.total_seconds())}"

    def upload(self, bucket_name, object_name, data, size, content_type):
        self.uploads[object_name] = {
            "bucket_name": bucket_name,
            "data": data.read(),
            "size": size,
            "content_type": content_type,
        }


class FakeStorageFactory(StorageClientFactory):
    def __init__(self, storage: FakeStorage):
        self.storage = storage

    def for_credentials(self, credentials):
        return self.storage


class FakeTranscriptionService(TranscriptionService):
    """Replays scripted results; an exception instance is raised instead of returned."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[tuple[str, str]] = []

    def transcribe(self, audio_url, api_key):
        self.calls.append((audio_url, api_key))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def make_outcome(text: str = "Hello there.") -> TranscriptionOutcome:
    return TranscriptionOutcome(
        sentences=[Sentence(sentence=text, start=0.0, end=1.5, speaker="0", confidence=0.9)],
        summary=text,
        action_items=["- Call Bob"],
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    @contextmanager
    def factory():
        with Session(engine) as session:
            yield session

    return factory


@pytest.fixture
def recording_repository(session_factory):
    return RecordingRepository(session_factory)


@pytest.fixture
def credentials_repository(session_factory):
    return CredentialsRepository(session_factory)


@pytest.fixture
def credentials(credentials_repository):
    return credentials_repository.upsert(
        owner_id=OWNER_ID,
        encoded_credentials=ENCODED_CREDENTIALS,
        bucket_name=BUCKET,
        provider_api_key=API_KEY,
    )


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def storage_factory(storage):
    return FakeStorageFactory(storage)


@pytest.fixture
def transcription_service():
    return FakeTranscriptionService(make_outcome())


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def orchestrator(recording_repository, transcription_service, storage_factory, sleeps):
    return TranscriptionOrchestrator(
        repository=recording_repository,
        transcription_service=transcription_service,
        storage_factory=storage_factory,
        transcript_builder=TranscriptBuilder(),
        sleep=sleeps.append,
    )


@pytest.fixture
def dispatcher(orchestrator):
    return TranscriptionDispatcher(orchestrator, InlineExecutor())
