import io
import uuid

import pytest
from omi_common import TranscriptionStatus
from omi_common.db_models import Recording

from conftest import OWNER_ID
from domain import PROCESSING_SENTINEL, TranscriptBuilder
from exceptions import CredentialsNotFoundError, RecordingNotFoundError
from handlers import AudioHandler


@pytest.fixture
def handler(credentials_repository, recording_repository, storage_factory, dispatcher):
    return AudioHandler(
        credentials_repository,
        recording_repository,
        storage_factory,
        dispatcher,
        TranscriptBuilder(),
        clock_ns=lambda: 1700000000000000000,
    )


def test_upload_stores_object_and_transcribes(
    handler, storage, credentials, recording_repository
):
    recording = handler.upload(OWNER_ID, "standup.wav", io.BytesIO(b"RIFF"), 4)

    object_name = "1700000000000000000_standup.wav"
    upload = storage.uploads[object_name]
    assert (upload["bucket_name"], upload["data"], upload["size"]) == ("omi-audio", b"RIFF", 4)
    assert upload["content_type"] in ("audio/wav", "audio/x-wav", "audio/vnd.wave")
    assert recording.name == "standup.wav"
    assert recording.audio_object_key == object_name
    assert recording.audio_url.startswith(f"https://storage.test/omi-audio/{object_name}")
    # The response reflects the state at insert time.
    assert recording.transcription_status == TranscriptionStatus.PROCESSING
    assert [s["sentence"] for s in recording.transcript] == [PROCESSING_SENTINEL]

    stored = recording_repository.find_by_id(recording.id, OWNER_ID)
    assert stored.transcription_status == TranscriptionStatus.DONE


def test_upload_defaults_unknown_extensions_to_mpeg(handler, storage, credentials):
    handler.upload(OWNER_ID, "memo.omi", io.BytesIO(b"x"), 1)

    (upload,) = storage.uploads.values()
    assert upload["content_type"] == "audio/mpeg"


def test_upload_requires_credentials(handler, storage):
    with pytest.raises(CredentialsNotFoundError):
        handler.upload(OWNER_ID, "standup.mp3", io.BytesIO(b"x"), 1)

    assert storage.uploads == {}


def test_playback_url_is_signed_fresh(handler, storage, credentials, recording_repository):
    recording = recording_repository.insert(
        Recording(
            owner_id=OWNER_ID,
            name="standup",
            audio_object_key="standup.mp3",
            audio_url="https://expired",
        )
    )

    result = handler.playback_url(recording.id, OWNER_ID)

    assert result.audio_url.startswith("https://storage.test/omi-audio/standup.mp3")
    assert storage.signed == ["standup.mp3"]
    stored = recording_repository.find_by_id(recording.id, OWNER_ID)
    assert stored.audio_url == "https://expired"


def test_playback_url_without_audio_needs_no_credentials(handler, recording_repository):
    recording = recording_repository.insert(Recording(owner_id=OWNER_ID, name="notes"))

    result = handler.playback_url(recording.id, OWNER_ID)

    assert not result.has_audio


def test_playback_url_for_unknown_recording(handler, credentials):
    with pytest.raises(RecordingNotFoundError):
        handler.playback_url(uuid.uuid4(), OWNER_ID)
