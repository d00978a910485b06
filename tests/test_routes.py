import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from omi_common import TranscriptionStatus
from omi_common.db_models import Recording

import dependencies
from conftest import ENCODED_CREDENTIALS, OWNER_ID
from domain import PROCESSING_SENTINEL, TranscriptBuilder
from handlers import AudioHandler, BucketReconciler, MessageHandler
from infrastructure import JWTAuthProvider
from routes import bucket_router, conversations_router, credentials_router, upload_router

SECRET = "route-test-secret-with-enough-length"


@pytest.fixture
def client(
    credentials_repository,
    recording_repository,
    storage_factory,
    dispatcher,
):
    app = FastAPI()
    for router in (bucket_router, upload_router, conversations_router, credentials_router):
        app.include_router(router)

    app.dependency_overrides[dependencies.get_auth_provider] = lambda: JWTAuthProvider(SECRET)
    app.dependency_overrides[dependencies.get_recording_repository] = (
        lambda: recording_repository
    )
    app.dependency_overrides[dependencies.get_credentials_repository] = (
        lambda: credentials_repository
    )
    app.dependency_overrides[dependencies.get_bucket_reconciler] = lambda: BucketReconciler(
        credentials_repository,
        recording_repository,
        storage_factory,
        dispatcher,
        TranscriptBuilder(),
    )
    app.dependency_overrides[dependencies.get_message_handler] = lambda: MessageHandler(
        recording_repository, credentials_repository, dispatcher
    )
    app.dependency_overrides[dependencies.get_audio_handler] = lambda: AudioHandler(
        credentials_repository,
        recording_repository,
        storage_factory,
        dispatcher,
        TranscriptBuilder(),
    )
    return TestClient(app)


@pytest.fixture
def auth():
    token = jwt.encode(
        {"sub": OWNER_ID, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


def test_requests_without_token_are_unauthorized(client):
    assert client.get("/query-bucket").status_code == 401
    response = client.post(f"/conversations/{uuid.uuid4()}/messages", json={"content": "hi"})
    assert response.status_code == 401


def test_query_bucket_returns_new_conversations(client, auth, storage, credentials):
    storage.add_object("standup.mp3")

    response = client.get("/query-bucket", headers=auth)

    assert response.status_code == 200
    (conversation,) = response.json()["new_conversations"]
    assert conversation["name"] == "standup"
    assert conversation["user_id"] == OWNER_ID
    assert conversation["audio_file"] == {"name": "standup.mp3", "url": ""}
    assert conversation["transcription_status"] == "processing"
    assert conversation["transcript"][0]["sentence"] == PROCESSING_SENTINEL

    assert client.get("/query-bucket", headers=auth).json() == {"new_conversations": []}


def test_query_bucket_without_credentials(client, auth):
    assert client.get("/query-bucket", headers=auth).status_code == 404


def test_upload_audio(client, auth, storage, credentials, recording_repository):
    response = client.post(
        "/upload-audio",
        headers=auth,
        files={"file": ("standup.mp3", b"ID3audio", "audio/mpeg")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["transcription_status"] == "processing"
    object_name = body["audio_file"]["name"]
    assert object_name.endswith("_standup.mp3")
    assert storage.uploads[object_name]["data"] == b"ID3audio"

    stored = recording_repository.find_by_id(uuid.UUID(body["id"]), OWNER_ID)
    assert stored.transcription_status == TranscriptionStatus.DONE


def test_add_message_returns_created_conversation(
    client, auth, credentials, recording_repository
):
    recording = recording_repository.insert(
        Recording(owner_id=OWNER_ID, name="standup", audio_object_key="standup.mp3")
    )

    response = client.post(
        f"/conversations/{recording.id}/messages",
        headers=auth,
        json={"content": "Summarize please"},
    )

    assert response.status_code == 201
    assert [m["content"] for m in response.json()["chat_history"]] == ["Summarize please"]
    stored = recording_repository.find_by_id(recording.id, OWNER_ID)
    assert stored.transcription_status == TranscriptionStatus.DONE


def test_add_message_to_unknown_conversation(client, auth):
    response = client.post(
        f"/conversations/{uuid.uuid4()}/messages", headers=auth, json={"content": "hi"}
    )

    assert response.status_code == 404


def test_empty_message_is_rejected(client, auth, recording_repository):
    recording = recording_repository.insert(Recording(owner_id=OWNER_ID, name="notes"))

    response = client.post(
        f"/conversations/{recording.id}/messages", headers=auth, json={"content": ""}
    )

    assert response.status_code == 422


def test_audio_url(client, auth, credentials, recording_repository):
    with_audio = recording_repository.insert(
        Recording(owner_id=OWNER_ID, name="standup", audio_object_key="standup.mp3")
    )
    without_audio = recording_repository.insert(Recording(owner_id=OWNER_ID, name="notes"))

    response = client.get(f"/conversations/{with_audio.id}/audio", headers=auth)
    assert response.status_code == 200
    assert response.json()["audio_file"]["url"].startswith(
        "https://storage.test/omi-audio/standup.mp3"
    )

    response = client.get(f"/conversations/{without_audio.id}/audio", headers=auth)
    assert response.json() == {"audio_file": None}


def test_save_credentials(client, auth, credentials_repository):
    response = client.post(
        "/storage-credentials",
        headers=auth,
        json={
            "credentials": ENCODED_CREDENTIALS,
            "bucket_name": "omi-audio",
            "provider_api_key": "gladia-key",
        },
    )

    assert response.status_code == 200
    assert credentials_repository.get(OWNER_ID).bucket_name == "omi-audio"


def test_save_undecodable_credentials(client, auth, credentials_repository):
    response = client.post(
        "/storage-credentials",
        headers=auth,
        json={"credentials": "bm9wZQ==", "bucket_name": "b", "provider_api_key": "k"},
    )

    assert response.status_code == 422
    assert credentials_repository.find(OWNER_ID) is None


def test_search_conversations(client, auth, recording_repository):
    hit = recording_repository.insert(
        Recording(
            owner_id=OWNER_ID,
            name="standup",
            transcript=[{"sentence": "Ship the budget review.", "start": 0.0, "end": 1.0}],
        )
    )
    recording_repository.insert(Recording(owner_id=OWNER_ID, name="retro"))
    recording_repository.insert(Recording(owner_id="someone-else", name="Budget"))

    response = client.get("/conversations/search", params={"q": "Budget"}, headers=auth)

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [str(hit.id)]


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_a_query(client, auth, params):
    response = client.get("/conversations/search", params=params, headers=auth)

    assert response.status_code == 400
