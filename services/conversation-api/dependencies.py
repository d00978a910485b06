"""Dependency injection configuration for the conversation-api service."""

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends, Header, HTTPException
from omi_common import setup_logging
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from config import AppConfig, load_config
from domain import TranscriptBuilder
from exceptions import UnauthenticatedError
from handlers import (
    AudioHandler,
    BucketReconciler,
    MessageHandler,
    TranscriptionDispatcher,
    TranscriptionOrchestrator,
)
from infrastructure import GladiaTranscriber, JWTAuthProvider, MinioStorageFactory
from infrastructure.interfaces import (
    AuthProvider,
    StorageClientFactory,
    TranscriptionService,
)
from repositories import CredentialsRepository, RecordingRepository

logger = setup_logging()


@lru_cache
def get_config() -> AppConfig:
    """Returns the process-wide configuration."""
    return load_config()


@lru_cache
def get_engine() -> Engine:
    """Creates the database engine and the tables it needs."""
    engine = create_engine(get_config().database.url, pool_pre_ping=True)
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized", extra={"host": get_config().database.host})
    return engine


@contextmanager
def session_factory() -> Iterator[Session]:
    """Creates a database session context manager."""
    with Session(get_engine()) as session:
        yield session


@lru_cache
def get_recording_repository() -> RecordingRepository:
    return RecordingRepository(session_factory)


@lru_cache
def get_credentials_repository() -> CredentialsRepository:
    return CredentialsRepository(session_factory)


@lru_cache
def get_storage_factory() -> StorageClientFactory:
    return MinioStorageFactory()


@lru_cache
def get_auth_provider() -> AuthProvider:
    auth = get_config().auth
    return JWTAuthProvider(auth.jwt_secret, auth.algorithm)


@lru_cache
def get_transcription_service() -> TranscriptionService:
    """Returns the provider client; one pooled HTTP client per process."""
    config = get_config().transcription
    client = httpx.Client(
        base_url=config.base_url,
        timeout=config.request_timeout_seconds,
    )
    return GladiaTranscriber(
        client,
        poll_interval_seconds=config.poll_interval_seconds,
        max_polls=config.max_polls,
    )


@lru_cache
def get_dispatcher() -> TranscriptionDispatcher:
    """Returns the background transcription dispatcher."""
    config = get_config()
    orchestrator = TranscriptionOrchestrator(
        repository=get_recording_repository(),
        transcription_service=get_transcription_service(),
        storage_factory=get_storage_factory(),
        transcript_builder=TranscriptBuilder(),
        max_attempts=config.transcription.max_attempts,
        backoff_seconds=config.transcription.backoff_seconds,
        signed_url_ttl=timedelta(minutes=config.storage.signed_url_ttl_minutes),
    )
    executor = ThreadPoolExecutor(
        max_workers=config.transcription.max_workers,
        thread_name_prefix="transcription",
    )
    return TranscriptionDispatcher(
        orchestrator, executor, single_flight=config.transcription.single_flight
    )


def get_bucket_reconciler() -> BucketReconciler:
    """Returns the configured bucket reconciler."""
    return BucketReconciler(
        get_credentials_repository(),
        get_recording_repository(),
        get_storage_factory(),
        get_dispatcher(),
        TranscriptBuilder(),
    )


def get_message_handler() -> MessageHandler:
    """Returns the configured chat message handler."""
    return MessageHandler(
        get_recording_repository(), get_credentials_repository(), get_dispatcher()
    )


def get_audio_handler() -> AudioHandler:
    """Returns the configured audio handler."""
    config = get_config().storage
    return AudioHandler(
        get_credentials_repository(),
        get_recording_repository(),
        get_storage_factory(),
        get_dispatcher(),
        TranscriptBuilder(),
        signed_url_ttl=timedelta(minutes=config.signed_url_ttl_minutes),
        default_content_type=config.default_content_type,
    )


def shutdown() -> None:
    """Waits for background transcriptions if the dispatcher was ever built."""
    if get_dispatcher.cache_info().currsize:
        get_dispatcher().shutdown(wait=True)


def get_current_user_id(
    auth_provider: Annotated[AuthProvider, Depends(get_auth_provider)],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Resolves the caller's user id from the Authorization header."""
    try:
        return auth_provider.authenticate(authorization)
    except UnauthenticatedError as e:
        logger.info("Rejected request", extra={"reason": e.reason})
        raise HTTPException(status_code=401, detail="Unauthorized")
