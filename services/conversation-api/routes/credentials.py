"""Storage credentials endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from omi_common import InvalidCredentialsError
from omi_common.logging import setup_logging

from dependencies import get_credentials_repository, get_current_user_id
from domain import Credentials
from infrastructure import MinioStorageFactory
from repositories import CredentialsRepository
from response_models import CredentialsRequest, MessageResponse

logger = setup_logging()

router = APIRouter(tags=["credentials"])

UserIdDep = Annotated[str, Depends(get_current_user_id)]
RepositoryDep = Annotated[CredentialsRepository, Depends(get_credentials_repository)]


@router.post("/storage-credentials", response_model=MessageResponse)
def save_credentials(
    request: CredentialsRequest, user_id: UserIdDep, repo: RepositoryDep
) -> MessageResponse:
    """
    Registers the caller's bucket and provider credentials.

    The credentials document must decode to storage connection settings;
    existing credentials are replaced.
    """
    try:
        MinioStorageFactory.decode(
            Credentials(
                owner_id=user_id,
                encoded_credentials=request.credentials,
                bucket_name=request.bucket_name,
                provider_api_key=request.provider_api_key,
            )
        )
    except InvalidCredentialsError:
        raise HTTPException(status_code=422, detail="Invalid storage credentials")

    try:
        repo.upsert(
            owner_id=user_id,
            encoded_credentials=request.credentials,
            bucket_name=request.bucket_name,
            provider_api_key=request.provider_api_key,
        )
    except Exception as e:
        logger.error(f"Error saving credentials for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return MessageResponse(message="Storage credentials saved")
