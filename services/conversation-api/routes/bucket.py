"""Bucket synchronization endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from omi_common import InvalidCredentialsError, StorageListError
from omi_common.logging import setup_logging

from dependencies import get_bucket_reconciler, get_current_user_id
from exceptions import CredentialsNotFoundError
from handlers import BucketReconciler
from response_models import BucketSyncResponse, ConversationResponse

logger = setup_logging()

router = APIRouter(tags=["bucket"])

UserIdDep = Annotated[str, Depends(get_current_user_id)]
ReconcilerDep = Annotated[BucketReconciler, Depends(get_bucket_reconciler)]


@router.get("/query-bucket", response_model=BucketSyncResponse)
def query_bucket(user_id: UserIdDep, reconciler: ReconcilerDep) -> BucketSyncResponse:
    """
    Scans the caller's bucket for new audio.

    Creates a conversation for every object not seen before and starts
    transcription for new and stalled conversations. Returns only the
    conversations created by this scan.
    """
    try:
        created = reconciler.reconcile(user_id)
    except CredentialsNotFoundError:
        raise HTTPException(status_code=404, detail="Storage credentials not found")
    except InvalidCredentialsError as e:
        logger.error(f"Invalid storage credentials for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Invalid storage credentials")
    except StorageListError as e:
        logger.error(
            f"Error listing bucket for {user_id}: {e}",
            extra={"created": [str(r.id) for r in e.created]},
        )
        raise HTTPException(status_code=500, detail="Error listing bucket")
    except Exception as e:
        logger.error(f"Error querying bucket for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return BucketSyncResponse(
        new_conversations=[ConversationResponse.from_recording(r) for r in created]
    )
