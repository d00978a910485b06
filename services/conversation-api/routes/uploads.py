"""Audio upload endpoint."""

import os
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile
from omi_common import InvalidCredentialsError, SigningError, StorageUploadError
from omi_common.logging import setup_logging

from dependencies import get_audio_handler, get_current_user_id
from exceptions import CredentialsNotFoundError
from handlers import AudioHandler
from response_models import ConversationResponse

logger = setup_logging()

router = APIRouter(tags=["uploads"])

UserIdDep = Annotated[str, Depends(get_current_user_id)]
AudioHandlerDep = Annotated[AudioHandler, Depends(get_audio_handler)]


@router.post("/upload-audio", response_model=ConversationResponse)
def upload_audio(
    file: UploadFile, user_id: UserIdDep, handler: AudioHandlerDep
) -> ConversationResponse:
    """
    Uploads an audio file to the caller's bucket.

    The conversation is returned in processing state; transcription
    continues in the background.
    """
    filename = os.path.basename(file.filename or "")
    if not filename:
        raise HTTPException(status_code=422, detail="File must have a name")

    logger.info(
        "Received upload request",
        extra={"file_name": filename, "user_id": user_id, "size": file.size},
    )

    try:
        recording = handler.upload(
            owner_id=user_id,
            filename=filename,
            data=file.file,
            size=file.size if file.size is not None else -1,
        )
    except CredentialsNotFoundError:
        raise HTTPException(status_code=404, detail="Storage credentials not found")
    except InvalidCredentialsError as e:
        logger.error(f"Invalid storage credentials for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Invalid storage credentials")
    except StorageUploadError:
        raise HTTPException(status_code=500, detail="File upload failed")
    except SigningError:
        raise HTTPException(status_code=500, detail="Could not sign audio URL")
    except Exception as e:
        logger.error(f"Error uploading {filename}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return ConversationResponse.from_recording(recording)
