from routes.bucket import router as bucket_router
from routes.conversations import router as conversations_router
from routes.credentials import router as credentials_router
from routes.uploads import router as upload_router

__all__ = [
    "bucket_router",
    "conversations_router",
    "credentials_router",
    "upload_router",
]
