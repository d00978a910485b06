"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from ddtrace import patch_all
from fastapi import FastAPI

import dependencies
from routes import (
    bucket_router,
    conversations_router,
    credentials_router,
    upload_router,
)

patch_all()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    dependencies.shutdown()


app = FastAPI(title="Conversation API", lifespan=lifespan)
app.include_router(bucket_router)
app.include_router(upload_router)
app.include_router(conversations_router)
app.include_router(credentials_router)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}
