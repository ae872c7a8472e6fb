import logging

from fastapi import FastAPI
from commitlog.api.routes import router as api_router
from commitlog.core.config import Config

logging.basicConfig(
    level=logging.DEBUG if Config.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


app = FastAPI(
    title="CommitLog API",
    description="Reads a git repository's commit objects and returns its history as a time-ordered log.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.include_router(api_router)
