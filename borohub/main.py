"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Database table creation on startup, pool disposal on shutdown
- Logging configuration and a per-request access log line
- CORS and rate limiting middleware
- Error envelope handlers
- Uploaded media served at /media/images
- Route registration (auth, member, content, comment, chat)

Run with:
    uvicorn borohub.main:app --reload
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.middleware import SlowAPIMiddleware

from borohub.config import settings
from borohub.database import engine
from borohub.errors import register_exception_handlers
from borohub.limiter import limiter
from borohub.models import Base
from borohub.routes import auth, chat, comments, content, members
from borohub.services.media import MEDIA_URL_PATH
from borohub.utils.serializers import success_response

logger = logging.getLogger("borohub")


def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup: create database tables that don't exist yet.
    Shutdown: close pooled connections.
    """
    async with engine.begin() as conn:
        # create_all() creates tables for all models that inherit from Base
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()


async def log_requests(request: Request, call_next):
    """One line per request: METHOD path status elapsed ms."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed:.1f} ms")
    return response


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    configure_logging()

    app = FastAPI(title="BoroHub Media API", lifespan=lifespan)

    app.state.limiter = limiter
    register_exception_handlers(app)

    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    media_root = Path(settings.MEDIA_ROOT)
    media_root.mkdir(parents=True, exist_ok=True)
    app.mount(MEDIA_URL_PATH, StaticFiles(directory=str(media_root)), name="media")

    app.include_router(auth.router)
    app.include_router(members.router)
    app.include_router(content.router)
    app.include_router(comments.router)
    app.include_router(chat.router)

    @app.get("/")
    async def health():
        return success_response({"status": "ok"})

    return app


app = create_app()
