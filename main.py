"""
AI Notes backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.health import router as health_router
from api.middleware import register_exception_handlers, register_middleware
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import Database
from notes.routes import router as notes_router
from notes.summary import SummaryService
from utils.email_service import EmailService
from utils.llm_providers import get_summary_provider

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "openai", "urllib3", "aiosqlite"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    mailer: Optional[EmailService] = None,
    summarizer: Optional[SummaryService] = None,
) -> FastAPI:
    settings = settings or config
    database = database or Database(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        logger.info("Application ready to accept requests.")
        try:
            yield
        finally:
            logger.info("Shutting down…")
            await database.dispose()

    app = FastAPI(
        title="AI Notes",
        version="1.0.0",
        description="Notes with email-verified accounts and AI summaries.",
        lifespan=lifespan,
    )

    app.state.database = database
    app.state.mailer = mailer or EmailService(settings)
    app.state.summarizer = summarizer or SummaryService(get_summary_provider(settings))
    app.state.started_at = time.monotonic()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    register_middleware(app)
    register_exception_handlers(app, debug=settings.debug)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(notes_router, prefix="/api/notes")

    return app


if __name__ == "__main__":
    logger.info("Starting server on %s:%d", config.host, config.port)
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
