"""
FastAPI Web Application - ReviewHub API
=======================================

JSON API for product review posts, likes, comments, users and AI-generated
likes/dislikes. Routes live under ``/api/auth`` (resources) and ``/api``
(generation), matching the paths the front end calls.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from reviewhub.domain.errors import ConfigurationError, ReviewHubError
from reviewhub.infrastructure.config import Settings, get_settings
from reviewhub.infrastructure.llm import SummaryService
from reviewhub.infrastructure.persistence import Database

from .routes import comments, posts, summaries, users

logging.basicConfig(level=get_settings().server.log_level)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    summary_service: Optional[SummaryService] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Defaults to the environment-backed singleton.
        database: Pre-built handle (tests); otherwise one is opened at startup
            and closed at shutdown.
        summary_service: Pre-built Gemini client (tests).
    """
    settings = settings or get_settings()

    # ── Lifespan ───────────────────────────────────────────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        issues = settings.validate()
        for issue in issues:
            logger.warning(issue)
        errors = [issue for issue in issues if issue.startswith("ERROR")]
        if errors:
            raise ConfigurationError(errors[0])

        owns_db = app.state.db is None
        if owns_db:
            app.state.db = Database.from_settings(settings.database)
            app.state.db.init()
        logger.info("Database ready")

        yield

        if owns_db:
            app.state.db.close()
            app.state.db = None

    app = FastAPI(
        title="ReviewHub",
        description="Affiliate product reviews with Reddit sentiment",
        lifespan=lifespan,
    )
    app.state.db = database
    app.state.summary_service = summary_service or SummaryService(settings.llm)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session.secret_key,
        session_cookie=settings.session.cookie_name,
        max_age=settings.session.max_age_seconds,
        https_only=settings.session.https_only,
    )

    # ── Error mapping ──────────────────────────────────────────────

    @app.exception_handler(ReviewHubError)
    async def handle_app_error(request: Request, exc: ReviewHubError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError):
        logger.warning(f"{request.method} {request.url.path} rejected: malformed request")
        return JSONResponse(
            {"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # ── Routes ─────────────────────────────────────────────────────

    app.include_router(posts.router, prefix="/api/auth")
    app.include_router(comments.router, prefix="/api/auth")
    app.include_router(users.router, prefix="/api/auth")
    app.include_router(summaries.router, prefix="/api")

    return app


app = create_app()
