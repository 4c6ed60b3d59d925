"""
Session Auth Helpers
====================

Sessions live in a signed cookie (Starlette SessionMiddleware). A logged-in
session carries ``user_id`` and ``email``; anything else is anonymous.
"""

import hashlib
import hmac
import secrets
from typing import Optional

from fastapi import Request

from reviewhub.domain.errors import InternalError, Unauthorized
from reviewhub.infrastructure.llm import SummaryService
from reviewhub.infrastructure.persistence import Database, User

PBKDF2_ITERATIONS = 120_000
HASH_SCHEME = "pbkdf2_sha256"


# ── Passwords ──────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """Salted PBKDF2-SHA256, stored as ``scheme$iterations$salt$digest``."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS).hex()
    return f"{HASH_SCHEME}${PBKDF2_ITERATIONS}${salt}${digest}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, digest = stored.split("$")
        iterations = int(iterations)
    except ValueError:
        return False
    if scheme != HASH_SCHEME:
        return False

    candidate = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations).hex()
    return hmac.compare_digest(candidate, digest)


# ── Session ────────────────────────────────────────────────────

def login_session(request: Request, user: User) -> None:
    request.session["user_id"] = user.id
    request.session["email"] = user.email


def logout_session(request: Request) -> None:
    request.session.clear()


def current_user_id(request: Request) -> Optional[str]:
    """Logged-in user id from the session cookie, or None."""
    return request.session.get("user_id")


def require_user(request: Request) -> str:
    """Dependency for protected routes."""
    user_id = current_user_id(request)
    if not user_id:
        raise Unauthorized("Unauthorized action")
    return user_id


# ── Shared resources ───────────────────────────────────────────

def get_db(request: Request) -> Database:
    db = request.app.state.db
    if db is None:
        raise InternalError("Database is not initialized")
    return db


def get_summary_service(request: Request) -> SummaryService:
    return request.app.state.summary_service
