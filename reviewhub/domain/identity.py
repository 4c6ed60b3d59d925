"""
Identity Resolution - Who Is Liking?
====================================

A caller is either authenticated (a session carries a user id) or anonymous.
Anonymous callers are approximated by a fingerprint hashed from request
headers.

KNOWN APPROXIMATION:
- Two people behind the same proxy with the same browser setup share one
  fingerprint.
- Changing any header component (new browser version, different network)
  produces a new fingerprint, and earlier anonymous likes are no longer
  recognised.
- Nothing links a person's anonymous fingerprint to their account, so one
  person can hold one authenticated and one anonymous like on a product.
"""

import hashlib
from dataclasses import dataclass
from typing import Mapping, Optional, Union

FINGERPRINT_LENGTH = 16

FINGERPRINT_HEADERS = (
    "user-agent",
    "accept-language",
    "accept-encoding",
    "x-forwarded-for",
    "x-real-ip",
)


@dataclass(frozen=True)
class Authenticated:
    user_id: str


@dataclass(frozen=True)
class Anonymous:
    fingerprint: str


Identity = Union[Authenticated, Anonymous]


def browser_fingerprint(headers: Mapping[str, str]) -> str:
    """
    Hash the identifying request headers into a short hex id.

    Args:
        headers: Case-insensitive header mapping (e.g. Starlette ``Headers``)
            or a plain dict with lowercase keys.

    Returns:
        First 16 hex characters of the SHA-256 digest.
    """
    raw = "|".join(headers.get(name) or "" for name in FINGERPRINT_HEADERS)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def resolve_identity(user_id: Optional[str], headers: Mapping[str, str]) -> Identity:
    """Session user wins; otherwise fall back to the header fingerprint."""
    if user_id:
        return Authenticated(user_id=str(user_id))
    return Anonymous(fingerprint=browser_fingerprint(headers))
