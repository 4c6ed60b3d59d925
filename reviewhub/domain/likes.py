"""
Like Ledger - Like/Unlike Reconciliation
========================================

Each product embeds two parallel like sets:
- likedBy / likeCount:                   authenticated user ids
- anonymousLikedBy / anonymousLikeCount: anonymous fingerprints

The displayed total is the sum of both counters. Toggling only ever touches
the set matching the caller's identity variant.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .identity import Anonymous, Authenticated, Identity


@dataclass
class LikeLedger:
    """Like accounting fields of one product document."""

    like_count: int = 0
    liked_by: List[str] = field(default_factory=list)
    anonymous_like_count: int = 0
    anonymous_liked_by: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "LikeLedger":
        """
        Build a ledger from a stored product.

        Older documents may lack the anonymous fields entirely, and older
        likedBy arrays hold ObjectIds rather than strings.
        """
        return cls(
            like_count=int(doc.get("likeCount") or 0),
            liked_by=[str(uid) for uid in doc.get("likedBy") or []],
            anonymous_like_count=int(doc.get("anonymousLikeCount") or 0),
            anonymous_liked_by=list(doc.get("anonymousLikedBy") or []),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "likeCount": self.like_count,
            "likedBy": list(self.liked_by),
            "anonymousLikeCount": self.anonymous_like_count,
            "anonymousLikedBy": list(self.anonymous_liked_by),
        }

    @property
    def total(self) -> int:
        return self.like_count + self.anonymous_like_count

    def has_liked(self, identity: Identity) -> bool:
        if isinstance(identity, Authenticated):
            return identity.user_id in self.liked_by
        if isinstance(identity, Anonymous):
            return identity.fingerprint in self.anonymous_liked_by
        raise TypeError(f"Unknown identity type: {type(identity).__name__}")

    def toggle(self, identity: Identity) -> bool:
        """
        Flip the caller's like.

        Returns:
            True if the product is now liked by this identity.
        """
        if isinstance(identity, Authenticated):
            self.liked_by, self.like_count, liked = _flip(
                self.liked_by, self.like_count, identity.user_id
            )
            return liked
        if isinstance(identity, Anonymous):
            self.anonymous_liked_by, self.anonymous_like_count, liked = _flip(
                self.anonymous_liked_by, self.anonymous_like_count, identity.fingerprint
            )
            return liked
        raise TypeError(f"Unknown identity type: {type(identity).__name__}")


def _flip(members: List[str], count: int, key: str):
    if key in members:
        return [m for m in members if m != key], max(0, count - 1), False
    return members + [key], count + 1, True
