"""
MongoDB Repository - Products, Users and Comments
==================================================

One ``Database`` object owns the MongoClient for the whole process. It is
created by the entry point (the FastAPI lifespan) and handed to request
handlers; nothing else opens connections.

ERROR BOUNDARY:
- Every pymongo failure is converted into a ReviewHubError here, so callers
  only ever see the closed error taxonomy.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from reviewhub.domain.errors import (
    ConfigurationError,
    InternalError,
    InvalidArgument,
    NotFound,
    ReviewHubError,
    ValidationError,
)
from reviewhub.domain.identity import Identity
from reviewhub.domain.likes import LikeLedger
from reviewhub.domain.products import ProductFields

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]

LEDGER_PROJECTION = {
    "likeCount": 1,
    "likedBy": 1,
    "anonymousLikeCount": 1,
    "anonymousLikedBy": 1,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: Any, message: str) -> ObjectId:
    """Parse a 24-hex id or raise InvalidArgument with ``message``."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidArgument(message)
    return ObjectId(value)


def serialize_document(value: Any) -> Any:
    """Make a stored document JSON-safe (ObjectId -> str, datetime -> ISO)."""
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@contextmanager
def storage_errors(action: str):
    """Translate driver failures into InternalError(action)."""
    try:
        yield
    except ReviewHubError:
        raise
    except PyMongoError as e:
        logger.exception(f"{action}: {e}")
        raise InternalError(action) from e


@dataclass
class User:
    """Registered user record."""
    id: str
    email: str
    password_hash: str
    name: str = ""
    bio: str = ""
    profile_image_url: str = ""
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        """User as returned by the API (never includes the password)."""
        return {
            "_id": self.id,
            "email": self.email,
            "Name": self.name,
            "bio": self.bio,
            "profileImageURL": self.profile_image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Database:
    """
    MongoDB database for ReviewHub.

    Usage:
        db = Database.from_settings(get_settings().database)
        db.init()

        product = db.create_product(fields)
        liked, ledger = db.toggle_like(product["_id"], Anonymous("a1b2..."))

        db.close()

    Tests pass an in-memory client instead:
        db = Database(client=mongomock.MongoClient())
    """

    def __init__(
        self,
        url: str = "",
        name: str = "reviewhub",
        client: Optional[MongoClient] = None,
        server_selection_timeout_ms: int = 5000,
    ):
        if client is None:
            if not url:
                raise ConfigurationError("Please define the MONGODB_URL environment variable")
            client = MongoClient(url, serverSelectionTimeoutMS=server_selection_timeout_ms)

        self._client = client
        self._db = client[name]
        self.products = self._db["products"]
        self.users = self._db["users"]
        self.comments = self._db["comments"]

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            url=settings.url,
            name=settings.name,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
        )

    def init(self):
        """Create indexes (idempotent)."""
        with storage_errors("Failed to initialize database"):
            self.users.create_index([("email", ASCENDING)], unique=True)
            self.comments.create_index([("videoId", ASCENDING), ("createdAt", DESCENDING)])
            self.products.create_index([("createdAt", DESCENDING)])
        logger.info(f"Database initialized: {self._db.name}")

    def close(self):
        self._client.close()
        logger.info("Database connection closed")

    # ── Product CRUD ───────────────────────────────────────────────

    def list_products(self) -> List[dict]:
        """All products, newest first."""
        with storage_errors("Failed to fetch products"):
            return list(self.products.find().sort(NEWEST_FIRST))

    def get_product(self, product_id: ObjectId) -> Optional[dict]:
        with storage_errors("Failed to fetch product"):
            return self.products.find_one({"_id": product_id})

    def create_product(self, fields: ProductFields) -> dict:
        """Insert a product with an empty like ledger."""
        now = utc_now()
        doc = fields.to_document()
        doc.update(LikeLedger().to_document())
        doc["createdAt"] = now
        doc["updatedAt"] = now

        with storage_errors("Failed to create product"):
            result = self.products.insert_one(doc)

        doc["_id"] = result.inserted_id
        logger.info(f"Created product {result.inserted_id}: {fields.title}")
        return doc

    def replace_product(self, product_id: ObjectId, fields: ProductFields) -> Optional[dict]:
        """
        Replace all client-editable fields of a product.

        Like accounting and createdAt are left untouched.

        Returns:
            The updated document, or None if no product has this id.
        """
        update = fields.to_document()
        update["updatedAt"] = utc_now()

        with storage_errors("Failed to update product"):
            doc = self.products.find_one_and_update(
                {"_id": product_id},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )

        if doc:
            logger.info(f"Updated product {product_id}")
        return doc

    def delete_product(self, product_id: ObjectId) -> Optional[dict]:
        """Delete a product and return the removed document (None if missing)."""
        with storage_errors("Failed to delete product"):
            doc = self.products.find_one_and_delete({"_id": product_id})

        if doc:
            logger.info(f"Deleted product {product_id}")
        return doc

    # ── Likes ──────────────────────────────────────────────────────

    def get_like_ledger(self, product_id: ObjectId) -> LikeLedger:
        with storage_errors("Failed to check like status"):
            doc = self.products.find_one({"_id": product_id}, LEDGER_PROJECTION)
            if doc is None:
                raise NotFound("Product not found")
            return LikeLedger.from_document(doc)

    def toggle_like(self, product_id: ObjectId, identity: Identity) -> Tuple[bool, LikeLedger]:
        """
        Flip ``identity``'s like on a product.

        Single read-modify-write of the ledger fields. Two concurrent toggles
        for the same identity and product can interleave between the read and
        the write; the store only guarantees per-write atomicity.

        Returns:
            (liked, ledger) where ``liked`` is the new state for ``identity``.
        """
        with storage_errors("Failed to toggle like"):
            doc = self.products.find_one({"_id": product_id}, LEDGER_PROJECTION)
            if doc is None:
                raise NotFound("Product not found")

            ledger = LikeLedger.from_document(doc)
            liked = ledger.toggle(identity)
            self.products.update_one({"_id": product_id}, {"$set": ledger.to_document()})

        logger.debug(f"Product {product_id} {'liked' if liked else 'unliked'} by {identity}")
        return liked, ledger

    # ── Comments ───────────────────────────────────────────────────

    def add_comment(self, video_id: ObjectId, user_id: ObjectId, review: str) -> dict:
        doc = {
            "videoId": video_id,
            "userId": user_id,
            "review": review,
            "createdAt": utc_now(),
        }
        with storage_errors("Failed to create comment"):
            result = self.comments.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def list_comments(self, video_id: ObjectId) -> List[dict]:
        """Comments for one post, newest first."""
        with storage_errors("Failed to fetch comments"):
            return list(self.comments.find({"videoId": video_id}).sort(NEWEST_FIRST))

    # ── User CRUD ──────────────────────────────────────────────────

    def create_user(
        self,
        email: str,
        password_hash: str,
        name: str = "",
        bio: str = "",
        profile_image_url: str = "",
    ) -> User:
        """
        Create a new user.

        Raises:
            ValidationError: if the email is already registered.
        """
        now = utc_now()
        doc = {
            "email": email,
            "password": password_hash,
            "Name": name,
            "bio": bio,
            "profileImageURL": profile_image_url,
            "createdAt": now,
            "updatedAt": now,
        }
        with storage_errors("Internal server error during registration"):
            try:
                result = self.users.insert_one(doc)
            except DuplicateKeyError as e:
                # Lost a race against a concurrent registration
                raise ValidationError("User with this email already exists") from e

        doc["_id"] = result.inserted_id
        logger.info(f"Created user {result.inserted_id}")
        return self._doc_to_user(doc)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with storage_errors("Failed to fetch user"):
            doc = self.users.find_one({"email": email})
        return self._doc_to_user(doc) if doc else None

    def get_user_by_id(self, user_id: ObjectId) -> Optional[User]:
        with storage_errors("Failed to fetch user"):
            doc = self.users.find_one({"_id": user_id})
        return self._doc_to_user(doc) if doc else None

    def _doc_to_user(self, doc: Dict[str, Any]) -> User:
        """Convert a stored document to a User object."""
        return User(
            id=str(doc["_id"]),
            email=doc["email"],
            password_hash=doc.get("password", ""),
            name=doc.get("Name") or "",
            bio=doc.get("bio") or "",
            profile_image_url=doc.get("profileImageURL") or "",
            created_at=doc.get("createdAt"),
        )
