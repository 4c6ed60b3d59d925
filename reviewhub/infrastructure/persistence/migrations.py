"""
Data Migrations
===============

One-off fixes for documents written by older versions of the app.
"""

import logging

from bson import ObjectId

from .database import Database, storage_errors

logger = logging.getLogger(__name__)


def migrate_liked_by_to_strings(db: Database) -> int:
    """
    Rewrite likedBy arrays that still hold ObjectIds as plain strings.

    Older products stored authenticated likes as ObjectId references; the
    like ledger compares user ids as strings.

    Returns:
        Number of products rewritten.
    """
    migrated = 0

    with storage_errors("Failed to migrate likedBy"):
        cursor = db.products.find(
            {"likedBy": {"$exists": True, "$ne": []}},
            {"likedBy": 1},
        )
        for product in cursor:
            liked_by = product.get("likedBy")
            if not isinstance(liked_by, list):
                continue
            if not any(isinstance(uid, ObjectId) for uid in liked_by):
                continue

            db.products.update_one(
                {"_id": product["_id"]},
                {"$set": {"likedBy": [str(uid) for uid in liked_by]}},
            )
            migrated += 1
            logger.info(f"Migrated product {product['_id']}")

    logger.info(f"Migration complete: {migrated} products updated")
    return migrated
