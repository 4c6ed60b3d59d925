from .database import Database, User, parse_object_id, serialize_document
from .migrations import migrate_liked_by_to_strings

__all__ = [
    "Database",
    "User",
    "parse_object_id",
    "serialize_document",
    "migrate_liked_by_to_strings",
]
