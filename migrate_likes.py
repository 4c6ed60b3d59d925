"""
likedBy Migration Runner
========================

Converts ObjectId entries in every product's likedBy array to strings.
Safe to run more than once; already-migrated products are skipped.

    python migrate_likes.py
"""

import logging
import sys

from reviewhub.domain.errors import ReviewHubError
from reviewhub.infrastructure.config import get_settings
from reviewhub.infrastructure.persistence import Database, migrate_liked_by_to_strings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_migration() -> int:
    settings = get_settings()

    try:
        db = Database.from_settings(settings.database)
    except ReviewHubError as e:
        logger.error(e.message)
        return 1

    try:
        migrated = migrate_liked_by_to_strings(db)
    except ReviewHubError as e:
        logger.error(f"Migration failed: {e.message}")
        return 1
    finally:
        db.close()

    print(f"Migration complete! {migrated} products updated.")
    return 0


if __name__ == "__main__":
    sys.exit(run_migration())
