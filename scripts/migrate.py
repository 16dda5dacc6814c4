import sys
import os
import logging

# Ensure we can import app modules
sys.path.append(os.getcwd())

from app.core.exceptions import MigrationError
from app.database import engine
from app.migrations import run_migrations

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def migrate() -> int:
    try:
        applied = run_migrations(engine)
    except MigrationError as e:
        logger.error(f"Migration run aborted at {e.migration_id}: {e.cause}")
        return 1
    finally:
        engine.dispose()

    if applied:
        for migration_id in applied:
            logger.info(f"Applied: {migration_id}")
    else:
        logger.info("Database is already up to date.")
    return 0


if __name__ == "__main__":
    sys.exit(migrate())
