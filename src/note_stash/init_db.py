"""Create the database schema without running migrations."""

import logging

from note_stash.core.logging import setup_logging
from note_stash.core.settings import settings
from note_stash.db.session import create_tables, engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    setup_logging(settings.log_level)
    init_db()
