"""Create every table directly, for local development without Alembic."""

from niche_communities.core.logging import configure_logging
from niche_communities.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    configure_logging()
    init_db()
    print("Database initialized.")
