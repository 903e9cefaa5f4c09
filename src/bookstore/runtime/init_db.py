"""Database initialization script."""

from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.runtime.context import get_config


def init_db() -> None:
    """Create all database tables."""
    database_service = DbSessionService(get_config())
    try:
        database_service.create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
