"""Store factory functions for creating store instances."""

from typing import Optional

from finata.database.memory import MemoryStore
from finata.database.sqlalchemy_store import SQLAlchemyStore
from finata.settings import Settings


def create_sqlite_store(
    database_path: Optional[str] = None,
    user_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> SQLAlchemyStore:
    """Create a SQLite-backed store.

    Args:
        database_path: Path to SQLite database file. If None, uses the
            FINATA_DB_PATH setting, then defaults to ~/.finata/finata.db
        user_id: Namespace for the store's collections. If None, uses the
            FINATA_USER setting
        settings: Settings to read defaults from. If None, read from the
            environment

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if settings is None:
        settings = Settings.from_env()
    if database_path is None:
        database_path = settings.resolved_db_path()

    return SQLAlchemyStore(
        f"sqlite:///{database_path}",
        user_id=user_id or settings.user_id,
        max_attempts=settings.max_attempts,
        busy_timeout=settings.busy_timeout,
    )


def create_memory_store(user_id: str = "local") -> MemoryStore:
    """Create an in-memory store for sessions without a database."""
    return MemoryStore(user_id=user_id)
