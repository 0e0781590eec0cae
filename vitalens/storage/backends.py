"""
Key-value storage backends.

Backends never raise on storage failures: reads degrade to "missing" and
writes degrade to no-ops, with a warning in the log. Callers treat a
missing value as an empty collection.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..config import Settings
from ..database import Base, create_db_engine, create_session_factory
from .models import StorageEntry

# Set up logging
logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Abstract string-to-string storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present."""

    def is_available(self) -> bool:
        return True


class MemoryStorage(KeyValueStorage):
    """Process-local storage backed by a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class NullStorage(KeyValueStorage):
    """
    Storage used when no persistent storage is available.

    Every read misses and every write is dropped.
    """

    def get_item(self, key: str) -> Optional[str]:
        return None

    def set_item(self, key: str, value: str) -> None:
        logger.debug(f"Storage unavailable, dropping write to '{key}'")

    def remove_item(self, key: str) -> None:
        logger.debug(f"Storage unavailable, dropping removal of '{key}'")

    def is_available(self) -> bool:
        return False


class DatabaseStorage(KeyValueStorage):
    """
    Storage backed by the storage_entries table.

    Each call runs in its own short-lived session.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as db:
                entry = db.get(StorageEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            logger.warning(f"Error reading storage key '{key}': {str(e)}")
            return None

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            try:
                entry = db.get(StorageEntry, key)
                if entry:
                    entry.value = value
                else:
                    db.add(StorageEntry(key=key, value=value))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning(f"Error writing storage key '{key}': {str(e)}")

    def remove_item(self, key: str) -> None:
        with self.session_factory() as db:
            try:
                entry = db.get(StorageEntry, key)
                if entry:
                    db.delete(entry)
                    db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning(f"Error removing storage key '{key}': {str(e)}")

    def is_available(self) -> bool:
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False


def init_storage(settings: Settings) -> KeyValueStorage:
    """
    Open the configured storage database, creating its table if needed.

    Falls back to NullStorage when the database cannot be opened, so the
    application keeps running in a degraded mode.

    Args:
        settings: Application settings

    Returns:
        KeyValueStorage: Ready-to-use storage backend
    """
    try:
        engine = create_db_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
    except (SQLAlchemyError, ImportError) as e:
        logger.warning(f"Persistent storage unavailable, running without it: {str(e)}")
        return NullStorage()

    logger.info(f"Storage initialised at {engine.url.render_as_string(hide_password=True)}")
    return DatabaseStorage(create_session_factory(engine))
