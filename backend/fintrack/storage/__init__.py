"""
Storage Package

Provides the storage interface, its two backends and the balance adjustment
protocol they share. `build_storage` picks a backend from settings.
"""
import logging

from fintrack.config import Settings
from fintrack.database import build_engine, build_session_factory, create_tables
from fintrack.storage.database import DatabaseStorage
from fintrack.storage.interface import (
    AccountInUseError,
    BalanceOverflowError,
    StorageBackendError,
    StorageError,
    StorageInterface,
)
from fintrack.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)

__all__ = [
    # Interface
    "StorageInterface",
    # Exceptions
    "AccountInUseError",
    "BalanceOverflowError",
    "StorageBackendError",
    "StorageError",
    # Backends
    "DatabaseStorage",
    "MemoryStorage",
    "build_storage",
]


def build_storage(settings: Settings) -> StorageInterface:
    """Construct the backend named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        logger.info("[STORAGE] Using in-memory storage")
        return MemoryStorage(
            seed_defaults=settings.seed_defaults,
            account_delete_policy=settings.account_delete_policy,
        )

    if settings.storage_backend == "database":
        engine = build_engine(settings.database_url)
        if settings.auto_create_tables:
            logger.warning("[STORAGE] AUTO_CREATE_TABLES is enabled; creating tables via SQLAlchemy metadata.")
            create_tables(engine)
        logger.info(f"[STORAGE] Using database storage ({engine.url.get_backend_name()})")
        return DatabaseStorage(
            build_session_factory(engine),
            account_delete_policy=settings.account_delete_policy,
        )

    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
