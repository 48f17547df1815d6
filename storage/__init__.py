from core.config import get_storage_backend
from core.logging import get_logger

from .base import Storage
from .memory import MemoryStorage
from .database import DatabaseStorage

logger = get_logger("storage")


def create_storage(backend: str | None = None, database_url: str | None = None) -> Storage:
    """Build the storage engine once at startup.

    backend defaults to CLINIC_STORAGE_BACKEND; database_url to DATABASE_URL.
    The returned object is meant to be passed to services explicitly.
    """
    backend = (backend or get_storage_backend()).strip().lower()

    if backend == "memory":
        logger.info("Using in-memory storage (data is not persisted)")
        return MemoryStorage()
    if backend == "database":
        return DatabaseStorage(database_url=database_url)

    raise ValueError(f"Unknown storage backend '{backend}'. Expected memory or database.")


__all__ = ["Storage", "MemoryStorage", "DatabaseStorage", "create_storage"]
