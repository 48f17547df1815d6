import os
from dotenv import load_dotenv


# Load .env so settings are available when running scripts directly
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "data", "clinic.db")

STORAGE_BACKENDS = ("memory", "database")


def get_storage_backend() -> str:
    """Return the configured storage backend name ('memory' or 'database')."""
    backend = os.getenv("CLINIC_STORAGE_BACKEND", "database").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"Invalid CLINIC_STORAGE_BACKEND '{backend}'. Expected memory or database."
        )
    return backend


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")


def get_log_level() -> str:
    return os.getenv("CLINIC_LOG_LEVEL", "INFO")


def get_backup_dir() -> str:
    return os.getenv("CLINIC_BACKUP_DIR", os.path.join(BASE_DIR, "data", "backups"))


def get_backup_url() -> str | None:
    return os.getenv("CLINIC_BACKUP_URL") or None
