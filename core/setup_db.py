# core/setup_db.py

from core.config import get_database_url
from core.logging import logger
from storage import DatabaseStorage
from services.settings_service import initialize_default_settings


def main(database_url: str | None = None):
    url = database_url or get_database_url()
    logger.info("Creating database tables...")

    # Tables are created when the storage is constructed
    storage = DatabaseStorage(database_url=url)

    # Seed the clinic settings row
    initialize_default_settings(storage)

    logger.info("Database initialized successfully.")
    return storage


if __name__ == "__main__":
    main()
