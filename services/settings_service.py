from core.logging import get_logger
from core.time_utils import now_utc
from models import ClinicSettings
from storage import Storage

logger = get_logger("services.settings")

DEFAULT_SETTINGS = {
    "clinic_name": "My Medical Clinic",
    "address": "123 Medical Way",
    "phone": "123-456-7890",
    "google_account": "",
    "auto_sync": True,
}


def initialize_default_settings(storage: Storage) -> ClinicSettings:
    """
    Creates the clinic settings row on a fresh store.
    Existing settings are returned untouched.
    """
    existing = storage.get_clinic_settings()
    if existing:
        logger.debug("Clinic settings already exist")
        return existing

    logger.info("Creating default clinic settings")
    return storage.update_clinic_settings(dict(DEFAULT_SETTINGS))


def record_sync(storage: Storage, when=None) -> ClinicSettings:
    """Persist the time of the last successful backup."""
    return storage.update_clinic_settings({"last_sync": when or now_utc()})
