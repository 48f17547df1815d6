"""Logging for the clinic packages: one `clinic` logger, children per module."""

import logging
import sys

from core.config import get_log_level

LOGGER_NAME = "clinic"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> logging.Logger:
    """Attach a stdout handler to the `clinic` logger at CLINIC_LOG_LEVEL."""
    level_name = get_log_level().upper()
    level = getattr(logging, level_name, logging.INFO)

    clinic_logger = logging.getLogger(LOGGER_NAME)
    clinic_logger.setLevel(level)

    # setup_logging may run more than once (tests, scripts)
    if not clinic_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        clinic_logger.addHandler(handler)

    clinic_logger.debug(f"Clinic logging at {level_name}")
    return clinic_logger


def get_logger(name: str) -> logging.Logger:
    """Child logger, e.g. get_logger("storage.memory") -> clinic.storage.memory."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger = setup_logging()
