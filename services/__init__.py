from .patient_service import require_patient, get_patient_history, find_patients
from .settings_service import initialize_default_settings, record_sync

__all__ = [
    "require_patient",
    "get_patient_history",
    "find_patients",
    "initialize_default_settings",
    "record_sync",
]
