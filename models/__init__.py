from .patient import Patient
from .appointment import Appointment
from .treatment_record import TreatmentRecord
from .clinic_settings import ClinicSettings, DEFAULT_CLINIC_NAME, DEFAULT_NOTIFICATION_SETTINGS, SETTINGS_ID
from .user import User

__all__ = [
    "Patient",
    "Appointment",
    "TreatmentRecord",
    "ClinicSettings",
    "DEFAULT_CLINIC_NAME",
    "DEFAULT_NOTIFICATION_SETTINGS",
    "SETTINGS_ID",
    "User",
]
