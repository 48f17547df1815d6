"""
Storage contract shared by the in-memory and database engines.

Both engines must behave identically for every operation declared here:

- "not found" is reported as None (get/update) or False (delete), never raised
- partial updates only touch the fields they name
- patient deletion removes the patient's appointments and treatment records
- creating a treatment record also sets the patient's last_visit to the
  record's date, as one atomic step
- appointments are listed oldest first, treatment records newest first

Payload cleaning lives here so both engines accept and reject exactly the
same input.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from core.dict_utils import deep_merge
from core.time_utils import end_of_day, now_utc, start_of_day, to_utc
from models import (
    DEFAULT_CLINIC_NAME,
    DEFAULT_NOTIFICATION_SETTINGS,
    Appointment,
    ClinicSettings,
    Patient,
    TreatmentRecord,
    User,
)


PATIENT_FIELDS = {"name", "phone", "email", "date_of_birth", "address", "notes"}
PATIENT_REQUIRED = {"name", "phone"}

APPOINTMENT_FIELDS = {"patient_id", "date", "duration", "treatment_type", "notes", "completed"}
APPOINTMENT_REQUIRED = {"patient_id", "date", "duration", "treatment_type"}

RECORD_FIELDS = {
    "patient_id", "date", "treatment_type", "notes", "follow_up_needed", "follow_up_date",
}
RECORD_REQUIRED = {"patient_id", "date", "treatment_type"}

SETTINGS_FIELDS = {
    "clinic_name", "address", "phone", "google_account",
    "last_sync", "auto_sync", "notification_settings",
}

USER_FIELDS = {"username", "password"}
USER_REQUIRED = {"username", "password"}

TIMESTAMP_FIELDS = {"date", "follow_up_date", "last_sync", "last_visit"}


def _clean(entity: str, data: dict, allowed: set, required: set = frozenset(), partial: bool = False) -> dict:
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown {entity} field(s): {', '.join(sorted(unknown))}")

    if not partial:
        missing = {f for f in required if data.get(f) is None}
        if missing:
            raise ValueError(f"Missing required {entity} field(s): {', '.join(sorted(missing))}")

    cleaned = dict(data)
    for key in TIMESTAMP_FIELDS & cleaned.keys():
        cleaned[key] = to_utc(cleaned[key])

    for key in required & cleaned.keys():
        if cleaned[key] is None:
            raise ValueError(f"{entity} field '{key}' cannot be empty")
    return cleaned


def clean_patient(data: dict, partial: bool = False) -> dict:
    data = dict(data)
    if "last_visit" in data:
        if partial:
            raise ValueError("last_visit is set by treatment records and cannot be updated directly")
        # ignored on create; a new patient has never visited
        data.pop("last_visit")
    cleaned = _clean("patient", data, PATIENT_FIELDS, PATIENT_REQUIRED, partial)
    if "name" in cleaned and not str(cleaned["name"]).strip():
        raise ValueError("Patient name cannot be empty")
    return cleaned


def clean_appointment(data: dict, partial: bool = False) -> dict:
    cleaned = _clean("appointment", data, APPOINTMENT_FIELDS, APPOINTMENT_REQUIRED, partial)
    if "duration" in cleaned:
        duration = cleaned["duration"]
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise ValueError("Appointment duration must be a positive number of minutes")
    if not partial or "completed" in cleaned:
        cleaned["completed"] = bool(cleaned.get("completed", False))
    return cleaned


def clean_treatment_record(data: dict, partial: bool = False) -> dict:
    cleaned = _clean("treatment record", data, RECORD_FIELDS, RECORD_REQUIRED, partial)
    if not partial or "follow_up_needed" in cleaned:
        cleaned["follow_up_needed"] = bool(cleaned.get("follow_up_needed", False))
    return cleaned


def clean_settings(data: dict) -> dict:
    cleaned = _clean("clinic settings", data, SETTINGS_FIELDS, partial=True)
    if "clinic_name" in cleaned and not cleaned["clinic_name"]:
        raise ValueError("Clinic name cannot be empty")
    if "notification_settings" in cleaned and not isinstance(cleaned["notification_settings"], dict):
        raise ValueError("notification_settings must be a mapping")
    return cleaned


def merge_settings(current: dict | None, update: dict) -> dict:
    """Column values for the settings row after applying a cleaned update.

    With no current row the defaults (clinic name, auto sync on, every
    notification enabled) are filled in first. notification_settings is
    deep-merged instead of replaced.
    """
    if current is None:
        current = {
            "clinic_name": DEFAULT_CLINIC_NAME,
            "auto_sync": True,
            "notification_settings": dict(DEFAULT_NOTIFICATION_SETTINGS),
        }

    merged = {**current, **update}
    merged["notification_settings"] = deep_merge(
        current.get("notification_settings") or {},
        update.get("notification_settings") or {},
    )
    if merged.get("auto_sync") is None:
        merged["auto_sync"] = True
    return merged


def clean_user(data: dict) -> dict:
    return _clean("user", data, USER_FIELDS, USER_REQUIRED)


class Storage(ABC):
    """CRUD and query operations over the clinic data model."""

    # -----------------------------
    # Users
    # -----------------------------
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def create_user(self, data: dict) -> User: ...

    # -----------------------------
    # Patients
    # -----------------------------
    @abstractmethod
    def get_patient(self, patient_id: int) -> Patient | None: ...

    @abstractmethod
    def get_all_patients(self) -> list[Patient]:
        """All patients in id (insertion) order."""

    @abstractmethod
    def search_patients(self, query: str) -> list[Patient]:
        """Case-insensitive substring match on name, phone or email."""

    @abstractmethod
    def create_patient(self, data: dict) -> Patient: ...

    @abstractmethod
    def update_patient(self, patient_id: int, data: dict) -> Patient | None: ...

    @abstractmethod
    def delete_patient(self, patient_id: int) -> bool:
        """Delete a patient together with their appointments and records."""

    # -----------------------------
    # Appointments
    # -----------------------------
    @abstractmethod
    def get_appointment(self, appointment_id: int) -> Appointment | None: ...

    @abstractmethod
    def get_appointments_by_patient(self, patient_id: int) -> list[Appointment]: ...

    @abstractmethod
    def get_appointments_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments with start <= date <= end, oldest first."""

    def get_appointments_by_date(self, day: date | datetime) -> list[Appointment]:
        """Appointments on the local calendar day of `day`, oldest first."""
        return self.get_appointments_in_range(start_of_day(day), end_of_day(day))

    def get_today_appointments(self) -> list[Appointment]:
        return self.get_appointments_by_date(now_utc())

    @abstractmethod
    def create_appointment(self, data: dict) -> Appointment:
        """Store an appointment. patient_id is not checked here; see services."""

    @abstractmethod
    def update_appointment(self, appointment_id: int, data: dict) -> Appointment | None: ...

    @abstractmethod
    def delete_appointment(self, appointment_id: int) -> bool: ...

    # -----------------------------
    # Treatment records
    # -----------------------------
    @abstractmethod
    def get_treatment_record(self, record_id: int) -> TreatmentRecord | None: ...

    @abstractmethod
    def get_treatment_records_by_patient(self, patient_id: int) -> list[TreatmentRecord]:
        """A patient's records, most recent first."""

    @abstractmethod
    def get_all_treatment_records(self) -> list[TreatmentRecord]: ...

    @abstractmethod
    def search_treatment_records(self, query: str) -> list[TreatmentRecord]:
        """Case-insensitive substring match on treatment_type or notes."""

    @abstractmethod
    def create_treatment_record(self, data: dict) -> TreatmentRecord:
        """Store a record and set the owning patient's last_visit to its date."""

    @abstractmethod
    def update_treatment_record(self, record_id: int, data: dict) -> TreatmentRecord | None: ...

    @abstractmethod
    def delete_treatment_record(self, record_id: int) -> bool: ...

    # -----------------------------
    # Clinic settings
    # -----------------------------
    @abstractmethod
    def get_clinic_settings(self) -> ClinicSettings | None: ...

    @abstractmethod
    def update_clinic_settings(self, data: dict) -> ClinicSettings:
        """Merge onto the settings row, creating it with defaults if absent."""
