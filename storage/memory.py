"""
Non-persistent storage engine backed by plain dicts.

Intended for tests and demos. Every public method takes the store lock, so
the engine can be shared between threads; returned objects are copies.
"""

import itertools
import threading
from datetime import datetime

from core.logging import get_logger
from core.time_utils import to_utc
from models import SETTINGS_ID, Appointment, ClinicSettings, Patient, TreatmentRecord, User
from storage.base import (
    Storage,
    clean_appointment,
    clean_patient,
    clean_settings,
    clean_treatment_record,
    clean_user,
    merge_settings,
)

logger = get_logger("storage.memory")


def _by_date(item):
    return (item.date, item.id)


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


class MemoryStorage(Storage):

    def __init__(self):
        self._lock = threading.RLock()

        self._users: dict[int, User] = {}
        self._patients: dict[int, Patient] = {}
        self._appointments: dict[int, Appointment] = {}
        self._records: dict[int, TreatmentRecord] = {}
        self._settings: ClinicSettings | None = None

        self._user_ids = itertools.count(1)
        self._patient_ids = itertools.count(1)
        self._appointment_ids = itertools.count(1)
        self._record_ids = itertools.count(1)

    # -----------------------------
    # Generic helpers
    # -----------------------------
    def _get(self, table: dict, key: int):
        with self._lock:
            item = table.get(key)
            return item.copy() if item is not None else None

    def _update(self, table: dict, key: int, changes: dict):
        with self._lock:
            item = table.get(key)
            if item is None:
                return None
            updated = type(item)(**{**item.to_dict(), **changes})
            table[key] = updated
            return updated.copy()

    def _delete(self, table: dict, key: int) -> bool:
        with self._lock:
            return table.pop(key, None) is not None

    # -----------------------------
    # Users
    # -----------------------------
    def get_user(self, user_id: int) -> User | None:
        return self._get(self._users, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.copy()
        return None

    def create_user(self, data: dict) -> User:
        cleaned = clean_user(data)
        with self._lock:
            if any(u.username == cleaned["username"] for u in self._users.values()):
                raise ValueError("Username already exists.")
            user = User(id=next(self._user_ids), **cleaned)
            self._users[user.id] = user
            return user.copy()

    # -----------------------------
    # Patients
    # -----------------------------
    def get_patient(self, patient_id: int) -> Patient | None:
        return self._get(self._patients, patient_id)

    def get_all_patients(self) -> list[Patient]:
        with self._lock:
            return [p.copy() for p in self._patients.values()]

    def search_patients(self, query: str) -> list[Patient]:
        needle = query.lower()
        with self._lock:
            return [
                p.copy() for p in self._patients.values()
                if _contains(p.name, needle)
                or _contains(p.phone, needle)
                or _contains(p.email, needle)
            ]

    def create_patient(self, data: dict) -> Patient:
        cleaned = clean_patient(data)
        with self._lock:
            patient = Patient(id=next(self._patient_ids), last_visit=None, **cleaned)
            self._patients[patient.id] = patient
            logger.info(f"Created patient {patient.id}")
            return patient.copy()

    def update_patient(self, patient_id: int, data: dict) -> Patient | None:
        return self._update(self._patients, patient_id, clean_patient(data, partial=True))

    def delete_patient(self, patient_id: int) -> bool:
        with self._lock:
            if patient_id not in self._patients:
                return False

            # Children go with the patient
            for appt_id in [a.id for a in self._appointments.values() if a.patient_id == patient_id]:
                del self._appointments[appt_id]
            for rec_id in [r.id for r in self._records.values() if r.patient_id == patient_id]:
                del self._records[rec_id]

            del self._patients[patient_id]
            logger.info(f"Deleted patient {patient_id} with appointments and records")
            return True

    # -----------------------------
    # Appointments
    # -----------------------------
    def get_appointment(self, appointment_id: int) -> Appointment | None:
        return self._get(self._appointments, appointment_id)

    def get_appointments_by_patient(self, patient_id: int) -> list[Appointment]:
        with self._lock:
            found = [a for a in self._appointments.values() if a.patient_id == patient_id]
            return [a.copy() for a in sorted(found, key=_by_date)]

    def get_appointments_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        start, end = to_utc(start), to_utc(end)
        with self._lock:
            found = [a for a in self._appointments.values() if start <= a.date <= end]
            return [a.copy() for a in sorted(found, key=_by_date)]

    def create_appointment(self, data: dict) -> Appointment:
        cleaned = clean_appointment(data)
        with self._lock:
            appointment = Appointment(id=next(self._appointment_ids), **cleaned)
            self._appointments[appointment.id] = appointment
            return appointment.copy()

    def update_appointment(self, appointment_id: int, data: dict) -> Appointment | None:
        return self._update(self._appointments, appointment_id, clean_appointment(data, partial=True))

    def delete_appointment(self, appointment_id: int) -> bool:
        return self._delete(self._appointments, appointment_id)

    # -----------------------------
    # Treatment records
    # -----------------------------
    def get_treatment_record(self, record_id: int) -> TreatmentRecord | None:
        return self._get(self._records, record_id)

    def get_treatment_records_by_patient(self, patient_id: int) -> list[TreatmentRecord]:
        with self._lock:
            found = [r for r in self._records.values() if r.patient_id == patient_id]
            return [r.copy() for r in sorted(found, key=_by_date, reverse=True)]

    def get_all_treatment_records(self) -> list[TreatmentRecord]:
        with self._lock:
            return [r.copy() for r in sorted(self._records.values(), key=_by_date, reverse=True)]

    def search_treatment_records(self, query: str) -> list[TreatmentRecord]:
        needle = query.lower()
        with self._lock:
            found = [
                r for r in self._records.values()
                if _contains(r.treatment_type, needle) or _contains(r.notes, needle)
            ]
            return [r.copy() for r in sorted(found, key=_by_date, reverse=True)]

    def create_treatment_record(self, data: dict) -> TreatmentRecord:
        cleaned = clean_treatment_record(data)
        with self._lock:
            record = TreatmentRecord(id=next(self._record_ids), **cleaned)
            self._records[record.id] = record

            # Last write wins, even if an older record is added later
            patient = self._patients.get(record.patient_id)
            if patient is not None:
                self._patients[patient.id] = Patient(**{**patient.to_dict(), "last_visit": record.date})

            logger.info(f"Created treatment record {record.id} for patient {record.patient_id}")
            return record.copy()

    def update_treatment_record(self, record_id: int, data: dict) -> TreatmentRecord | None:
        return self._update(self._records, record_id, clean_treatment_record(data, partial=True))

    def delete_treatment_record(self, record_id: int) -> bool:
        return self._delete(self._records, record_id)

    # -----------------------------
    # Clinic settings
    # -----------------------------
    def get_clinic_settings(self) -> ClinicSettings | None:
        with self._lock:
            return self._settings.copy() if self._settings is not None else None

    def update_clinic_settings(self, data: dict) -> ClinicSettings:
        cleaned = clean_settings(data)
        with self._lock:
            if self._settings is None:
                values = merge_settings(None, cleaned)
                values["id"] = SETTINGS_ID
                logger.info("Created clinic settings")
            else:
                values = merge_settings(self._settings.to_dict(), cleaned)
            self._settings = ClinicSettings(**values)
            return self._settings.copy()
