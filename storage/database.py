"""
Persistent storage engine on SQLAlchemy.

One short-lived session per operation. Each operation commits once, so
multi-row effects (record + patient last_visit, patient + children) are
all-or-nothing. SQLAlchemy failures are logged and re-raised as
StorageError so callers can tell them apart from "not found".
"""

from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import String, func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import create_db_engine, create_session_factory, init_db
from core.exceptions import StorageError
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

logger = get_logger("storage.database")


def _icontains(column, needle: str):
    return func.lower(column, type_=String).contains(needle, autoescape=True)


class DatabaseStorage(Storage):

    def __init__(self, engine: Engine | None = None, database_url: str | None = None, create_tables: bool = True):
        self.engine = engine or create_db_engine(database_url)
        self._session_factory = create_session_factory(self.engine)
        if create_tables:
            init_db(self.engine)
        logger.info(f"Database storage initialized ({self.engine.dialect.name})")

    @contextmanager
    def _session(self, operation: str):
        db: Session = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{operation} failed: {e}")
            raise StorageError(operation, e) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # -----------------------------
    # Generic helpers
    # -----------------------------
    def _get(self, model, key: int, operation: str):
        with self._session(operation) as db:
            return db.get(model, key)

    def _add(self, obj, operation: str):
        with self._session(operation) as db:
            db.add(obj)
            db.flush()
            return obj

    def _update(self, model, key: int, changes: dict, operation: str):
        with self._session(operation) as db:
            obj = db.get(model, key)
            if obj is None:
                return None
            for field, value in changes.items():
                setattr(obj, field, value)
            db.flush()
            return obj

    def _delete(self, model, key: int, operation: str) -> bool:
        with self._session(operation) as db:
            deleted = db.query(model).filter(model.id == key).delete(synchronize_session=False)
            return deleted > 0

    # -----------------------------
    # Users
    # -----------------------------
    def get_user(self, user_id: int) -> User | None:
        return self._get(User, user_id, "get_user")

    def get_user_by_username(self, username: str) -> User | None:
        with self._session("get_user_by_username") as db:
            return db.query(User).filter(User.username == username).first()

    def create_user(self, data: dict) -> User:
        cleaned = clean_user(data)
        with self._session("create_user") as db:
            if db.query(User).filter(User.username == cleaned["username"]).first():
                raise ValueError("Username already exists.")
            user = User(**cleaned)
            db.add(user)
            db.flush()
            return user

    # -----------------------------
    # Patients
    # -----------------------------
    def get_patient(self, patient_id: int) -> Patient | None:
        return self._get(Patient, patient_id, "get_patient")

    def get_all_patients(self) -> list[Patient]:
        with self._session("get_all_patients") as db:
            return db.query(Patient).order_by(Patient.id).all()

    def search_patients(self, query: str) -> list[Patient]:
        needle = query.lower()
        with self._session("search_patients") as db:
            return (
                db.query(Patient)
                .filter(
                    or_(
                        _icontains(Patient.name, needle),
                        _icontains(Patient.phone, needle),
                        _icontains(Patient.email, needle),
                    )
                )
                .order_by(Patient.id)
                .all()
            )

    def create_patient(self, data: dict) -> Patient:
        patient = self._add(Patient(last_visit=None, **clean_patient(data)), "create_patient")
        logger.info(f"Created patient {patient.id}")
        return patient

    def update_patient(self, patient_id: int, data: dict) -> Patient | None:
        return self._update(Patient, patient_id, clean_patient(data, partial=True), "update_patient")

    def delete_patient(self, patient_id: int) -> bool:
        with self._session("delete_patient") as db:
            patient = db.get(Patient, patient_id)
            if not patient:
                return False

            # Delete children first; ON DELETE CASCADE is not relied on
            db.query(Appointment).filter(Appointment.patient_id == patient_id).delete(synchronize_session=False)
            db.query(TreatmentRecord).filter(TreatmentRecord.patient_id == patient_id).delete(synchronize_session=False)
            db.delete(patient)

        logger.info(f"Deleted patient {patient_id} with appointments and records")
        return True

    # -----------------------------
    # Appointments
    # -----------------------------
    def get_appointment(self, appointment_id: int) -> Appointment | None:
        return self._get(Appointment, appointment_id, "get_appointment")

    def get_appointments_by_patient(self, patient_id: int) -> list[Appointment]:
        with self._session("get_appointments_by_patient") as db:
            return (
                db.query(Appointment)
                .filter(Appointment.patient_id == patient_id)
                .order_by(Appointment.date.asc(), Appointment.id.asc())
                .all()
            )

    def get_appointments_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        start, end = to_utc(start), to_utc(end)
        with self._session("get_appointments_in_range") as db:
            return (
                db.query(Appointment)
                .filter(Appointment.date >= start, Appointment.date <= end)
                .order_by(Appointment.date.asc(), Appointment.id.asc())
                .all()
            )

    def create_appointment(self, data: dict) -> Appointment:
        return self._add(Appointment(**clean_appointment(data)), "create_appointment")

    def update_appointment(self, appointment_id: int, data: dict) -> Appointment | None:
        return self._update(Appointment, appointment_id, clean_appointment(data, partial=True), "update_appointment")

    def delete_appointment(self, appointment_id: int) -> bool:
        return self._delete(Appointment, appointment_id, "delete_appointment")

    # -----------------------------
    # Treatment records
    # -----------------------------
    def get_treatment_record(self, record_id: int) -> TreatmentRecord | None:
        return self._get(TreatmentRecord, record_id, "get_treatment_record")

    def get_treatment_records_by_patient(self, patient_id: int) -> list[TreatmentRecord]:
        with self._session("get_treatment_records_by_patient") as db:
            return (
                db.query(TreatmentRecord)
                .filter(TreatmentRecord.patient_id == patient_id)
                .order_by(TreatmentRecord.date.desc(), TreatmentRecord.id.desc())
                .all()
            )

    def get_all_treatment_records(self) -> list[TreatmentRecord]:
        with self._session("get_all_treatment_records") as db:
            return (
                db.query(TreatmentRecord)
                .order_by(TreatmentRecord.date.desc(), TreatmentRecord.id.desc())
                .all()
            )

    def search_treatment_records(self, query: str) -> list[TreatmentRecord]:
        needle = query.lower()
        with self._session("search_treatment_records") as db:
            return (
                db.query(TreatmentRecord)
                .filter(
                    or_(
                        _icontains(TreatmentRecord.treatment_type, needle),
                        _icontains(TreatmentRecord.notes, needle),
                    )
                )
                .order_by(TreatmentRecord.date.desc(), TreatmentRecord.id.desc())
                .all()
            )

    def create_treatment_record(self, data: dict) -> TreatmentRecord:
        cleaned = clean_treatment_record(data)
        with self._session("create_treatment_record") as db:
            record = TreatmentRecord(**cleaned)
            db.add(record)

            patient = db.get(Patient, record.patient_id)
            if patient:
                patient.last_visit = record.date

            db.flush()

        logger.info(f"Created treatment record {record.id} for patient {record.patient_id}")
        return record

    def update_treatment_record(self, record_id: int, data: dict) -> TreatmentRecord | None:
        return self._update(
            TreatmentRecord, record_id, clean_treatment_record(data, partial=True), "update_treatment_record"
        )

    def delete_treatment_record(self, record_id: int) -> bool:
        return self._delete(TreatmentRecord, record_id, "delete_treatment_record")

    # -----------------------------
    # Clinic settings
    # -----------------------------
    def get_clinic_settings(self) -> ClinicSettings | None:
        with self._session("get_clinic_settings") as db:
            return db.get(ClinicSettings, SETTINGS_ID)

    def update_clinic_settings(self, data: dict) -> ClinicSettings:
        cleaned = clean_settings(data)
        with self._session("update_clinic_settings") as db:
            settings = db.get(ClinicSettings, SETTINGS_ID)

            if settings is None:
                # A concurrent first insert fails on the primary key
                settings = ClinicSettings(id=SETTINGS_ID, **merge_settings(None, cleaned))
                db.add(settings)
                logger.info("Created clinic settings")
            else:
                for field, value in merge_settings(settings.to_dict(), cleaned).items():
                    if field != "id":
                        setattr(settings, field, value)

            db.flush()
            return settings
