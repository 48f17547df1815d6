"""Helpers for building test data."""

from datetime import datetime


def local(*args) -> datetime:
    """Aware datetime for a wall-clock time in the local zone."""
    return datetime(*args).astimezone()


def make_appointment(storage, patient_id, when: datetime, **extra):
    data = {
        "patient_id": patient_id,
        "date": when,
        "duration": 30,
        "treatment_type": "Checkup",
    }
    data.update(extra)
    return storage.create_appointment(data)


def make_record(storage, patient_id, when: datetime, **extra):
    data = {
        "patient_id": patient_id,
        "date": when,
        "treatment_type": "Checkup",
    }
    data.update(extra)
    return storage.create_treatment_record(data)
