from core.exceptions import PatientNotFoundError
from models import Patient
from storage import Storage


# ------------------------------------------
# Patient existence check used before any write that references a patient
# ------------------------------------------
def require_patient(storage: Storage, patient_id: int | None) -> Patient:
    if patient_id is None:
        raise PatientNotFoundError(patient_id)
    patient = storage.get_patient(patient_id)
    if not patient:
        raise PatientNotFoundError(patient_id)
    return patient


# ------------------------------------------
# Patient overview (patient + appointments + records)
# ------------------------------------------
def get_patient_history(storage: Storage, patient_id: int) -> dict | None:
    """Return the patient with their appointments (oldest first) and
    treatment records (newest first), or None if the patient is unknown."""
    patient = storage.get_patient(patient_id)
    if not patient:
        return None

    return {
        "patient": patient,
        "appointments": storage.get_appointments_by_patient(patient_id),
        "treatment_records": storage.get_treatment_records_by_patient(patient_id),
    }


# ------------------------------------------
# Search with the blank query meaning "everyone"
# ------------------------------------------
def find_patients(storage: Storage, query: str | None = None) -> list[Patient]:
    if not query or not query.strip():
        return storage.get_all_patients()
    return storage.search_patients(query)
