from core.logging import get_logger
from models import TreatmentRecord
from services.patient_service import require_patient
from storage import Storage

logger = get_logger("services.records")


# -----------------------------
# Create a treatment record (also moves the patient's last visit)
# -----------------------------
def create_record(storage: Storage, data: dict) -> TreatmentRecord:
    require_patient(storage, data.get("patient_id"))
    return storage.create_treatment_record(data)


# -----------------------------
# Update a treatment record; a new patient_id must exist
# -----------------------------
def update_record(storage: Storage, record_id: int, data: dict) -> TreatmentRecord | None:
    if data.get("patient_id") is not None:
        require_patient(storage, data["patient_id"])
    return storage.update_treatment_record(record_id, data)


# -----------------------------
# Records still waiting on a follow-up
# -----------------------------
def get_pending_follow_ups(storage: Storage) -> list[TreatmentRecord]:
    """Records flagged for follow-up, soonest follow-up date first.

    Records without a follow-up date come last.
    """
    pending = [r for r in storage.get_all_treatment_records() if r.follow_up_needed]
    return sorted(pending, key=lambda r: (r.follow_up_date is None, r.follow_up_date or r.date, r.id))
