from core.logging import get_logger
from models import Appointment
from services.patient_service import require_patient
from storage import Storage

logger = get_logger("services.appointments")


# -----------------------------
# Create an appointment for an existing patient
# -----------------------------
def create_appointment(storage: Storage, data: dict) -> Appointment:
    require_patient(storage, data.get("patient_id"))
    appointment = storage.create_appointment(data)
    logger.info(f"Booked appointment {appointment.id} for patient {appointment.patient_id} at {appointment.date}")
    return appointment


# -----------------------------
# Update an appointment; a new patient_id must exist
# -----------------------------
def update_appointment(storage: Storage, appointment_id: int, data: dict) -> Appointment | None:
    if data.get("patient_id") is not None:
        require_patient(storage, data["patient_id"])
    return storage.update_appointment(appointment_id, data)


# -----------------------------
# Mark an appointment as done
# -----------------------------
def complete_appointment(storage: Storage, appointment_id: int) -> Appointment | None:
    return storage.update_appointment(appointment_id, {"completed": True})
