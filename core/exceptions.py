class StorageError(Exception):
    """Unexpected storage failure (connection, I/O, constraint violation).

    Distinct from "not found", which engines report as None / False.
    """

    def __init__(self, operation: str, original: Exception | None = None):
        self.operation = operation
        self.original = original
        detail = f": {original}" if original is not None else ""
        super().__init__(f"Storage operation '{operation}' failed{detail}")


class PatientNotFoundError(ValueError):
    """Raised by the service layer when a patient_id does not reference a patient."""

    def __init__(self, patient_id: int):
        self.patient_id = patient_id
        super().__init__(f"Patient {patient_id} not found")
