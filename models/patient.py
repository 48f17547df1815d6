# models/patient.py

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from core.database import Base, UTCDateTime


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    # Contact details
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)

    # Stored as entered, not parsed
    date_of_birth = Column(String, nullable=True)
    address = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    # Maintained by treatment record creation
    last_visit = Column(UTCDateTime, nullable=True)

    # ORM relationships
    appointments = relationship(
        "Appointment",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    treatment_records = relationship(
        "TreatmentRecord",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Patient {self.id} - {self.name}>"
