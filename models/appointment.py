# models/appointment.py

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base, UTCDateTime


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Link to patient
    patient_id = Column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Scheduled start (date + time) and length in minutes
    date = Column(UTCDateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False)

    treatment_type = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)

    patient = relationship("Patient", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment {self.id} for Patient {self.patient_id} at {self.date}>"
