# models/treatment_record.py

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base, UTCDateTime


class TreatmentRecord(Base):
    __tablename__ = "treatment_records"

    id = Column(Integer, primary_key=True, index=True)

    patient_id = Column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(UTCDateTime, nullable=False, index=True)
    treatment_type = Column(String, nullable=False)
    notes = Column(Text, nullable=True)

    # follow_up_date only means something when follow_up_needed is set
    follow_up_needed = Column(Boolean, nullable=False, default=False)
    follow_up_date = Column(UTCDateTime, nullable=True)

    patient = relationship("Patient", back_populates="treatment_records")

    def __repr__(self):
        return f"<TreatmentRecord {self.id} ({self.treatment_type}) for Patient {self.patient_id}>"
