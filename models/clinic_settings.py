# models/clinic_settings.py

from sqlalchemy import Column, Integer, String, Boolean, JSON, CheckConstraint

from core.database import Base, UTCDateTime


# The only primary key the settings table accepts
SETTINGS_ID = 1

DEFAULT_CLINIC_NAME = "My Clinic"

DEFAULT_NOTIFICATION_SETTINGS = {
    "appointment_reminders": True,
    "follow_up_alerts": True,
    "sync_notifications": True,
}


class ClinicSettings(Base):
    """Clinic-wide configuration. At most one row exists."""

    __tablename__ = "clinic_settings"
    __table_args__ = (CheckConstraint(f"id = {SETTINGS_ID}", name="ck_clinic_settings_single_row"),)

    id = Column(Integer, primary_key=True)

    clinic_name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # Backup integration
    google_account = Column(String, nullable=True)
    last_sync = Column(UTCDateTime, nullable=True)
    auto_sync = Column(Boolean, nullable=False, default=True)

    notification_settings = Column(JSON, nullable=False)

    def __repr__(self):
        return f"<ClinicSettings {self.clinic_name}>"
