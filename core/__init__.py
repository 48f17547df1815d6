from .database import Base, UTCDateTime, create_db_engine, create_session_factory, init_db
from .exceptions import StorageError, PatientNotFoundError
from .time_utils import now_utc, now_local, to_utc, start_of_day, end_of_day

__all__ = [
    "Base",
    "UTCDateTime",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "StorageError",
    "PatientNotFoundError",
    "now_utc",
    "now_local",
    "to_utc",
    "start_of_day",
    "end_of_day",
]
