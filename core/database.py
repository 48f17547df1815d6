import copy
import os
from datetime import timezone

from sqlalchemy import DateTime, TypeDecorator, create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from core.config import get_database_url
from core.time_utils import to_utc


class _ModelMixin:
    """Helpers shared by every model (plain column snapshots and copies)."""

    def to_dict(self) -> dict:
        return {col.name: getattr(self, col.name) for col in self.__table__.columns}

    def copy(self):
        """Return a transient copy that shares no state with this instance."""
        return type(self)(**copy.deepcopy(self.to_dict()))


# Base class for all models
Base = declarative_base(cls=_ModelMixin)


class UTCDateTime(TypeDecorator):
    """Timestamp column stored as naive UTC and read back as aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE / REFERENCES unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str | None = None, **kwargs) -> Engine:
    """Create an engine for the given URL (defaults to DATABASE_URL).

    SQLite engines allow cross-thread use and enforce foreign keys. An
    in-memory SQLite URL gets a StaticPool so every session sees the same
    database.
    """
    url = database_url or get_database_url()

    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        db_path = make_url(url).database
        if not db_path or db_path == ":memory:":
            kwargs.setdefault("poolclass", StaticPool)
        elif os.path.dirname(db_path):
            # e.g. data/clinic.db on a fresh checkout
            os.makedirs(os.path.dirname(db_path), exist_ok=True)

    engine = create_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory whose objects stay readable after commit/close."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables registered on Base."""
    # Import models so they register with Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
