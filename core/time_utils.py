from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_local() -> datetime:
    """Return the current local wall-clock time as a naive datetime."""
    return datetime.now()


def to_utc(value: datetime | str | None) -> datetime | None:
    """Normalize a timestamp to an aware UTC datetime.

    Naive datetimes are read as local wall-clock time. ISO-8601 strings
    (a trailing 'Z' included) are parsed first.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    elif not isinstance(value, datetime):
        raise ValueError(f"Expected a datetime or ISO-8601 string, got {type(value).__name__}")

    # astimezone() on a naive value assumes the local zone
    return value.astimezone(timezone.utc)


def _local_date(day: date | datetime) -> date:
    if isinstance(day, datetime):
        return to_utc(day).astimezone().date()
    return day


def start_of_day(day: date | datetime) -> datetime:
    """Local midnight of the given calendar day, as a UTC instant."""
    return datetime.combine(_local_date(day), time.min).astimezone(timezone.utc)


def end_of_day(day: date | datetime) -> datetime:
    """Local 23:59:59.999999 of the given calendar day, as a UTC instant."""
    return datetime.combine(_local_date(day), time.max).astimezone(timezone.utc)
