"""Time Utilities - UTC timestamps as stored in MongoDB"""
from datetime import datetime, timezone
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Current time, timezone-aware UTC"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Stored timestamp format, e.g. 2026-03-14T09:30:00.000Z

    Fixed millisecond precision and a Z suffix keep string comparison in
    range queries chronological.
    """
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """
    Parse a client supplied ISO 8601 timestamp

    Raises:
        ValueError: if value is not ISO 8601
    """
    return ensure_utc(date_parser.isoparse(value))
