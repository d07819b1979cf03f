"""Wall-clock helpers.

All timestamps are stored and compared as naive UTC datetimes and exchanged
over the wire as ``yyyy-MM-dd HH:mm:ss``.
"""

from __future__ import annotations

from datetime import datetime, timezone

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_datetime(value: datetime) -> str:
    return to_naive_utc(value).strftime(DATE_FORMAT)


def parse_datetime(raw: str) -> datetime:
    """Parse ``yyyy-MM-dd HH:mm:ss``, falling back to ISO-8601.

    Raises ``ValueError`` when neither form matches.
    """
    text = raw.strip()
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        return to_naive_utc(datetime.fromisoformat(text))
