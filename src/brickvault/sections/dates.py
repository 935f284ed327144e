"""Date helpers for ranking sets by when they were received.

Rows written by older versions store ``date_received`` as a structured
timestamp (``{"seconds": ..., "nanoseconds": ...}`` or a datetime) rather
than a ``YYYY-MM-DD`` string. Everything is normalized to the string form,
which sorts correctly as plain text because it is zero-padded.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

_SECONDS_KEYS = ("seconds", "_seconds")


def _utc_date_string(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date().isoformat()


def date_sort_key(value: Any) -> str:
    """Normalize a date-received value to a comparable ISO date string.

    Missing or unparseable values map to ``""`` so one bad record never
    breaks a ranking.
    """
    if not value:
        return ""
    if isinstance(value, str):
        return value
    # datetime is a subclass of date, so it is checked first
    if isinstance(value, datetime):
        return _utc_date_string(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        for key in _SECONDS_KEYS:
            if key in value:
                try:
                    seconds = float(value[key])
                    return datetime.fromtimestamp(seconds, tz=timezone.utc).date().isoformat()
                except (TypeError, ValueError, OverflowError, OSError):
                    break
    elif hasattr(value, "to_datetime"):
        try:
            return _utc_date_string(value.to_datetime())
        except (TypeError, ValueError, AttributeError):
            pass

    logger.debug("Unparseable date_received value: %r", value)
    return ""


def format_received_date(value: Any) -> Optional[str]:
    """Format a received date for display, e.g. ``Jan 5, 2024``.

    Strings that don't look like ``YYYY-MM-DD`` are returned unchanged.
    """
    date_str = date_sort_key(value)
    if not date_str:
        return None
    parts = date_str.split("-")
    if len(parts) != 3 or not all(parts):
        return date_str
    try:
        parsed = date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError:
        return date_str
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
