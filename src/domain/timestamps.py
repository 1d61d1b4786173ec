"""Parsing of repository timestamps into comparable instants."""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

# Accepted string form, the same on every supported Python:
# YYYY-MM-DD, optionally followed by T or space, HH:MM[:SS[.f{1,6}]] and Z or +-HH[:]MM
_TIMESTAMP_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,6}))?)?"
    r"([Zz]|[+-]\d{2}:?\d{2})?)?"
)


def _parse_offset(text: str) -> timezone:
    if text in ("Z", "z"):
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def _parse_string(text: str) -> Optional[datetime]:
    match = _TIMESTAMP_PATTERN.fullmatch(text)
    if match is None:
        return None

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            int((fraction or "0").ljust(6, "0")),
            tzinfo=_parse_offset(offset) if offset else None,
        )
    except ValueError:
        # out-of-range field or offset
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ``updated_at`` value into a timezone-aware UTC datetime.

    Accepts datetimes, dates and ISO-8601 strings (``Z`` suffix allowed).
    Naive values are taken as UTC. Instants that fall outside the datetime
    range once moved to UTC are treated as unparsable.

    Returns:
        The instant in UTC, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = _parse_string(value.strip())
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None
