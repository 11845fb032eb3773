"""Multi-format date parser for frontmatter values.

Raw values arrive in whatever shape the document author wrote them:
absent, a number (``2024`` or ``20240909``), or a string in one of many
formats. Strings are tried against an ordered chain of strategies and the
first valid result wins:

  1. ISO 8601 extended profile  "2024-09-09", "2024-09-09T00:00+01:00",
                                "2024-09-09T00:00:00[Africa/Algiers]"
  2. RFC 2822 (email & RSS)     "Mon, 09 Sep 2024 00:00:00 +0100"
  3. Permissive fallback        anything ``dateutil.parser`` understands

Every result is timezone-aware. An explicit offset in the string is kept
(``set_zone=True``); strings without one are read as local wall-clock time.

Problems are reported as ``DateWarning`` and never raised.
"""

from __future__ import annotations

import re
import warnings
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dateutil_parser

_FORMATS_DOC_URL = "https://dateutil.readthedocs.io/en/stable/parser.html"

# Extended profile only: separators are required between components.
_ISO_RE = re.compile(
    r"^(?P<year>\d{4})"
    r"(?:-(?P<ordinal>\d{3})|-(?P<month>\d{2})(?:-(?P<day>\d{2}))?)?"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?"
    r"(?P<offset>Z|[+-]\d{2}(?::?\d{2})?)?)?"
    r"(?:\[(?P<zone>[^\]]+)\])?$",
    re.IGNORECASE,
)

_RFC2822_RE = re.compile(
    r"^(?:[A-Za-z]{3},\s*)?\d{1,2}\s+[A-Za-z]{3}\s+\d{2,4}\s+"
    r"\d{2}:\d{2}(?::\d{2})?\s+"
    r"(?:[+-]\d{4}|UT|GMT|[ECMP][SD]T|[A-IK-Za-ik-z])$"
)


class DateWarning(UserWarning):
    """A date value was present but could not be used."""


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _parse_offset(text: str) -> timezone:
    if text.upper() == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {text}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def from_iso(text: str) -> datetime | None:
    """Parse the ISO 8601 extended profile, with an optional [Zone/Name]."""
    m = _ISO_RE.match(text.strip())
    if not m:
        return None
    g = m.groupdict()
    try:
        year = int(g["year"])
        if g["ordinal"]:
            day_of_year = int(g["ordinal"])
            if day_of_year < 1:
                return None
            base = datetime(year, 1, 1) + timedelta(days=day_of_year - 1)
            if base.year != year:
                return None
            month, day = base.month, base.day
        else:
            month = int(g["month"] or 1)
            day = int(g["day"] or 1)
        fraction = (g["fraction"] or "").ljust(6, "0")[:6]
        dt = datetime(
            year,
            month,
            day,
            int(g["hour"] or 0),
            int(g["minute"] or 0),
            int(g["second"] or 0),
            int(fraction or 0),
        )
        zone = ZoneInfo(g["zone"]) if g["zone"] else None
        if g["offset"]:
            dt = dt.replace(tzinfo=_parse_offset(g["offset"]))
            if zone is not None:
                dt = dt.astimezone(zone)
        elif zone is not None:
            dt = dt.replace(tzinfo=zone)
    except (ValueError, ZoneInfoNotFoundError):
        return None
    return dt


def from_rfc2822(text: str) -> datetime | None:
    """Parse an RFC 2822 date as used in email and RSS headers."""
    text = text.strip()
    if not _RFC2822_RE.match(text):
        return None
    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    # "-0000" comes back naive but still means UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def from_fallback(text: str) -> datetime | None:
    """Permissive parse; missing fields default to 1 January of this year."""
    if not text.strip():
        return None
    default = datetime(datetime.now().year, 1, 1)
    try:
        with warnings.catch_warnings():
            # Unknown zone abbreviations are ignored; the value is read as local time.
            warnings.simplefilter("ignore", dateutil_parser.UnknownTimezoneWarning)
            return dateutil_parser.parse(text, default=default)
    except (ValueError, OverflowError):
        return None


_STRATEGIES: tuple[Callable[[str], datetime | None], ...] = (
    from_iso,
    from_rfc2822,
    from_fallback,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _is_valid(dt: datetime | None) -> bool:
    if dt is None:
        return False
    try:
        dt.utcoffset()
    except (ValueError, OverflowError):
        return False
    return True


def _normalize_zone(dt: datetime, set_zone: bool) -> datetime:
    # astimezone() on a naive datetime reads it as local time.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=None).astimezone()
    if not set_zone:
        return dt.astimezone()
    return dt


def _warn_invalid(fp: str, shown: str) -> None:
    warnings.warn(
        f'found invalid date "{shown}" in `{fp}`. Supported formats: {_FORMATS_DOC_URL}',
        DateWarning,
        stacklevel=3,
    )


def parse_date_string(fp: str, value: object, *, set_zone: bool = True) -> datetime | None:
    """Parse a raw date *value* found in the document at *fp*.

    Args:
        fp: File path, used in diagnostics only.
        value: Raw value from a date source (None, number, string, ...).
        set_zone: Keep an explicit offset from the string instead of
            converting the result to the local zone.

    Returns:
        A timezone-aware datetime, or None when *value* is absent or unusable.
    """
    if value is None:
        return None

    # Numbers such as YYYYMMDD or a bare YYYY; bool is an int subclass but not a date.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        try:
            value = str(value)
        except ValueError:
            # Integers past the interpreter's digit limit cannot become text.
            _warn_invalid(fp, "<integer too large>")
            return None

    if not isinstance(value, str):
        warnings.warn(
            f'unexpected type ({type(value).__name__}) for date "{value}" in `{fp}`.',
            DateWarning,
            stacklevel=2,
        )
        return None

    for strategy in _STRATEGIES:
        dt = strategy(value)
        if _is_valid(dt):
            return _normalize_zone(dt, set_zone)

    _warn_invalid(fp, value)
    return None


def from_millis(ms: float) -> datetime:
    """Return the local-zone datetime for an epoch timestamp in milliseconds."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).astimezone()


def local_now() -> datetime:
    return datetime.now().astimezone()
