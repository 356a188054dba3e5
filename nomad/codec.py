"""
Typed value codec.

One coercion rule and one canonical text form per logical type, shared by the
record constructor, attribute setters, column defaults and every wire
formatter. Escaping and ordering are formatter concerns and never happen
here, which is what lets a value round-trip identically through any format.

Canonical text forms:

    integer             123
    float               0.123            (repr of the float)
    decimal             123.45           (fixed point, scale preserved)
    string / text       as is
    boolean             true | false
    date                03 Feb 2001
    datetime/timestamp  03 Feb 2001 12:34:56 +0000
    time                01 Jan 2000 12:34:56 +0000
    binary              bytes mapped one-to-one onto code points 0-255

Date and time values are normalized to the configured zone (see
nomad.config) and truncated to whole seconds when serialized.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple, Union

from nomad.config import get_settings
from nomad.domain.types import LogicalType
from nomad.errors import CodecError

TypedValue = Union[None, bool, int, float, Decimal, str, bytes, date, datetime, time]

# English abbreviations regardless of the process locale.
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_MONTH_NUMBERS = {name.lower(): number for number, name in enumerate(MONTH_ABBREVIATIONS, 1)}

# Times of day are written with this calendar date so they share the
# date-time format.
TIME_OF_DAY_ANCHOR = date(2000, 1, 1)

TRUE_STRINGS = frozenset({"true", "t", "1", "yes", "y", "on"})
FALSE_STRINGS = frozenset({"false", "f", "0", "no", "n", "off"})

_CALENDAR_RE = re.compile(
    r"""
    ^(?:[A-Za-z]{3},\s*)?                      # optional RFC 2822 weekday
    (?P<day>\d{1,2})\s+(?P<month>[A-Za-z]{3})\s+(?P<year>\d{4})
    (?:\s+(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})
       (?:\s*(?P<sign>[+-])(?P<off_hours>\d{2}):?(?P<off_minutes>\d{2})
         |\s*(?P<utc>UTC|GMT|Z))?
    )?$
    """,
    re.VERBOSE,
)


def _fail(logical_type: LogicalType, value: Any, reason: str = "") -> CodecError:
    message = f"Cannot convert {value!r} to {logical_type.value}"
    if reason:
        message = f"{message}: {reason}"
    return CodecError(message, logical_type=logical_type.value, value=value)


def _resolve_zone(tz: Optional[tzinfo]) -> tzinfo:
    return tz if tz is not None else get_settings().resolve_tzinfo()


def _aware(moment: datetime, tz: tzinfo) -> datetime:
    """Attach the configured zone to naive datetimes; aware ones pass through."""
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=tz)
    return moment


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _parse_calendar(
    text: str, logical_type: LogicalType
) -> Optional[Tuple[date, Optional[time], Optional[tzinfo]]]:
    """
    Parse ``DD Mon YYYY[ HH:MM:SS[ +HHMM]]``.

    Returns None when the text is not in calendar form at all, so callers can
    fall back to ISO 8601.
    """
    match = _CALENDAR_RE.match(text)
    if match is None:
        return None

    month = _MONTH_NUMBERS.get(match.group("month").lower())
    if month is None:
        raise _fail(logical_type, text, "unknown month")
    try:
        day = date(int(match.group("year")), month, int(match.group("day")))
        if match.group("hour") is None:
            return day, None, None
        clock = time(
            int(match.group("hour")), int(match.group("minute")), int(match.group("second"))
        )
    except ValueError as exc:
        raise _fail(logical_type, text, str(exc)) from exc

    offset: Optional[tzinfo] = None
    if match.group("utc"):
        offset = timezone.utc
    elif match.group("sign"):
        delta = timedelta(
            hours=int(match.group("off_hours")), minutes=int(match.group("off_minutes"))
        )
        if delta >= timedelta(hours=24):
            raise _fail(logical_type, text, "offset out of range")
        offset = timezone(-delta if match.group("sign") == "-" else delta)
    return day, clock, offset


def _parse_moment(text: str, logical_type: LogicalType, tz: tzinfo) -> datetime:
    """Parse calendar or ISO 8601 text into an aware datetime."""
    parsed = _parse_calendar(text, logical_type)
    if parsed is not None:
        day, clock, offset = parsed
        return datetime.combine(day, clock or time(0), tzinfo=offset or tz)
    try:
        return _aware(datetime.fromisoformat(text), tz)
    except ValueError as exc:
        raise _fail(logical_type, text, "unrecognized date/time format") from exc


# ---------------------------------------------------------------------------
# Coercion, one rule per logical type
# ---------------------------------------------------------------------------


def _coerce_integer(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.INTEGER
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        if (isinstance(value, Decimal) and value.is_nan()) or not math.isfinite(value):
            raise _fail(logical_type, value, "not a finite number")
        if value != int(value):
            raise _fail(logical_type, value, "not an integral number")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError as exc:
            raise _fail(logical_type, value) from exc
    raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")


def _coerce_float(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.FLOAT
    if isinstance(value, Decimal) and value.is_nan():
        raise _fail(logical_type, value, "not a number")
    if isinstance(value, (bool, int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError as exc:
            raise _fail(logical_type, value) from exc
    else:
        raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")
    if math.isnan(number):
        raise _fail(logical_type, value, "not a number")
    return number


def _coerce_decimal(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.DECIMAL
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, bool):
        number = Decimal(int(value))
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        # repr gives the shortest text that reads back to the same float.
        number = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise _fail(logical_type, value) from exc
    else:
        raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")
    if not number.is_finite():
        raise _fail(logical_type, value, "not a finite number")
    return number


def _coerce_text(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise _fail(LogicalType.SHORT_TEXT, value, "not valid UTF-8") from exc
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        raise _fail(LogicalType.SHORT_TEXT, value, f"unsupported type {type(value).__name__}")
    return str(value)


def _coerce_boolean(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.BOOLEAN
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return None
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise _fail(logical_type, value)


def _coerce_date(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.DATE
    tz = _resolve_zone(tz)
    if isinstance(value, datetime):
        if value.tzinfo is not None and value.utcoffset() is not None:
            return value.astimezone(tz).date()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = _parse_calendar(text, logical_type)
        if parsed is not None:
            day, clock, offset = parsed
            if clock is None or offset is None:
                return day
            return datetime.combine(day, clock, tzinfo=offset).astimezone(tz).date()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return _parse_moment(text, logical_type, tz).astimezone(tz).date()
    raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")


def _datetime_coercer(
    logical_type: LogicalType,
) -> Callable[[Any, Optional[tzinfo]], TypedValue]:
    def coerce_moment(value: Any, tz: Optional[tzinfo]) -> TypedValue:
        tz = _resolve_zone(tz)
        if isinstance(value, datetime):
            return _aware(value, tz)
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=tz)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            return _parse_moment(text, logical_type, tz)
        raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")

    return coerce_moment


def _coerce_time_of_day(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.TIME_OF_DAY
    tz = _resolve_zone(tz)
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            return value.time()
        return value.astimezone(tz).time()
    if isinstance(value, time):
        if value.tzinfo is None:
            return value
        anchored = datetime.combine(TIME_OF_DAY_ANCHOR, value)
        return anchored.astimezone(tz).time()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = _parse_calendar(text, logical_type)
        if parsed is None:
            try:
                return _coerce_time_of_day(time.fromisoformat(text), tz)
            except ValueError:
                pass
        return _parse_moment(text, logical_type, tz).astimezone(tz).time()
    raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")


def _coerce_binary(value: Any, tz: Optional[tzinfo]) -> TypedValue:
    logical_type = LogicalType.BINARY
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return value.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise _fail(logical_type, value, "code point above 255") from exc
    raise _fail(logical_type, value, f"unsupported type {type(value).__name__}")


_COERCERS: Dict[LogicalType, Callable[[Any, Optional[tzinfo]], TypedValue]] = {
    LogicalType.INTEGER: _coerce_integer,
    LogicalType.SHORT_TEXT: _coerce_text,
    LogicalType.LONG_TEXT: _coerce_text,
    LogicalType.FLOAT: _coerce_float,
    LogicalType.DECIMAL: _coerce_decimal,
    LogicalType.DATETIME: _datetime_coercer(LogicalType.DATETIME),
    LogicalType.TIMESTAMP: _datetime_coercer(LogicalType.TIMESTAMP),
    LogicalType.TIME_OF_DAY: _coerce_time_of_day,
    LogicalType.DATE: _coerce_date,
    LogicalType.BINARY: _coerce_binary,
    LogicalType.BOOLEAN: _coerce_boolean,
}


# ---------------------------------------------------------------------------
# Canonical text, one rule per logical type
# ---------------------------------------------------------------------------


def format_date(day: date) -> str:
    return f"{day.day:02d} {MONTH_ABBREVIATIONS[day.month - 1]} {day.year:04d}"


def format_moment(moment: datetime) -> str:
    """Format an aware datetime as ``DD Mon YYYY HH:MM:SS +HHMM``."""
    offset = moment.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return (
        f"{format_date(moment)} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} "
        f"{sign}{minutes // 60:02d}{minutes % 60:02d}"
    )


def _serialize_moment(value: datetime, tz: Optional[tzinfo]) -> str:
    tz = _resolve_zone(tz)
    return format_moment(value.astimezone(tz).replace(microsecond=0))


def _serialize_time_of_day(value: time, tz: Optional[tzinfo]) -> str:
    tz = _resolve_zone(tz)
    anchored = datetime.combine(TIME_OF_DAY_ANCHOR, value.replace(microsecond=0), tzinfo=tz)
    return format_moment(anchored)


_SERIALIZERS: Dict[LogicalType, Callable[[Any, Optional[tzinfo]], str]] = {
    LogicalType.INTEGER: lambda value, tz: str(value),
    LogicalType.SHORT_TEXT: lambda value, tz: value,
    LogicalType.LONG_TEXT: lambda value, tz: value,
    LogicalType.FLOAT: lambda value, tz: repr(value),
    LogicalType.DECIMAL: lambda value, tz: format(value, "f"),
    LogicalType.DATETIME: _serialize_moment,
    LogicalType.TIMESTAMP: _serialize_moment,
    LogicalType.TIME_OF_DAY: _serialize_time_of_day,
    LogicalType.DATE: lambda value, tz: format_date(value),
    LogicalType.BINARY: lambda value, tz: value.decode("latin-1"),
    LogicalType.BOOLEAN: lambda value, tz: "true" if value else "false",
}

_uncovered = (set(LogicalType) - set(_COERCERS)) | (set(LogicalType) - set(_SERIALIZERS))
if _uncovered:
    raise RuntimeError(f"codec has no rule for: {sorted(t.value for t in _uncovered)}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def coerce(
    value: Any, logical_type: Union[LogicalType, str], tz: Optional[tzinfo] = None
) -> TypedValue:
    """
    Convert a raw value to the Python type held by a column of ``logical_type``.

    Blank strings coerce to None for every non-text type. Raises CodecError
    when the value cannot be represented.
    """
    if value is None:
        return None
    kind = LogicalType.parse(logical_type)
    try:
        return _COERCERS[kind](value, tz)
    except OverflowError as exc:
        raise _fail(kind, value, "outside the representable date range") from exc


def serialize(
    value: Any, logical_type: Union[LogicalType, str], tz: Optional[tzinfo] = None
) -> Optional[str]:
    """
    Return the canonical text of ``value``, or None iff the value is None.
    """
    kind = LogicalType.parse(logical_type)
    # Only date and time rules read the configured zone.
    zone = _resolve_zone(tz) if kind.is_temporal else tz
    typed = coerce(value, kind, zone)
    if typed is None:
        return None
    try:
        return _SERIALIZERS[kind](typed, zone)
    except OverflowError as exc:
        raise _fail(kind, value, "outside the representable date range") from exc


def deserialize(
    text: Optional[str], logical_type: Union[LogicalType, str], tz: Optional[tzinfo] = None
) -> TypedValue:
    """
    Inverse of serialize: None iff ``text`` is None.

    Non-string input (a number in a JSON document, say) goes through the same
    coercion rule. Raises CodecError on text that does not parse.
    """
    if text is None:
        return None
    return coerce(text, logical_type, tz)


__all__ = [
    "TypedValue",
    "coerce",
    "serialize",
    "deserialize",
    "format_date",
    "format_moment",
    "MONTH_ABBREVIATIONS",
    "TIME_OF_DAY_ANCHOR",
]
