"""Typed conversion of raw option text.

Each value kind has one textual form:

- int: optional sign and decimal digits, signed 64-bit range
- float: decimal notation with optional exponent
- bool: exactly "0" or "1"
- bitmask: non-negative decimal or 0x-prefixed hex, unsigned 64-bit range
- str: verbatim
- duration: ISO 8601 duration, P[nY][nM][nD][T[nH][nM][n[.f]S]]

Conversion is pure and locale-independent.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import ROUND_HALF_EVEN, Decimal

from whenever import TimeDelta

from gcomm_conf.errors import ConversionError
from gcomm_conf.types import ParameterValue, ValueKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

# Calendar units have no fixed length; these are the fixed lengths used here.
NANOS_PER_SECOND = 1_000_000_000
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_MONTH = 30 * SECONDS_PER_DAY
SECONDS_PER_YEAR = 12 * SECONDS_PER_MONTH

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_DURATION_RE = re.compile(
    r"P(?:(?P<years>\d+)Y)?(?:(?P<months>\d+)M)?(?:(?P<days>\d+)D)?"
    r"(?P<time>T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?",
    re.ASCII,
)

_DURATION_UNITS = (
    ("years", SECONDS_PER_YEAR),
    ("months", SECONDS_PER_MONTH),
    ("days", SECONDS_PER_DAY),
    ("hours", SECONDS_PER_HOUR),
    ("minutes", SECONDS_PER_MINUTE),
    ("seconds", 1),
)


def parse_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ConversionError(raw, ValueKind.INT, "not a decimal integer")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ConversionError(raw, ValueKind.INT, "integer overflow")
    return value


def parse_float(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise ConversionError(raw, ValueKind.FLOAT, "not a decimal number")
    value = float(raw)
    if value in (float("inf"), float("-inf")):
        raise ConversionError(raw, ValueKind.FLOAT, "floating-point overflow")
    return value


def parse_bool(raw: str) -> bool:
    if raw == "1":
        return True
    if raw == "0":
        return False
    raise ConversionError(raw, ValueKind.BOOL, "expected '0' or '1'")


def parse_bitmask(raw: str) -> int:
    if _HEX_RE.fullmatch(raw):
        value = int(raw, 16)
    elif raw.isascii() and raw.isdigit():
        value = int(raw)
    else:
        raise ConversionError(raw, ValueKind.BITMASK, "not a non-negative decimal or hex mask")
    if value > UINT64_MAX:
        raise ConversionError(raw, ValueKind.BITMASK, "integer overflow")
    return value


def parse_duration(raw: str) -> TimeDelta:
    """Parse an ISO 8601 duration such as ``PT1M30S`` or ``P1DT6H``.

    Fractions are only allowed on the seconds component and are kept exact
    down to the nanosecond.
    """
    match = _DURATION_RE.fullmatch(raw)
    if match is None:
        raise ConversionError(raw, ValueKind.DURATION, "malformed ISO 8601 duration")
    parts = match.groupdict()
    if parts["time"] == "T":
        raise ConversionError(raw, ValueKind.DURATION, "time designator without components")
    if all(parts[name] is None for name, _ in _DURATION_UNITS):
        raise ConversionError(raw, ValueKind.DURATION, "duration has no components")

    total = Decimal(0)
    for name, unit_seconds in _DURATION_UNITS:
        if parts[name] is not None:
            total += Decimal(parts[name]) * unit_seconds
    nanos = int((total * NANOS_PER_SECOND).to_integral_value(rounding=ROUND_HALF_EVEN))
    try:
        return TimeDelta(nanoseconds=nanos)
    except (ValueError, OverflowError):
        raise ConversionError(raw, ValueKind.DURATION, "duration out of range") from None


def parse_str(raw: str) -> str:
    return raw


_PARSERS: dict[ValueKind, Callable[[str], ParameterValue]] = {
    ValueKind.INT: parse_int,
    ValueKind.FLOAT: parse_float,
    ValueKind.BOOL: parse_bool,
    ValueKind.DURATION: parse_duration,
    ValueKind.BITMASK: parse_bitmask,
    ValueKind.STR: parse_str,
}


def convert(raw: str, kind: ValueKind) -> ParameterValue:
    """Convert raw option text into a value of ``kind``; raises ConversionError."""
    return _PARSERS[kind](raw)


def format_duration(value: TimeDelta) -> str:
    """Render a duration using only hours, minutes and (fractional) seconds."""
    nanos = value.in_nanoseconds()
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    seconds, frac = divmod(nanos, NANOS_PER_SECOND)
    hours, seconds = divmod(seconds, SECONDS_PER_HOUR)
    minutes, seconds = divmod(seconds, SECONDS_PER_MINUTE)
    out = f"{sign}PT"
    if hours:
        out += f"{hours}H"
    if minutes:
        out += f"{minutes}M"
    if seconds or frac or not (hours or minutes):
        out += str(seconds)
        if frac:
            out += "." + f"{frac:09d}".rstrip("0")
        out += "S"
    return out


def format_value(value: ParameterValue, kind: ValueKind) -> str:
    """Render a typed value in the textual form ``convert`` accepts."""
    match kind:
        case ValueKind.BOOL:
            return "1" if value else "0"
        case ValueKind.DURATION:
            return format_duration(value)  # type: ignore[arg-type]
        case ValueKind.BITMASK:
            return hex(int(value))
        case ValueKind.FLOAT:
            return repr(float(value))
        case _:
            return str(value)
