"""Text-to-scalar parsers used by the decode session.

Every parser raises ``ValueError`` on malformed input; the session turns
that into ``InvalidParameterValue`` with the option name attached.
"""

from __future__ import annotations

import re
from fractions import Fraction

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1

_TRUE_WORDS = ("on", "yes", "y")
_FALSE_WORDS = ("off", "no", "n")

BOOL_CHOICES = "|".join(_TRUE_WORDS + _FALSE_WORDS)
INT64_EXPECTED = "an int64 value"
INT64_RANGE_EXPECTED = "an int64 value or range"
UINT64_EXPECTED = "a uint64 value"
UINT64_RANGE_EXPECTED = "a uint64 value or range"
SIZE_EXPECTED = "a size value representable as a non-negative 64-bit integer"

# C-style integer literal: hex, octal (leading 0) or decimal.
_WS = r"[ \t\n\r\f\v]*"
_DIGITS = r"(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"
_SIGNED_RE = re.compile(_WS + r"([+-]?)" + _DIGITS)
_UNSIGNED_RE = re.compile(_WS + _DIGITS)

# Fractions are accepted with or without a unit suffix ("10.9" is 10 bytes).
_SIZE_RE = re.compile(_WS + r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)([BKMGTPE]?)", re.IGNORECASE)
_SIZE_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1 << 10,
    "m": 1 << 20,
    "g": 1 << 30,
    "t": 1 << 40,
    "p": 1 << 50,
    "e": 1 << 60,
}


# ---------------------------------------------------------------------------
# Booleans
# ---------------------------------------------------------------------------

def parse_bool(text: str | None) -> bool:
    """A bare flag (``None``) means True; otherwise on|yes|y / off|no|n."""
    if text is None:
        return True
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {text!r}")


# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------

def _literal_to_int(digits: str) -> int:
    if digits[:2] in ("0x", "0X"):
        return int(digits[2:], 16)
    if len(digits) > 1 and digits[0] == "0":
        return int(digits[1:], 8)
    return int(digits)


def parse_int_prefix(text: str) -> tuple[int, str]:
    """Parse the longest leading int64 literal of *text*.

    Returns ``(value, rest)``. Raises ``ValueError`` when *text* does not
    start with an integer or the integer does not fit in 64 signed bits.
    """
    m = _SIGNED_RE.match(text)
    if m is None:
        raise ValueError(f"not an integer: {text!r}")
    value = _literal_to_int(m.group(2))
    if m.group(1) == "-":
        value = -value
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer out of int64 range: {text!r}")
    return value, text[m.end():]


def parse_uint_prefix(text: str) -> tuple[int, str]:
    """Like :func:`parse_int_prefix` but unsigned; no sign is accepted."""
    m = _UNSIGNED_RE.match(text)
    if m is None:
        raise ValueError(f"not an unsigned integer: {text!r}")
    value = _literal_to_int(m.group(1))
    if value > UINT64_MAX:
        raise ValueError(f"integer out of uint64 range: {text!r}")
    return value, text[m.end():]


def parse_int_full(text: str) -> int:
    value, rest = parse_int_prefix(text)
    if rest:
        raise ValueError(f"trailing characters after integer: {text!r}")
    return value


def parse_uint_full(text: str) -> int:
    value, rest = parse_uint_prefix(text)
    if rest:
        raise ValueError(f"trailing characters after integer: {text!r}")
    return value


# ---------------------------------------------------------------------------
# Byte sizes
# ---------------------------------------------------------------------------

def parse_size(text: str) -> int:
    """Parse a byte size such as ``512``, ``4k``, ``1.5G``.

    Bytes are assumed when no suffix is given. Fractions are truncated
    after scaling, using exact rational arithmetic.
    """
    m = _SIZE_RE.fullmatch(text)
    if m is None:
        raise ValueError(f"not a size: {text!r}")
    value = int(Fraction(m.group(1)) * _SIZE_UNITS[m.group(2).lower()])
    if value > UINT64_MAX:
        raise ValueError(f"size out of range: {text!r}")
    return value
