"""
scalar - Ordering for primitive kinds

Numbers compare by magnitude, booleans as False < True, text by codepoint,
complex numbers by real part then imaginary part, and timestamps by the
absolute instant they denote. Every function here assumes both operands
share a dynamic type; the shape classifier enforces that before dispatch.
"""

import math
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Optional, Tuple

from deepcmp._config import config
from deepcmp._result import Comparison, from_sign


ScalarFunc = Callable[[Any, Any], int]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Kinds in lookup order: bool before int, datetime before date.
SCALAR_TYPES: Tuple[type, ...] = (
    bool, int, float, complex, str, Decimal, Fraction,
    datetime, date, time, timedelta, BaseException,
)


def _sign(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def compare_bool(a: bool, b: bool) -> int:
    """False sorts before True."""
    return int(a) - int(b)


def compare_int(a: int, b: int) -> int:
    return _sign(a, b)


def compare_number(a: Any, b: Any) -> int:
    """Compare real numbers by magnitude.

    NaN has no magnitude: two NaNs are equal, and NaN sorts before (or,
    with ``config.nan_order == 'last'``, after) every other number.
    """
    a_nan, b_nan = _is_nan(a), _is_nan(b)
    if a_nan or b_nan:
        if a_nan and b_nan:
            return 0
        first = -1 if config.nan_order == 'first' else 1
        return first if a_nan else -first
    return _sign(a, b)


compare_float = compare_number


def compare_complex(a: complex, b: complex) -> int:
    """Real part first, imaginary part as tiebreak."""
    r = compare_number(a.real, b.real)
    if r != 0:
        return r
    return compare_number(a.imag, b.imag)


def compare_str(a: str, b: str) -> int:
    if a == b:
        return 0
    return -1 if a < b else 1


def compare_bytes(a: Any, b: Any) -> int:
    """Byte-lexicographic ordering; a proper prefix sorts first."""
    x, y = bytes(a), bytes(b)
    return _sign(x, y)


def timestamp_ns(value: datetime) -> int:
    """Nanoseconds since the Unix epoch. Naive datetimes are read as UTC."""
    if value.utcoffset() is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000


def compare_timestamp(a: datetime, b: datetime) -> int:
    """Compare by absolute instant, not by wall-clock rendering."""
    return _sign(timestamp_ns(a), timestamp_ns(b))


def _time_of_day_us(value: time) -> int:
    us = ((value.hour * 60 + value.minute) * 60 + value.second) * 1_000_000 + value.microsecond
    offset = value.utcoffset()
    if offset is not None:
        us -= offset // timedelta(microseconds=1)
    return us


def compare_time(a: time, b: time) -> int:
    return _sign(_time_of_day_us(a), _time_of_day_us(b))


def compare_natural(a: Any, b: Any) -> int:
    """Natural ordering for date and timedelta values."""
    return _sign(a, b)


def compare_error(a: BaseException, b: BaseException) -> int:
    """Exceptions compare by message."""
    return compare_str(str(a), str(b))


def scalar_comparator_for(sample: Any) -> Optional[ScalarFunc]:
    """Return the per-kind comparison function for ``sample``.

    Returns:
        A function returning -1, 0 or 1, or None if ``sample`` is not a
        scalar kind.
    """
    if isinstance(sample, bool):
        return compare_bool
    if isinstance(sample, int):
        return compare_int
    if isinstance(sample, (float, Decimal, Fraction)):
        return compare_number
    if isinstance(sample, complex):
        return compare_complex
    if isinstance(sample, str):
        return compare_str
    if isinstance(sample, datetime):
        return compare_timestamp
    if isinstance(sample, time):
        return compare_time
    if isinstance(sample, (date, timedelta)):
        return compare_natural
    if isinstance(sample, BaseException):
        return compare_error
    return None


def is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def compare_scalar(a: Any, b: Any) -> Comparison:
    """Compare two scalars of the same dynamic type."""
    func = scalar_comparator_for(a)
    if func is None:
        raise TypeError(f"not a scalar kind: {type(a).__name__}")
    return from_sign(func(a, b))
