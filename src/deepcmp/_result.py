"""
result - Ordering outcomes and diagnostics

This module defines the values every comparison returns: an ``Ordering``
(LESS, EQUAL, GREATER or INVALID), an optional ``Reason`` explaining why a
relation could not be (fully) established, and the ``Comparison`` pair
that carries both. Data problems are always reported through these values;
the exceptions defined here are reserved for caller contract violations
and for consumers that need an integer where none exists.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Ordering(Enum):
    """Outcome of a three-way comparison."""
    LESS = -1
    EQUAL = 0
    GREATER = 1
    INVALID = "invalid"

    def __neg__(self) -> 'Ordering':
        if self is Ordering.LESS:
            return Ordering.GREATER
        if self is Ordering.GREATER:
            return Ordering.LESS
        return self


class Reason(Enum):
    """Diagnostic attached to comparisons that are not plain results."""
    NIL_VALUE = "comparator: the parameter has a nil value"
    TYPE_MISMATCH = "comparator: type mismatch"
    VALUE_MISMATCH = "comparator: value mismatch"
    INCOMPARABLE = "comparator: unable to establish a comparative relationship"

    @property
    def message(self) -> str:
        return self.value


class ComparatorError(Exception):
    """Base class for deepcmp errors."""


class ContractViolation(ComparatorError, TypeError):
    """A comparator was called with arguments it cannot accept.

    Raised when a value claims the custom-comparable capability but the
    other operand does not support it, when a ``compare_to`` hook returns
    something other than an integer, or when a typed comparator receives
    a value of the wrong type. This is a programming error and is never
    reported as an INVALID result.
    """


class IncomparableError(ComparatorError, ValueError):
    """An INVALID comparison was used where an ordering is required."""

    def __init__(self, comparison: 'Comparison') -> None:
        self.comparison = comparison
        reason = comparison.reason.message if comparison.reason else "invalid"
        super().__init__(reason)


@dataclass(frozen=True)
class Comparison:
    """An ordering together with its optional diagnostic reason.

    INVALID always carries a reason. LESS and GREATER may also carry one
    (nil asymmetry, mismatched record field counts): the direction is
    still usable for sorting.
    """
    ordering: Ordering
    reason: Optional[Reason] = None

    def __post_init__(self) -> None:
        if self.ordering is Ordering.INVALID and self.reason is None:
            object.__setattr__(self, 'reason', Reason.INCOMPARABLE)

    def __neg__(self) -> 'Comparison':
        return Comparison(-self.ordering, self.reason)

    def __int__(self) -> int:
        if self.ordering is Ordering.INVALID:
            raise IncomparableError(self)
        return self.ordering.value

    @property
    def is_valid(self) -> bool:
        return self.ordering is not Ordering.INVALID

    @property
    def is_less(self) -> bool:
        return self.ordering is Ordering.LESS

    @property
    def is_equal(self) -> bool:
        return self.ordering is Ordering.EQUAL

    @property
    def is_greater(self) -> bool:
        return self.ordering is Ordering.GREATER

    def __repr__(self) -> str:
        if self.reason is None:
            return f"Comparison({self.ordering.name})"
        return f"Comparison({self.ordering.name}, {self.reason.name})"


# Shared instances for the common outcomes
EQUAL = Comparison(Ordering.EQUAL)
LESS = Comparison(Ordering.LESS)
GREATER = Comparison(Ordering.GREATER)
NIL_LESS = Comparison(Ordering.LESS, Reason.NIL_VALUE)
NIL_GREATER = Comparison(Ordering.GREATER, Reason.NIL_VALUE)
TYPE_MISMATCH = Comparison(Ordering.INVALID, Reason.TYPE_MISMATCH)
VALUE_MISMATCH = Comparison(Ordering.INVALID, Reason.VALUE_MISMATCH)
INCOMPARABLE = Comparison(Ordering.INVALID, Reason.INCOMPARABLE)


def from_sign(value: int) -> Comparison:
    """Map a negative/zero/positive integer to a plain comparison."""
    if value < 0:
        return LESS
    if value > 0:
        return GREATER
    return EQUAL
