"""Tests for result module (Tier 0)."""

import pytest

from deepcmp import (
    Comparison,
    ComparatorError,
    ContractViolation,
    IncomparableError,
    Ordering,
    Reason,
)
from deepcmp._result import from_sign


class TestOrdering:
    """Tests for the Ordering enum."""

    def test_values(self):
        """Valid orderings carry their sign."""
        assert Ordering.LESS.value == -1
        assert Ordering.EQUAL.value == 0
        assert Ordering.GREATER.value == 1

    def test_negation(self):
        """Negation swaps LESS and GREATER only."""
        assert -Ordering.LESS is Ordering.GREATER
        assert -Ordering.GREATER is Ordering.LESS
        assert -Ordering.EQUAL is Ordering.EQUAL
        assert -Ordering.INVALID is Ordering.INVALID


class TestReason:
    """Tests for the Reason enum."""

    def test_messages(self):
        """Reasons carry readable messages."""
        assert Reason.NIL_VALUE.message == "comparator: the parameter has a nil value"
        assert Reason.TYPE_MISMATCH.message == "comparator: type mismatch"
        assert Reason.VALUE_MISMATCH.message == "comparator: value mismatch"
        assert 'comparative relationship' in Reason.INCOMPARABLE.message


class TestComparison:
    """Tests for the Comparison value."""

    def test_invalid_always_has_reason(self):
        """INVALID without an explicit reason defaults to INCOMPARABLE."""
        c = Comparison(Ordering.INVALID)
        assert c.reason is Reason.INCOMPARABLE

    def test_negation_keeps_reason(self):
        """Negation flips direction and keeps the reason."""
        c = Comparison(Ordering.LESS, Reason.NIL_VALUE)
        assert -c == Comparison(Ordering.GREATER, Reason.NIL_VALUE)
        assert -(-c) == c

    def test_int(self):
        """int() gives the sign of valid comparisons."""
        assert int(Comparison(Ordering.LESS)) == -1
        assert int(Comparison(Ordering.EQUAL)) == 0
        assert int(Comparison(Ordering.GREATER, Reason.NIL_VALUE)) == 1

    def test_int_invalid_raises(self):
        """int() of INVALID raises IncomparableError."""
        c = Comparison(Ordering.INVALID, Reason.TYPE_MISMATCH)
        with pytest.raises(IncomparableError) as exc_info:
            int(c)
        assert exc_info.value.comparison is c
        assert 'type mismatch' in str(exc_info.value)

    def test_predicates(self):
        """Predicates reflect the ordering."""
        assert Comparison(Ordering.LESS).is_less
        assert Comparison(Ordering.EQUAL).is_equal
        assert Comparison(Ordering.GREATER).is_greater
        assert not Comparison(Ordering.INVALID).is_valid

    def test_frozen(self):
        """Comparison is immutable."""
        c = Comparison(Ordering.EQUAL)
        with pytest.raises(AttributeError):
            c.ordering = Ordering.LESS

    def test_repr(self):
        """repr names ordering and reason."""
        assert repr(Comparison(Ordering.EQUAL)) == 'Comparison(EQUAL)'
        assert repr(Comparison(Ordering.LESS, Reason.NIL_VALUE)) == 'Comparison(LESS, NIL_VALUE)'

    def test_from_sign(self):
        """from_sign maps integers to plain comparisons."""
        assert from_sign(-7).ordering is Ordering.LESS
        assert from_sign(0).ordering is Ordering.EQUAL
        assert from_sign(3).ordering is Ordering.GREATER
        assert from_sign(3).reason is None


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_contract_violation_is_type_error(self):
        """ContractViolation is a TypeError."""
        assert issubclass(ContractViolation, TypeError)
        assert issubclass(ContractViolation, ComparatorError)

    def test_incomparable_is_value_error(self):
        """IncomparableError is a ValueError."""
        assert issubclass(IncomparableError, ValueError)
        assert issubclass(IncomparableError, ComparatorError)
