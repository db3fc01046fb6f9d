"""Tests for comparator module (Tier 3)."""

from dataclasses import dataclass
from datetime import datetime

import pytest

from deepcmp import (
    Comparator,
    ComparatorType,
    Comparison,
    ContractViolation,
    IncomparableError,
    Ordering,
    comparator_for,
    descending,
    resolve_comparator,
    reverse,
)


@dataclass
class Version:
    major: int
    label: str

    def compare_to(self, other):
        return self.major - other.major


class Str(str):
    pass


class TestComparatorStructural:
    """Tests for the structural comparator."""

    def test_structural_creation(self):
        """structural() creates a valid comparator."""
        cmp = Comparator.structural()
        assert cmp.type == 'structural'

    def test_structural_comparison(self):
        """Structural comparator runs the full engine."""
        cmp = Comparator.structural()
        assert cmp.compare([1, 2], [1, 3]).ordering is Ordering.LESS
        assert cmp({'a': 1}, {'a': 1}).ordering is Ordering.EQUAL
        assert cmp(1, 'a').ordering is Ordering.INVALID


class TestComparatorFor:
    """Tests for comparator_for."""

    @pytest.mark.parametrize('sample, a, b, expected', [
        (0, 1, 2, Ordering.LESS),
        (0.0, 2.5, 1.5, Ordering.GREATER),
        ('', 'same', 'same', Ordering.EQUAL),
        (False, False, True, Ordering.LESS),
        (0j, 1 + 1j, 1 + 0j, Ordering.GREATER),
        (datetime(2000, 1, 1), datetime(1999, 1, 1), datetime(2001, 1, 1), Ordering.LESS),
    ])
    def test_scalar_samples(self, sample, a, b, expected):
        """Scalar samples give typed comparators."""
        cmp = comparator_for(sample)
        assert cmp.type == 'scalar'
        assert cmp(a, b).ordering is expected

    def test_scalar_name(self):
        """Typed comparators are named after their type."""
        assert comparator_for(0).name == 'int'
        assert 'int' in repr(comparator_for(0))

    def test_typed_rejects_other_types(self):
        """A typed comparator fails fast on the wrong type."""
        cmp = comparator_for(0)
        with pytest.raises(ContractViolation):
            cmp(1, '2')
        with pytest.raises(ContractViolation):
            cmp(True, False)

    def test_exact_type_binding(self):
        """A subclass sample binds to the subclass."""
        cmp = comparator_for(Str('x'))
        assert cmp(Str('a'), Str('b')).ordering is Ordering.LESS
        with pytest.raises(ContractViolation):
            cmp('a', 'b')

    def test_custom_sample(self):
        """Samples with compare_to give custom comparators."""
        cmp = comparator_for(Version(1, 'a'))
        assert cmp.type == 'custom'
        assert cmp(Version(1, 'x'), Version(1, 'y')).ordering is Ordering.EQUAL
        with pytest.raises(ContractViolation):
            cmp(Version(1, 'x'), 1)

    def test_structural_samples(self):
        """Non-scalar samples give the structural comparator."""
        assert comparator_for([1]).type == 'structural'
        assert comparator_for({'a': 1}).type == 'structural'
        assert comparator_for(None).type == 'structural'


class TestReverse:
    """Tests for the reverse combinator."""

    def test_reverse_comparator(self):
        """reverse() inverts a comparator."""
        cmp = reverse(comparator_for(0))
        assert cmp.type == 'reversed'
        assert cmp(1, 2).ordering is Ordering.GREATER
        assert cmp(2, 1).ordering is Ordering.LESS
        assert cmp(1, 1).ordering is Ordering.EQUAL

    def test_reverse_callable(self):
        """reverse() accepts plain callables."""
        cmp = reverse(lambda a, b: len(a) - len(b))
        assert cmp('ab', 'abc').ordering is Ordering.GREATER

    def test_reverse_keeps_invalid(self):
        """INVALID stays INVALID when reversed."""
        cmp = reverse(Comparator.structural())
        assert cmp(1, 'x').ordering is Ordering.INVALID

    def test_double_reverse(self):
        """Reversing twice restores the order."""
        cmp = reverse(reverse(comparator_for('')))
        assert cmp('a', 'b').ordering is Ordering.LESS

    def test_reverse_name(self):
        """Reversed comparators are named after the wrapped one."""
        assert reverse(comparator_for(0)).name == 'reversed(int)'

    def test_reverse_rejects_non_callable(self):
        """reverse() rejects non-callables."""
        with pytest.raises(TypeError):
            reverse(42)

    def test_descending(self):
        """descending() sorts largest first."""
        values = [[1], [3], [2]]
        assert sorted(values, key=descending().sort_key()) == [[3], [2], [1]]


class TestComparatorFromCallable:
    """Tests for Python callable comparators."""

    def test_from_callable_creation(self):
        """from_callable() creates a valid comparator."""
        cmp = Comparator.from_callable(lambda a, b: a - b)
        assert cmp.type == 'python'

    def test_from_callable_normalizes(self):
        """Integer results are normalized to comparisons."""
        def by_length(a, b):
            return len(a) - len(b)

        cmp = Comparator.from_callable(by_length)
        assert cmp('abcd', 'ab') == Comparison(Ordering.GREATER)
        assert cmp.name == 'by_length'

    def test_from_callable_not_callable(self):
        """from_callable() rejects non-callable."""
        with pytest.raises(TypeError):
            Comparator.from_callable(42)


class TestComparatorFromKey:
    """Tests for key function comparators."""

    def test_from_key_creation(self):
        """from_key() creates a valid comparator."""
        cmp = Comparator.from_key(len)
        assert cmp.type == 'key_func'

    def test_from_key_extracts_key(self):
        """Key comparator extracts keys correctly."""
        cmp = Comparator.from_key(str.lower)
        assert cmp.extract_key('HELLO') == 'hello'

    def test_from_key_comparison(self):
        """Key comparator compares extracted keys."""
        cmp = Comparator.from_key(abs)
        assert cmp(-5, 3).ordering is Ordering.GREATER

    def test_from_key_not_callable(self):
        """from_key() rejects non-callable."""
        with pytest.raises(TypeError):
            Comparator.from_key("not callable")

    def test_extract_key_identity(self):
        """Non-key comparators return values unchanged."""
        assert Comparator.structural().extract_key(5) == 5


class TestSortKey:
    """Tests for sort_key."""

    def test_sorts(self):
        """sort_key orders values."""
        cmp = comparator_for(0)
        assert sorted([3, 1, 2], key=cmp.sort_key()) == [1, 2, 3]

    def test_nil_sorts_first(self):
        """None sorts before everything in structural order."""
        cmp = Comparator.structural()
        assert sorted([[2], None, [1]], key=cmp.sort_key()) == [None, [1], [2]]

    def test_invalid_raises(self):
        """Unorderable elements abort the sort."""
        cmp = Comparator.structural()
        with pytest.raises(IncomparableError):
            sorted([1, 'a'], key=cmp.sort_key())


class TestResolveComparator:
    """Tests for resolve_comparator helper."""

    def test_resolve_none(self):
        """resolve_comparator with no args returns structural."""
        assert resolve_comparator().type == 'structural'

    def test_resolve_comparator_instance(self):
        """resolve_comparator passes through Comparator instances."""
        original = comparator_for(0)
        assert resolve_comparator(cmp=original) is original

    def test_resolve_callable(self):
        """resolve_comparator wraps callable."""
        assert resolve_comparator(cmp=lambda a, b: 0).type == 'python'

    def test_resolve_key(self):
        """resolve_comparator creates key comparator."""
        assert resolve_comparator(key=len).type == 'key_func'

    def test_resolve_both_error(self):
        """resolve_comparator rejects both cmp and key."""
        with pytest.raises(TypeError):
            resolve_comparator(cmp=lambda a, b: 0, key=len)

    def test_resolve_invalid_cmp(self):
        """resolve_comparator rejects invalid cmp."""
        with pytest.raises(TypeError):
            resolve_comparator(cmp=42)

    def test_resolve_invalid_key(self):
        """resolve_comparator rejects invalid key."""
        with pytest.raises(TypeError):
            resolve_comparator(key="not callable")


class TestComparatorType:
    """Tests for ComparatorType enum."""

    def test_values(self):
        """ComparatorType has expected values."""
        assert ComparatorType.SCALAR.value == 'scalar'
        assert ComparatorType.STRUCTURAL.value == 'structural'
        assert ComparatorType.CUSTOM.value == 'custom'
        assert ComparatorType.REVERSED.value == 'reversed'


class TestComparatorRepr:
    """Tests for comparator string representation."""

    def test_structural_repr(self):
        """Structural comparator has useful repr."""
        r = repr(Comparator.structural())
        assert 'Comparator' in r
        assert 'structural' in r
