"""
comparator - Reusable comparator objects, factory and combinators

This module wraps comparison functions in ``Comparator`` objects that can
be named, reversed, profiled and turned into sort keys. ``comparator_for``
picks a typed comparator from a sample value; ``reverse`` flips any
comparator from ascending to descending order.
"""

import functools
import time
from enum import Enum
from typing import Any, Callable, Optional, Union

from deepcmp._engine import compare as _compare_values
from deepcmp._hooks import has_compare_to, invoke_compare_to
from deepcmp._profiler import get_active_profiler
from deepcmp._result import Comparison, ContractViolation, from_sign
from deepcmp._scalar import ScalarFunc, scalar_comparator_for


CompareFunc = Callable[[Any, Any], Union[Comparison, int]]


class ComparatorType(Enum):
    """Comparator implementation type."""
    SCALAR = "scalar"
    STRUCTURAL = "structural"
    CUSTOM = "custom"
    REVERSED = "reversed"
    KEY_FUNC = "key_func"
    PYTHON = "python"


def _as_comparison(value: Union[Comparison, int]) -> Comparison:
    if isinstance(value, Comparison):
        return value
    return from_sign(value)


def _typed_scalar(func: ScalarFunc, expected: type) -> Callable[[Any, Any], Comparison]:
    """Bind a scalar function to one exact type, rejecting anything else."""

    def compare_typed(a: Any, b: Any) -> Comparison:
        if type(a) is not expected or type(b) is not expected:
            bad = a if type(a) is not expected else b
            raise ContractViolation(
                f"{expected.__name__} comparator received {type(bad).__name__}"
            )
        return from_sign(func(a, b))

    return compare_typed


class Comparator:
    """Named, reusable comparison function.

    Every comparator returns a ``Comparison``. Plain callables returning a
    negative/zero/positive integer are accepted wherever a comparator is
    expected and are normalized on the way out.

    Examples:
        # Generic structural ordering
        cmp = Comparator.structural()
        cmp([1, 2], [1, 3])             # Comparison(LESS)

        # Typed comparator from a sample
        by_int = comparator_for(0)

        # Descending order
        desc = reverse(by_int)
        sorted(values, key=desc.sort_key())
    """

    __slots__ = ('_type', '_compare_func', '_key_func', '_name')

    def __init__(
        self,
        cmp_type: ComparatorType,
        compare_func: CompareFunc,
        key_func: Optional[Callable[[Any], Any]] = None,
        name: Optional[str] = None,
    ):
        """Initialize comparator (internal use - use factory functions)."""
        self._type = cmp_type
        self._compare_func = compare_func
        self._key_func = key_func
        self._name = name

    @staticmethod
    def structural() -> 'Comparator':
        """Create a comparator running the full structural engine.

        Returns:
            Comparator equivalent to ``deepcmp.compare``
        """
        return Comparator(ComparatorType.STRUCTURAL, _compare_values, name='structural')

    @staticmethod
    def from_callable(func: CompareFunc, name: Optional[str] = None) -> 'Comparator':
        """Create a comparator from a Python callable.

        The callable must accept two arguments and return a ``Comparison``
        or an integer that is negative, zero or positive.

        Args:
            func: Comparison function
            name: Optional name used in profiler reports

        Returns:
            Comparator wrapping the callable

        Raises:
            TypeError: If func is not callable
        """
        if not callable(func):
            raise TypeError("func must be callable")
        return Comparator(
            ComparatorType.PYTHON, func,
            name=name or getattr(func, '__name__', None),
        )

    @staticmethod
    def from_key(key_func: Callable[[Any], Any]) -> 'Comparator':
        """Create a comparator that compares extracted keys structurally.

        Args:
            key_func: Function to extract comparison key

        Returns:
            Comparator using key function

        Raises:
            TypeError: If key_func is not callable
        """
        if not callable(key_func):
            raise TypeError("key_func must be callable")
        return Comparator(
            ComparatorType.KEY_FUNC, _compare_values, key_func,
            name=getattr(key_func, '__name__', None),
        )

    def _invoke(self, a: Any, b: Any) -> Comparison:
        return _as_comparison(self._compare_func(self.extract_key(a), self.extract_key(b)))

    def compare(self, a: Any, b: Any) -> Comparison:
        """Compare two values.

        Records the call in the active profiler, if one is installed.

        Args:
            a: First value
            b: Second value

        Returns:
            Comparison of a against b
        """
        profiler = get_active_profiler()
        if profiler is None:
            return self._invoke(a, b)
        start = time.perf_counter_ns()
        result = self._invoke(a, b)
        profiler.record_comparison(
            time.perf_counter_ns() - start,
            comparator_name=self._name,
            a=a,
            b=b,
            result=result,
        )
        return result

    __call__ = compare

    def extract_key(self, value: Any) -> Any:
        """Extract comparison key from a value.

        For key function comparators, this extracts the sort key.
        For other comparators, returns the value unchanged.
        """
        if self._key_func is not None:
            return self._key_func(value)
        return value

    def sort_key(self) -> Callable[[Any], Any]:
        """Key function for ``sorted``/``list.sort`` using this comparator.

        Raises:
            IncomparableError: During sorting, if two elements compare INVALID
        """
        return functools.cmp_to_key(lambda a, b: int(self.compare(a, b)))

    @property
    def type(self) -> str:
        """Get comparator type as string."""
        return self._type.value

    @property
    def name(self) -> Optional[str]:
        return self._name

    def __repr__(self) -> str:
        if self._name:
            return f"Comparator(type='{self.type}', name='{self._name}')"
        return f"Comparator(type='{self.type}')"


def comparator_for(sample: Any) -> Comparator:
    """Resolve a comparator from a sample value.

    Scalar samples give a comparator bound to the sample's exact type,
    which raises ``ContractViolation`` when handed anything else. Samples
    implementing ``compare_to`` give a comparator that delegates to the
    hook. Any other sample gives the structural comparator.

    Args:
        sample: Value whose dynamic type selects the comparator

    Returns:
        Comparator for values like ``sample``
    """
    if sample is None:
        return _STRUCTURAL_COMPARATOR
    if has_compare_to(sample):
        return Comparator(
            ComparatorType.CUSTOM, invoke_compare_to,
            name=type(sample).__name__,
        )
    func = scalar_comparator_for(sample)
    if func is not None:
        expected = type(sample)
        return Comparator(
            ComparatorType.SCALAR, _typed_scalar(func, expected),
            name=expected.__name__,
        )
    return _STRUCTURAL_COMPARATOR


def reverse(comparator: Union[Comparator, CompareFunc]) -> Comparator:
    """Create a comparator that inverts another.

    Args:
        comparator: Comparator instance or comparison callable

    Returns:
        Comparator returning the negation of the wrapped result

    Raises:
        TypeError: If comparator is neither a Comparator nor callable
    """
    if not isinstance(comparator, Comparator):
        comparator = Comparator.from_callable(comparator)
    inner = comparator

    def compare_reversed(a: Any, b: Any) -> Comparison:
        return -inner._invoke(a, b)

    name = f"reversed({inner.name})" if inner.name else 'reversed'
    return Comparator(ComparatorType.REVERSED, compare_reversed, name=name)


def resolve_comparator(
    cmp: Optional[Union[Comparator, CompareFunc]] = None,
    key: Optional[Callable[[Any], Any]] = None,
) -> Comparator:
    """Resolve comparator from cmp/key parameters.

    Args:
        cmp: Comparator instance or comparison callable
        key: Key extraction function

    Returns:
        Resolved Comparator (structural when neither is given)

    Raises:
        TypeError: If both cmp and key are provided
        TypeError: If cmp is not Comparator or callable
        TypeError: If key is not callable
    """
    if cmp is not None and key is not None:
        raise TypeError("Cannot specify both 'cmp' and 'key'")

    if cmp is not None:
        if isinstance(cmp, Comparator):
            return cmp
        if callable(cmp):
            return Comparator.from_callable(cmp)
        raise TypeError("cmp must be a Comparator or callable")

    if key is not None:
        if not callable(key):
            raise TypeError("key must be callable")
        return Comparator.from_key(key)

    return _STRUCTURAL_COMPARATOR


# Singleton comparators for common cases
_STRUCTURAL_COMPARATOR = Comparator.structural()
_REVERSE_STRUCTURAL_COMPARATOR = reverse(_STRUCTURAL_COMPARATOR)


def descending() -> Comparator:
    """Shared comparator for descending structural order."""
    return _REVERSE_STRUCTURAL_COMPARATOR
