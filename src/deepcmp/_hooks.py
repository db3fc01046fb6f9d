"""
hooks - Custom-comparable capability

A type opts out of structural comparison by implementing ``compare_to``.
The hook receives the other operand and returns a negative, zero or
positive integer. Example::

    @dataclass
    class Version:
        major: int
        label: str

        def compare_to(self, other: 'Version') -> int:
            return self.major - other.major   # label is ignored
"""

import numbers
from typing import Any, Protocol, runtime_checkable

from deepcmp._result import Comparison, ContractViolation, from_sign


@runtime_checkable
class Comparable(Protocol):
    """Protocol for values that supply their own three-way comparison."""

    def compare_to(self, other: Any) -> int:
        ...


def has_compare_to(value: Any) -> bool:
    """True if ``value`` exposes a callable ``compare_to``."""
    if isinstance(value, type):
        return False
    return isinstance(value, Comparable) and callable(value.compare_to)


def invoke_compare_to(a: Any, b: Any) -> Comparison:
    """Delegate the comparison of ``a`` and ``b`` to ``a.compare_to``.

    Raises:
        ContractViolation: If either operand lacks the capability or the
            hook returns something other than an integer
    """
    if not has_compare_to(a) or not has_compare_to(b):
        missing = b if has_compare_to(a) else a
        raise ContractViolation(
            f"{type(missing).__name__} does not implement compare_to"
        )
    result = a.compare_to(b)
    if isinstance(result, bool) or not isinstance(result, numbers.Integral):
        raise ContractViolation(
            f"{type(a).__name__}.compare_to returned {result!r}, expected int"
        )
    return from_sign(int(result))
