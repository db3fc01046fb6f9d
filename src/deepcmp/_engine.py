"""
engine - Recursive structural comparison

``compare`` is the single entry point: it settles nil and type-mismatch
cases up front, gives a custom ``compare_to`` hook precedence, and then
dispatches on shape. Aggregate strategies recurse back into ``compare``
for their elements, so nesting depth equals recursion depth. Inputs are
assumed to be acyclic.

Sequences and mappings both settle size first: a sequence of different
length, or a mapping with a different key count, is ordered before any
element is read. Sequences can be switched to element-first order with
``config.sequence_order``. Shared mapping keys are visited in an order that
depends only on the key set, so swapping the operands negates the result.
"""

import functools
import logging
from typing import Any, Callable, Dict, Iterable, List, Tuple

from deepcmp._config import config
from deepcmp._hooks import has_compare_to, invoke_compare_to
from deepcmp._result import (
    EQUAL,
    INCOMPARABLE,
    IncomparableError,
    TYPE_MISMATCH,
    VALUE_MISMATCH,
    Comparison,
    Ordering,
    Reason,
    from_sign,
)
from deepcmp._scalar import compare_bytes, compare_scalar
from deepcmp._shape import (
    Shape,
    classify_pair,
    dereference,
    is_timestamp_record,
    record_fields,
)


logger = logging.getLogger(__name__)


def _diagnosed(result: Comparison, a: Any, b: Any) -> Comparison:
    if config.trace_invalid:
        logger.debug(
            "%s (%s vs %s)",
            result.reason.message,
            type(a).__name__,
            type(b).__name__,
        )
    return result


def _compare_reference(a: Any, b: Any) -> Comparison:
    if a is b:
        return EQUAL
    # A nil target at any depth compares as nil
    return compare(dereference(a), dereference(b))


def _compare_record(a: Any, b: Any) -> Comparison:
    if is_timestamp_record(a) and is_timestamp_record(b):
        x, y = a.timestamp_ns(), b.timestamp_ns()
        return from_sign((x > y) - (x < y))

    fields_a, fields_b = record_fields(a), record_fields(b)
    if len(fields_a) != len(fields_b):
        ordering = Ordering.LESS if len(fields_a) < len(fields_b) else Ordering.GREATER
        return _diagnosed(Comparison(ordering, Reason.VALUE_MISMATCH), a, b)

    for (name_a, value_a), (name_b, value_b) in zip(fields_a, fields_b):
        if name_a != name_b:
            return _diagnosed(VALUE_MISMATCH, a, b)
        r = compare(value_a, value_b)
        if r.ordering is not Ordering.EQUAL:
            return r
    return EQUAL


def _walk(a: Iterable[Any], b: Iterable[Any], len_a: int, len_b: int,
          element: Callable[[Any, Any], Comparison]) -> Comparison:
    for x, y in zip(a, b):
        r = element(x, y)
        if r.ordering is not Ordering.EQUAL:
            return r
    return from_sign(len_a - len_b)


def _compare_sequence(a: Any, b: Any) -> Comparison:
    if a is b:
        return EQUAL
    len_a, len_b = len(a), len(b)
    if config.length_first and len_a != len_b:
        return from_sign(len_a - len_b)
    return _walk(a, b, len_a, len_b, compare)


def _compare_bytes(a: Any, b: Any) -> Comparison:
    if a is b:
        return EQUAL
    if config.bytes_fast_path:
        return from_sign(compare_bytes(a, b))
    x, y = bytes(a), bytes(b)
    return _walk(x, y, len(x), len(y), compare_scalar)


def _key_sign(x: Any, y: Any) -> int:
    return int(compare(x, y))


_KEY_ORDER = functools.cmp_to_key(_key_sign)


def _ordered_keys(mapping: Any) -> List[Any]:
    """Keys in a total order that depends only on the key set.

    Keys are grouped by type, groups ordered by qualified type name. Each
    group is sorted by the engine, or by ``repr`` when the engine cannot
    order every pair in it.
    """
    groups: Dict[Tuple[str, str], List[Any]] = {}
    for key in mapping:
        cls = type(key)
        groups.setdefault((cls.__module__, cls.__qualname__), []).append(key)

    ordered: List[Any] = []
    for name in sorted(groups):
        keys = groups[name]
        try:
            keys = sorted(keys, key=_KEY_ORDER)
        except IncomparableError:
            keys = sorted(keys, key=repr)
        ordered.extend(keys)
    return ordered


def _compare_mapping(a: Any, b: Any) -> Comparison:
    if a is b:
        return EQUAL
    if len(a) != len(b):
        return from_sign(len(a) - len(b))
    for key in a:
        if key not in b:
            return _diagnosed(VALUE_MISMATCH, a, b)
    for key in _ordered_keys(a):
        r = compare(a[key], b[key])
        if r.ordering is not Ordering.EQUAL:
            return r
    return EQUAL


def _compare_opaque(a: Any, b: Any) -> Comparison:
    if a is b or a == b:
        return EQUAL
    return _diagnosed(INCOMPARABLE, a, b)


_STRATEGIES: Dict[Shape, Callable[[Any, Any], Comparison]] = {
    Shape.SCALAR: compare_scalar,
    Shape.REFERENCE: _compare_reference,
    Shape.RECORD: _compare_record,
    Shape.FIXED_SEQUENCE: _compare_sequence,
    Shape.DYNAMIC_SEQUENCE: _compare_sequence,
    Shape.BYTES: _compare_bytes,
    Shape.ASSOCIATIVE: _compare_mapping,
    Shape.OPAQUE: _compare_opaque,
}


def compare(a: Any, b: Any) -> Comparison:
    """Compare two arbitrary values.

    Args:
        a: First value
        b: Second value

    Returns:
        Comparison whose ordering is LESS, EQUAL, GREATER or INVALID.
        INVALID always carries a reason; a nil operand gives a directional
        result tagged ``Reason.NIL_VALUE`` (nil sorts first).

    Raises:
        ContractViolation: If a ``compare_to`` hook is misused
    """
    shape = classify_pair(a, b)
    if isinstance(shape, Comparison):
        if shape is TYPE_MISMATCH:
            return _diagnosed(shape, a, b)
        return shape

    hook_a, hook_b = has_compare_to(a), has_compare_to(b)
    if hook_a or hook_b:
        if hook_a and hook_b:
            return invoke_compare_to(a, b)
        return _diagnosed(TYPE_MISMATCH, a, b)

    return _STRATEGIES[shape](a, b)


def equals(a: Any, b: Any) -> bool:
    """True iff ``compare(a, b)`` is EQUAL."""
    return compare(a, b).ordering is Ordering.EQUAL
