"""
shape - Runtime classification of values

Every pair of values is routed to exactly one comparison strategy by its
shape. Classification uses ``isinstance`` checks rather than exact type
tests, so a subclass of ``int`` or ``str`` is compared like the primitive
it extends and a subclass of ``dict`` like any other mapping.
"""

import array
import collections
import dataclasses
import enum
import types
import weakref
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, List, Tuple, Union

from deepcmp._result import (
    EQUAL,
    NIL_GREATER,
    NIL_LESS,
    TYPE_MISMATCH,
    Comparison,
)
from deepcmp._scalar import is_scalar


class Shape(Enum):
    """Structural category selecting a comparison strategy."""
    SCALAR = "scalar"
    REFERENCE = "reference"
    RECORD = "record"
    FIXED_SEQUENCE = "fixed_sequence"
    DYNAMIC_SEQUENCE = "dynamic_sequence"
    BYTES = "bytes"
    ASSOCIATIVE = "associative"
    OPAQUE = "opaque"


class Ref:
    """Explicit reference to another value.

    ``Ref`` plays the part of a pointer: comparing two references compares
    whatever they ultimately point at, through any number of levels.
    ``Ref()`` (or ``Ref(None)``) is a nil reference.
    """

    __slots__ = ('_target',)

    def __init__(self, target: Any = None):
        self._target = target

    @property
    def target(self) -> Any:
        return self._target

    def __repr__(self) -> str:
        return f"Ref({self._target!r})"


_REFERENCE_TYPES = (Ref, weakref.ref)
_BYTES_TYPES = (bytes, bytearray, memoryview)
_OPAQUE_TYPES = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    set,
    frozenset,
    enum.Enum,
)
_DYNAMIC_SEQUENCE_TYPES = (list, collections.deque, array.array)


def is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), '_fields')


def is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _has_slots(cls: type) -> bool:
    return any('__slots__' in vars(klass) for klass in cls.__mro__[:-1])


def classify(value: Any) -> Shape:
    """Determine the shape of a single non-None value."""
    if is_scalar(value):
        return Shape.SCALAR
    if isinstance(value, _REFERENCE_TYPES):
        return Shape.REFERENCE
    if isinstance(value, _BYTES_TYPES):
        return Shape.BYTES
    if isinstance(value, _OPAQUE_TYPES):
        return Shape.OPAQUE
    if is_dataclass_instance(value) or is_namedtuple(value):
        return Shape.RECORD
    if isinstance(value, (tuple, range)):
        return Shape.FIXED_SEQUENCE
    if isinstance(value, Mapping):
        return Shape.ASSOCIATIVE
    if isinstance(value, _DYNAMIC_SEQUENCE_TYPES) or isinstance(value, Sequence):
        return Shape.DYNAMIC_SEQUENCE
    cls = type(value)
    if cls.__module__ != 'builtins' and (hasattr(value, '__dict__') or _has_slots(cls)):
        return Shape.RECORD
    return Shape.OPAQUE


def classify_pair(a: Any, b: Any) -> Union[Shape, Comparison]:
    """Decide whether two values are comparable, and how.

    Returns:
        A ``Comparison`` when the outcome is settled without looking
        inside the values (nil operands, mismatched dynamic types),
        otherwise the shape both values share.
    """
    if a is None or b is None:
        if a is b:
            return EQUAL
        return NIL_LESS if a is None else NIL_GREATER
    if type(a) is not type(b):
        return TYPE_MISMATCH
    return classify(a)


def dereference(value: Any) -> Any:
    """Follow references until a non-reference value (or None) is reached."""
    while isinstance(value, _REFERENCE_TYPES):
        if isinstance(value, Ref):
            value = value.target
        else:
            value = value()
    return value


def _slot_names(cls: type) -> List[str]:
    names = []
    for klass in reversed(cls.__mro__[:-1]):
        slots = vars(klass).get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ('__dict__', '__weakref__'):
                continue
            if name.startswith('__') and not name.endswith('__'):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            names.append(name)
    return names


def record_fields(value: Any) -> List[Tuple[str, Any]]:
    """List a record's fields as (name, value) pairs.

    Dataclass, namedtuple and slot fields come in declaration order.
    Instance ``__dict__`` attributes follow, sorted by name. Dataclass
    fields declared with ``compare=False`` are left out, as they are for
    the dataclass's own ``__eq__``. Unassigned slots are skipped.
    """
    if is_dataclass_instance(value):
        return [
            (f.name, getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.compare
        ]
    if is_namedtuple(value):
        return list(zip(type(value)._fields, value))

    result = []
    for name in _slot_names(type(value)):
        try:
            result.append((name, getattr(value, name)))
        except AttributeError:
            continue
    instance_dict = getattr(value, '__dict__', None)
    if instance_dict is not None:
        result.extend(sorted(instance_dict.items(), key=lambda item: item[0]))
    return result


def is_timestamp_record(value: Any) -> bool:
    """True for records that denote an absolute instant."""
    return hasattr(value, 'timestamp_ns') and callable(value.timestamp_ns)
