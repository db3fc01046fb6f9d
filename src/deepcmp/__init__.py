"""
deepcmp - Deterministic ordering and equality for arbitrary Python values

This package compares values of unknown, heterogeneous and nested types
without requiring them to define comparison operators. Every comparison
returns LESS, EQUAL, GREATER or INVALID, with a diagnostic reason when no
ordinary relation could be established.
"""

__version__ = "0.1.0"

# Tier 0: Configuration & Results
from deepcmp._config import config

from deepcmp._result import (
    Ordering,
    Reason,
    Comparison,
    ComparatorError,
    ContractViolation,
    IncomparableError,
)

# Tier 1: Scalars, Hooks & Shapes
from deepcmp._scalar import (
    timestamp_ns,
    compare_scalar,
)

from deepcmp._hooks import (
    Comparable,
    has_compare_to,
)

from deepcmp._shape import (
    Shape,
    Ref,
    classify,
    classify_pair,
    dereference,
    record_fields,
)

# Tier 2: Engine
from deepcmp._engine import (
    compare,
    equals,
)

# Tier 3: Comparators & Instrumentation
from deepcmp._profiler import (
    ComparisonProfiler,
    ProfilerReport,
    get_active_profiler,
    set_active_profiler,
)

from deepcmp._comparator import (
    Comparator,
    ComparatorType,
    comparator_for,
    reverse,
    descending,
    resolve_comparator,
)

__all__ = [
    # Version
    "__version__",
    # Tier 0: config
    "config",
    # Tier 0: results
    "Ordering",
    "Reason",
    "Comparison",
    "ComparatorError",
    "ContractViolation",
    "IncomparableError",
    # Tier 1: scalar
    "timestamp_ns",
    "compare_scalar",
    # Tier 1: hooks
    "Comparable",
    "has_compare_to",
    # Tier 1: shape
    "Shape",
    "Ref",
    "classify",
    "classify_pair",
    "dereference",
    "record_fields",
    # Tier 2: engine
    "compare",
    "equals",
    # Tier 3: profiler
    "ComparisonProfiler",
    "ProfilerReport",
    "get_active_profiler",
    "set_active_profiler",
    # Tier 3: comparator
    "Comparator",
    "ComparatorType",
    "comparator_for",
    "reverse",
    "descending",
    "resolve_comparator",
]
