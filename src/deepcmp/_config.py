"""
config - Runtime configuration for the comparison engine

This module provides the process-wide configuration read by the engine on
every call. Defaults come from ``DEEPCMP_*`` environment variables and can
be changed at runtime through the ``config`` object.
"""

import os
import threading
from enum import Enum
from typing import Any, Dict, Optional


class SequenceOrder(Enum):
    """Tiebreak policy for sequences of different lengths."""
    LEXICOGRAPHIC = "lexicographic"
    LENGTH_FIRST = "length_first"


class NaNOrder(Enum):
    """Placement of NaN relative to every other number."""
    FIRST = "first"
    LAST = "last"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with prefix."""
    full_name = f"DEEPCMP_{name}"
    return os.environ.get(full_name, default)


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    value = _get_env(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Global configuration for deepcmp.

    Thread Safety:
        All reads are thread-safe. Writes use a lock and affect
        only comparisons started after the write.
    """

    __slots__ = (
        '_lock',
        '_sequence_order',
        '_nan_order',
        '_bytes_fast_path',
        '_trace_invalid',
        '_initialized',
    )

    def __init__(self) -> None:
        """Initialize configuration (called once at module import)."""
        self._lock = threading.Lock()
        self._initialized = False
        self._init()

    def _init(self) -> None:
        """Perform initialization."""
        if self._initialized:
            return

        sequence_order_str = _get_env('SEQUENCE_ORDER', 'length_first')
        try:
            self._sequence_order = SequenceOrder(sequence_order_str.lower())
        except ValueError:
            self._sequence_order = SequenceOrder.LENGTH_FIRST

        nan_order_str = _get_env('NAN_ORDER', 'first')
        try:
            self._nan_order = NaNOrder(nan_order_str.lower())
        except ValueError:
            self._nan_order = NaNOrder.FIRST

        self._bytes_fast_path = _get_env_bool('BYTES_FAST_PATH', True)
        self._trace_invalid = _get_env_bool('TRACE_INVALID', False)

        self._initialized = True

    @property
    def sequence_order(self) -> str:
        """Sequence tiebreak policy ('lexicographic' or 'length_first')."""
        return self._sequence_order.value

    @sequence_order.setter
    def sequence_order(self, value: str) -> None:
        """Set sequence tiebreak policy.

        Args:
            value: 'lexicographic' or 'length_first'

        Raises:
            ValueError: If value is invalid
        """
        try:
            order = SequenceOrder(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(
                f"Invalid sequence order: {value}. "
                "Must be 'lexicographic' or 'length_first'"
            )
        with self._lock:
            self._sequence_order = order

    @property
    def length_first(self) -> bool:
        """True if sequence length is checked before elements."""
        return self._sequence_order is SequenceOrder.LENGTH_FIRST

    @property
    def nan_order(self) -> str:
        """Where NaN sorts among numbers ('first' or 'last')."""
        return self._nan_order.value

    @nan_order.setter
    def nan_order(self, value: str) -> None:
        """Set NaN placement.

        Args:
            value: 'first' or 'last'

        Raises:
            ValueError: If value is invalid
        """
        try:
            order = NaNOrder(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(
                f"Invalid NaN order: {value}. Must be 'first' or 'last'"
            )
        with self._lock:
            self._nan_order = order

    @property
    def bytes_fast_path(self) -> bool:
        """Whether byte sequences use native byte ordering."""
        return self._bytes_fast_path

    @bytes_fast_path.setter
    def bytes_fast_path(self, value: bool) -> None:
        """Enable or disable the byte-sequence fast path."""
        with self._lock:
            self._bytes_fast_path = bool(value)

    @property
    def trace_invalid(self) -> bool:
        """Whether INVALID outcomes are logged at DEBUG level."""
        return self._trace_invalid

    @trace_invalid.setter
    def trace_invalid(self, value: bool) -> None:
        """Enable or disable INVALID tracing."""
        with self._lock:
            self._trace_invalid = bool(value)

    def snapshot(self) -> Dict[str, Any]:
        """Current settings as a dictionary."""
        return {
            'sequence_order': self.sequence_order,
            'nan_order': self.nan_order,
            'bytes_fast_path': self.bytes_fast_path,
            'trace_invalid': self.trace_invalid,
        }

    def reset(self) -> None:
        """Reload settings from the environment."""
        with self._lock:
            self._initialized = False
            self._init()

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config("
            f"sequence_order='{self.sequence_order}', "
            f"nan_order='{self.nan_order}', "
            f"bytes_fast_path={self.bytes_fast_path})"
        )


# Global configuration instance (initialized at module import)
config = Config()
