"""
Exceptions for the feed-forward network engine.

All of these signal programmer errors (wrong shapes, unsupported calls),
not recoverable runtime conditions. They are raised before any weight is
touched, so a failed call leaves the layer or network unchanged.
"""

from typing import Any, Dict, Optional


class FFNNError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class DimensionMismatch(FFNNError, ValueError):
    """Raised when an input, output, target or back sequence has the wrong length."""

    def __init__(self, what: str, expected: int, actual: int):
        super().__init__(
            f"{what}: expected length {expected}, got {actual}",
            {"argument": what, "expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class UnsupportedOperation(FFNNError, NotImplementedError):
    """Raised when a transfer function is asked for an inverse it does not have."""
    pass


class EmptyTopology(FFNNError, ValueError):
    """Raised when a network has no layers or a layer has no units."""
    pass
