"""Domain exception hierarchy for the observable registry."""

from __future__ import annotations


class ObservableError(RuntimeError):
    """Base class for all registry-level errors."""


class InvalidListenerError(ObservableError, TypeError):
    """Raised when a non-callable value is registered as a listener."""


class ConfigValidationError(ObservableError):
    """Raised when configuration cannot be validated safely."""
