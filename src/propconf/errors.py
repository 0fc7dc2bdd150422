"""Outcome tags and exceptions for property binding."""

from enum import Enum
from typing import Any, Optional


class BindOutcome(Enum):
    """Result of one mutation entry point.

    Distinguishes a legitimately absent property from each failure kind so
    the caller can decide whether to continue or abort.
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    NOT_WRITABLE = "not_writable"
    ARITY_MISMATCH = "arity_mismatch"
    CONVERSION_FAILURE = "conversion_failure"
    ASSIGNABILITY_MISMATCH = "assignability_mismatch"
    INVOCATION_FAILURE = "invocation_failure"

    @property
    def ok(self) -> bool:
        return self is BindOutcome.SUCCESS


class PropertySetterError(Exception):
    """Raised by the strict scalar path when a property cannot be set."""

    def __init__(self, message: str, outcome: BindOutcome = BindOutcome.INVOCATION_FAILURE):
        super().__init__(message)
        self.outcome = outcome


class ConversionError(PropertySetterError):
    """A string could not be coerced into the requested type."""

    def __init__(self, value: Optional[str], target_type: Any, reason: Optional[str] = None):
        message = f"Conversion to type [{qualified_name(target_type)}] failed."
        if reason:
            message += f" {reason}"
        super().__init__(message, BindOutcome.CONVERSION_FAILURE)
        self.value = value
        self.target_type = target_type


def qualified_name(t: Any) -> str:
    """Display name of a type: ``module.qualname``, bare for builtins."""
    if isinstance(t, type):
        return f"{t.__module__}.{t.__qualname__}" if t.__module__ != "builtins" else t.__qualname__
    return repr(t)
