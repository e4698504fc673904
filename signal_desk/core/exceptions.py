"""
Exception types raised by Signal Desk.
"""

from typing import Optional


class SignalDeskError(Exception):
    """Base class for all Signal Desk errors."""


class SchemaValidationError(SignalDeskError):
    """Raised when user-supplied data does not match its schema."""

    def __init__(self, message: str, errors: Optional[dict[str, list[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        details = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in self.errors.items()
        )
        return f"{super().__str__()} ({details})"


class HallucinationError(SignalDeskError):
    """Raised when a generated artifact uses tokens absent from the master resume."""

    def __init__(self, violations: list[str], candidate: str = ""):
        self.violations = list(violations)
        self.candidate = candidate
        super().__init__(
            f"Hallucination detected: {len(self.violations)} token(s) not found "
            f"in master inventory: {', '.join(self.violations)}"
        )


class OptimizationError(SignalDeskError):
    """Raised when the language model call fails."""


class CronError(SignalDeskError):
    """Raised for malformed cron expressions."""


class StorageError(SignalDeskError):
    """Raised when a stored value cannot be read or written."""
