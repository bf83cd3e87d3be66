"""Error taxonomy and message normalization.

Every error raised by the core carries a single human-readable message and
an optional list of non-fatal warnings collected while handling it (for
example a failed compensating delete after a rejected insert).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class EACLedgerError(Exception):
    """Base class for all core errors."""

    def __init__(self, message: str, *, warnings: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.warnings: list[str] = list(warnings or [])


class ValidationError(EACLedgerError):
    """Payload failed shape or value checks before any I/O."""

    pass


class AuthError(EACLedgerError):
    """No authenticated principal for a mutating call."""

    pass


class StorageError(EACLedgerError):
    """Object-store put/delete failure."""

    pass


class PersistenceError(EACLedgerError):
    """Relational insert/update/select/delete failure."""

    pass


class NotFoundError(PersistenceError):
    """Single-row fetch matched no row."""

    pass


def error_message(error: Any) -> str:
    """Normalize an error value to one message string.

    A nested ``message`` (attribute or mapping key) wins; otherwise the whole
    value is stringified.
    """
    if isinstance(error, Mapping):
        nested = error.get("message")
    else:
        nested = getattr(error, "message", None)

    if isinstance(nested, str) and nested:
        return nested
    if nested is not None and not isinstance(nested, str):
        return str(nested)

    text = str(error)
    return text if text else type(error).__name__


@dataclass
class Outcome(Generic[T]):
    """Primary result plus the non-fatal failures swallowed producing it."""

    value: T
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when nothing was swallowed."""
        return not self.warnings
