"""Custom exceptions surfaced by abortable iterators."""

from __future__ import annotations

from typing import Optional

DEFAULT_ABORT_MESSAGE = "The operation was aborted"
DEFAULT_ABORT_CODE = "ABORT_ERR"


class AbortableError(Exception):
    """Base exception for abortable iterator errors."""


class AbortError(AbortableError):
    """Raised to a pending consumer when the abort signal fires."""

    type = "aborted"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        *,
        reason: Optional[object] = None,
    ) -> None:
        """Initialize an abort error, falling back to default message and code."""
        self.message = message or DEFAULT_ABORT_MESSAGE
        self.code = code or DEFAULT_ABORT_CODE
        self.reason = reason
        super().__init__(self.message)


class UnsupportedSourceError(AbortableError, TypeError):
    """Raised when a source is neither iterable nor async iterable."""

    def __init__(self, source: object) -> None:
        """Initialize the error for the rejected ``source``."""
        super().__init__(
            f"Expected an iterable or async iterable, got {type(source).__name__}"
        )
        self.source = source
