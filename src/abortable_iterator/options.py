"""Configuration options for abortable iterators."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional

ErrorReporter = Callable[[BaseException], Any]
AbortHook = Callable[[Any], Any]


@dataclass(frozen=True)
class AbortOptions:
    """Options for configuring an abortable wrap.

    Attributes:
        report_cleanup_error: Receives errors raised while closing the wrapped
            producer (or by ``on_abort``). May be sync or async. Errors are
            discarded when unset.
        on_abort: Called once when the signal fires, with a view that only
            exposes iteration over the wrapped producer. May be sync or async;
            the abort outcome waits for it to finish.
        abort_message: Message of the raised ``AbortError``.
        abort_code: Code of the raised ``AbortError``.
        return_on_abort: End iteration normally on abort instead of raising.
    """

    # Receives cleanup failures instead of the consumer
    report_cleanup_error: Optional[ErrorReporter] = None

    # Notified with a restricted view of the producer on abort
    on_abort: Optional[AbortHook] = None

    # Message and code carried by AbortError
    abort_message: Optional[str] = None
    abort_code: Optional[str] = None

    # Treat abort as a normal end of iteration
    return_on_abort: bool = False

    def without_abort_hook(self) -> AbortOptions:
        """Return a copy of these options with ``on_abort`` cleared."""
        return dataclasses.replace(self, on_abort=None)


DEFAULT_OPTIONS = AbortOptions()
