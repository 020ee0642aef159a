"""AbortController and AbortSignal helpers for cancelling iteration."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Union, runtime_checkable

from .exceptions import AbortError

logger = logging.getLogger(__name__)

AbortReason = Union[str, BaseException]
AbortListener = Callable[[], None]


@runtime_checkable
class SignalLike(Protocol):
    """Minimal surface a cancellation signal must expose to be observed."""

    @property
    def aborted(self) -> bool:
        """Whether the signal has already fired."""
        ...

    def add_listener(self, callback: AbortListener) -> None:
        """Subscribe a zero-argument callback to the abort event."""
        ...

    def remove_listener(self, callback: AbortListener) -> None:
        """Unsubscribe a previously added callback."""
        ...


@dataclass
class AbortSignal:
    """Signal object used to abort a running operation."""

    _event: asyncio.Event
    _reason: Optional[AbortReason] = None
    _listeners: List[AbortListener] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        """Whether the signal has fired."""
        return self._event.is_set()

    @property
    def reason(self) -> Optional[AbortReason]:
        """Reason passed to ``AbortController.abort``, if any."""
        return self._reason

    async def wait(self) -> None:
        """Wait until the signal fires."""
        await self._event.wait()

    def add_listener(self, callback: AbortListener) -> None:
        """Register ``callback`` to run when the signal fires.

        Args:
            callback: Zero-argument callable. It is not invoked retroactively
                when the signal has already fired; check ``aborted`` first.
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: AbortListener) -> None:
        """Remove ``callback``; unknown callbacks are ignored."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(callback)

    def throw_if_aborted(self) -> None:
        """Raise ``AbortError`` if the signal has fired.

        Raises:
            AbortError: When ``aborted`` is true.
        """
        if not self.aborted:
            return
        message = self._reason if isinstance(self._reason, str) else None
        raise AbortError(message, reason=self._reason)


class AbortController:
    """Controller used to trigger cancellation for an AbortSignal."""

    def __init__(self) -> None:
        """Create a controller with a fresh, unfired signal."""
        self._event = asyncio.Event()
        self.signal = AbortSignal(self._event)

    def abort(self, reason: Optional[AbortReason] = None) -> None:
        """Fire the signal and notify its listeners.

        Only the first call has an effect; the first reason wins. A listener
        that raises is logged and does not stop the remaining listeners.

        Args:
            reason: Optional reason exposed as ``signal.reason``.
        """
        if self._event.is_set():
            return
        self.signal._reason = reason
        self._event.set()
        for callback in list(self.signal._listeners):
            try:
                callback()
            except Exception as exc:
                logger.error(
                    "Abort listener failed",
                    exc_info=True,
                    extra={"listener": repr(callback), "error": str(exc)},
                )
