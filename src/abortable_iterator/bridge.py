"""Subscription that connects one wrapper's abort path to a signal."""

from __future__ import annotations

from typing import Any, Callable

from .abort import SignalLike


class SignalBridge:
    """Single listener registration on a cancellation signal.

    The bridge forwards at most one abort notification to ``on_abort`` and is
    detached exactly once; a signal firing after ``detach`` is ignored.
    """

    def __init__(self, signal: SignalLike, on_abort: Callable[[], None]) -> None:
        """Subscribe to ``signal`` immediately.

        Args:
            signal: The observed signal. It is never mutated.
            on_abort: Zero-argument callable invoked on the first notification.
        """
        self._signal = signal
        self._on_abort = on_abort
        self._fired = False
        self._attached = True
        signal.add_listener(self._handle)

    @property
    def aborted(self) -> bool:
        """Whether the underlying signal is in the fired state."""
        return bool(self._signal.aborted)

    @property
    def reason(self) -> Any:
        """The signal's abort reason, when the signal exposes one."""
        return getattr(self._signal, "reason", None)

    @property
    def attached(self) -> bool:
        """Whether the listener is still registered."""
        return self._attached

    def detach(self) -> None:
        """Remove the listener; later calls are no-ops."""
        if not self._attached:
            return
        self._attached = False
        self._signal.remove_listener(self._handle)

    def _handle(self) -> None:
        if self._fired or not self._attached:
            return
        self._fired = True
        self._on_abort()
