"""Per-wrapper iteration state and the pull hand-off between producer and consumer."""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Any, NoReturn, Optional

from .bridge import SignalBridge


class IterationState(enum.Enum):
    """Lifecycle of a wrapped iteration."""

    IDLE = "idle"
    PULLING = "pulling"
    DONE = "done"


class _Sentinel(enum.Enum):
    """Marker handed to a pull to signal the end of iteration."""

    END = enum.auto()


END = _Sentinel.END


@dataclass
class WrappedIteration:
    """Mutable state owned by exactly one wrapper.

    ``pending`` is the future of the outstanding pull. Values are handed to it
    through ``loop.call_soon`` so that a value and an abort arriving in the same
    step settle it once, in queue order. Abort and early close settle it
    directly and mark the iteration ``interrupted``, which drops any value
    still waiting in the queue.
    """

    bridge: SignalBridge
    state: IterationState = IterationState.IDLE
    pending: Optional[asyncio.Future[Any]] = None
    interrupted: bool = False
    cleaned_up: bool = False
    abort_task: Optional[asyncio.Task[None]] = None
    _terminal: Optional[BaseException] = None
    _discarded: bool = False

    @property
    def done(self) -> bool:
        """Whether the iteration has been finalized."""
        return self.state is IterationState.DONE

    def open_pull(self, loop: asyncio.AbstractEventLoop) -> asyncio.Future[Any]:
        """Create the future for a new outstanding pull."""
        pending = loop.create_future()
        self.pending = pending
        self.state = IterationState.PULLING
        return pending

    def finalize(self, *, interrupted: bool = False) -> None:
        """Mark the iteration done and detach the abort listener."""
        self.state = IterationState.DONE
        self.interrupted = interrupted
        self.bridge.detach()

    def abort_cut_short(self, graceful: bool) -> bool:
        """Whether a non-graceful abort was interrupted before its cleanup.

        True when the iteration was interrupted and no abort task is still
        running to finish the job; the caller should clean up in its place.
        """
        if not (self.done and self.interrupted) or graceful:
            return False
        task = self.abort_task
        return task is None or task.done()

    def claim_cleanup(self) -> bool:
        """Return True the first time only; guards the producer's cleanup."""
        if self.cleaned_up:
            return False
        self.cleaned_up = True
        return True

    def resolve(self, item: Any) -> None:
        """Hand ``item`` (or ``END``) to the outstanding pull on the next loop step."""
        pending = self.pending
        if pending is None or pending.done():
            return
        pending.get_loop().call_soon(self._deliver, pending, item)

    def _deliver(self, pending: asyncio.Future[Any], item: Any) -> None:
        if pending.done() or self.interrupted:
            return
        pending.set_result(item)

    def end(self) -> None:
        """Settle the outstanding pull as a normal end of iteration."""
        pending = self.pending
        if pending is not None and not pending.done():
            pending.set_result(END)

    def fail(self, exc: BaseException, *, keep: bool = False) -> None:
        """Reject the outstanding pull with ``exc``.

        Args:
            exc: The error delivered to the consumer.
            keep: When no pull is outstanding, keep ``exc`` for the next pull
                instead of dropping it.
        """
        pending = self.pending
        if pending is not None and not pending.done():
            pending.set_exception(exc)
        elif keep and not self._discarded:
            self._terminal = exc

    async def wait(self, pending: asyncio.Future[Any]) -> Any:
        """Await ``pending`` and translate ``END`` into ``StopAsyncIteration``."""
        try:
            item = await pending
        finally:
            if self.pending is pending:
                self.pending = None
                if self.state is IterationState.PULLING:
                    self.state = IterationState.IDLE
        if item is END:
            raise StopAsyncIteration
        return item

    async def finish(self) -> NoReturn:
        """Raise the kept terminal error once, then report a plain end.

        A pull arriving while the abort path is still running waits for it, so
        it observes the abort outcome rather than a plain end.
        """
        task = self.abort_task
        if task is not None and not task.done():
            if task is not asyncio.current_task():
                await asyncio.shield(task)
        exc = self._terminal
        if exc is not None:
            self._terminal = None
            raise exc
        raise StopAsyncIteration

    def discard_terminal(self) -> None:
        """Forget a kept terminal error; the consumer has stopped pulling."""
        self._terminal = None
        self._discarded = True
