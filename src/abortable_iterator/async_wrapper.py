"""Abortable async iteration over an asynchronous producer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, AsyncIterator, Generic, Optional, TypeVar

from .abort import SignalLike
from .bridge import SignalBridge
from .hooks import maybe_call, report_error
from .options import AbortOptions
from .state import END, WrappedIteration
from .telemetry import span
from .views import AsyncSourceView, abort_error, running_loop

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncIteratorWrapper(Generic[T]):
    """Async iterator that races each producer pull against the abort signal.

    Every ``__anext__`` runs the producer's ``__anext__`` in its own task. The
    task hands its value back one loop step later; an abort that starts first
    cancels the task and settles the pull with the abort outcome instead.
    Cleanup awaits the producer's ``aclose()`` when present.
    """

    def __init__(
        self,
        iterator: AsyncIterator[T],
        signal: SignalLike,
        options: AbortOptions,
    ) -> None:
        """Wrap ``iterator`` and subscribe to ``signal``.

        Args:
            iterator: The producer. Owned by the wrapper from now on.
            signal: Cancellation signal to observe.
            options: Abort behaviour configuration.
        """
        self._iterator = iterator
        self._options = options
        self._loop: Optional[asyncio.AbstractEventLoop] = running_loop()
        self._pull_task: Optional[asyncio.Task[None]] = None
        self._bridge = SignalBridge(signal, self._schedule_abort)
        self._iteration = WrappedIteration(self._bridge)

    def __aiter__(self) -> AsyncIteratorWrapper[T]:
        """Return the wrapper itself."""
        return self

    async def __anext__(self) -> T:
        """Return the next item, or raise the abort or producer outcome.

        Raises:
            StopAsyncIteration: When the producer is exhausted, the wrapper was
                closed, or the abort ended iteration gracefully.
            AbortError: When the signal fired and ``return_on_abort`` is unset.
        """
        iteration = self._iteration
        if iteration.done:
            await iteration.finish()

        self._loop = asyncio.get_running_loop()
        pending = iteration.open_pull(self._loop)
        try:
            if self._bridge.aborted:
                await self._abort()
            else:
                self._pull_task = self._loop.create_task(self._pull())
            return await iteration.wait(pending)
        except asyncio.CancelledError:
            if self._iteration.abort_cut_short(self._options.return_on_abort):
                await self._cleanup()
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """Stop iteration early, cancel any in-flight pull and close the producer.

        Calling this after iteration finished does nothing.
        """
        iteration = self._iteration
        if iteration.done:
            iteration.discard_terminal()
            return
        logger.debug("Closing async iteration early")
        iteration.finalize(interrupted=True)
        iteration.end()
        await self._cleanup()

    async def __aenter__(self) -> AsyncIteratorWrapper[T]:
        """Enter an ``async with`` block that closes the wrapper on exit."""
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        """Close the wrapper."""
        await self.aclose()

    async def _pull(self) -> None:
        iteration = self._iteration
        try:
            item = await self._iterator.__anext__()
        except StopAsyncIteration:
            if iteration.done:
                return
            iteration.finalize()
            iteration.resolve(END)
        except Exception as exc:
            if iteration.done:
                return
            iteration.finalize()
            await self._cleanup()
            iteration.fail(exc)
        else:
            if iteration.done:
                return
            iteration.resolve(item)

    def _schedule_abort(self) -> None:
        loop = self._loop
        if self._iteration.done or loop is None or loop.is_closed():
            return
        self._iteration.abort_task = loop.create_task(self._abort())

    async def _abort(self) -> None:
        iteration = self._iteration
        if iteration.done:
            return
        iteration.finalize(interrupted=True)
        logger.debug(
            "Aborting async iteration",
            extra={"graceful": self._options.return_on_abort},
        )

        with span(
            "abortable_iterator.abort",
            variant="async",
            graceful=self._options.return_on_abort,
            code=self._options.abort_code,
        ):
            # The producer must be idle before anyone else touches it.
            await self._cancel_pull()

            if self._options.on_abort is not None:
                try:
                    await maybe_call(
                        self._options.on_abort, AsyncSourceView(self._iterator)
                    )
                except Exception as exc:
                    await report_error(self._options, exc)

            if self._options.return_on_abort:
                iteration.end()
                return

            await self._cleanup()
            iteration.fail(abort_error(self._options, self._bridge), keep=True)

    async def _cancel_pull(self) -> None:
        task = self._pull_task
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _cleanup(self) -> None:
        if not self._iteration.claim_cleanup():
            return
        await self._cancel_pull()
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is None:
            return
        with span("abortable_iterator.cleanup", variant="async"):
            try:
                await aclose()
            except Exception as exc:
                await report_error(self._options, exc)
