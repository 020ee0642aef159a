"""Abortable async iteration over a synchronous producer."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Generic, Iterator, Optional, TypeVar

from .abort import SignalLike
from .bridge import SignalBridge
from .hooks import maybe_call, report_error
from .options import AbortOptions
from .state import END, WrappedIteration
from .telemetry import span
from .views import SyncSourceView, abort_error, running_loop

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncIteratorWrapper(Generic[T]):
    """Async iterator that pulls from a sync iterator until the signal fires.

    Each ``__anext__`` calls ``next()`` on the producer directly. The produced
    value is handed back one loop step later, so an abort scheduled in the same
    step wins over it. Cleanup calls the producer's ``close()`` when present.
    """

    def __init__(
        self,
        iterator: Iterator[T],
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
        self._bridge = SignalBridge(signal, self._schedule_abort)
        self._iteration = WrappedIteration(self._bridge)

    def __aiter__(self) -> SyncIteratorWrapper[T]:
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
                failure = self._pull()
                if failure is not None:
                    iteration.finalize()
                    await self._cleanup()
                    iteration.fail(failure)
            return await iteration.wait(pending)
        except asyncio.CancelledError:
            if self._iteration.abort_cut_short(self._options.return_on_abort):
                await self._cleanup()
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """Stop iteration early and close the producer.

        Calling this after iteration finished does nothing.
        """
        iteration = self._iteration
        if iteration.done:
            iteration.discard_terminal()
            return
        logger.debug("Closing sync iteration early")
        iteration.finalize(interrupted=True)
        iteration.end()
        await self._cleanup()

    async def __aenter__(self) -> SyncIteratorWrapper[T]:
        """Enter an ``async with`` block that closes the wrapper on exit."""
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        """Close the wrapper."""
        await self.aclose()

    def _pull(self) -> Optional[Exception]:
        iteration = self._iteration
        try:
            item = next(self._iterator)
        except StopIteration:
            iteration.finalize()
            iteration.resolve(END)
        except Exception as exc:
            return exc
        else:
            iteration.resolve(item)
        return None

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
            "Aborting sync iteration",
            extra={"graceful": self._options.return_on_abort},
        )

        with span(
            "abortable_iterator.abort",
            variant="sync",
            graceful=self._options.return_on_abort,
            code=self._options.abort_code,
        ):
            if self._options.on_abort is not None:
                try:
                    await maybe_call(
                        self._options.on_abort, SyncSourceView(self._iterator)
                    )
                except Exception as exc:
                    await report_error(self._options, exc)

            if self._options.return_on_abort:
                iteration.end()
                return

            await self._cleanup()
            iteration.fail(abort_error(self._options, self._bridge), keep=True)

    async def _cleanup(self) -> None:
        if not self._iteration.claim_cleanup():
            return
        close = getattr(self._iterator, "close", None)
        if close is None:
            return
        with span("abortable_iterator.cleanup", variant="sync"):
            try:
                close()
            except Exception as exc:
                await report_error(self._options, exc)
