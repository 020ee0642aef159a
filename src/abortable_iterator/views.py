"""Restricted producer views and small helpers shared by both wrappers."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, Iterator, Optional, TypeVar

from .bridge import SignalBridge
from .exceptions import AbortError
from .options import AbortOptions

T = TypeVar("T")


class SyncSourceView(Generic[T]):
    """Iterable handed to ``on_abort``; it only gives access to the producer."""

    __slots__ = ("_iterator",)

    def __init__(self, iterator: Iterator[T]) -> None:
        """Keep a reference to the wrapped iterator."""
        self._iterator = iterator

    def __iter__(self) -> Iterator[T]:
        """Return the wrapped producer so the caller can drain it."""
        return self._iterator


class AsyncSourceView(Generic[T]):
    """Async iterable handed to ``on_abort``; it only gives access to the producer."""

    __slots__ = ("_iterator",)

    def __init__(self, iterator: AsyncIterator[T]) -> None:
        """Keep a reference to the wrapped async iterator."""
        self._iterator = iterator

    def __aiter__(self) -> AsyncIterator[T]:
        """Return the wrapped producer so the caller can drain it."""
        return self._iterator


def abort_error(options: AbortOptions, bridge: SignalBridge) -> AbortError:
    """Build the error raised to the consumer on a non-graceful abort."""
    return AbortError(options.abort_message, options.abort_code, reason=bridge.reason)


def running_loop() -> Optional[asyncio.AbstractEventLoop]:
    """Return the running event loop, or None outside of one."""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
