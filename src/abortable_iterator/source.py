"""Make any iterable or async iterable abortable."""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from typing import Any, AsyncIterator, Optional

from .abort import SignalLike
from .async_wrapper import AsyncIteratorWrapper
from .exceptions import UnsupportedSourceError
from .options import DEFAULT_OPTIONS, AbortOptions
from .sync_wrapper import SyncIteratorWrapper


def abortable_source(
    source: Any,
    signal: SignalLike,
    options: Optional[AbortOptions] = None,
) -> AsyncIterator[Any]:
    """Wrap ``source`` so iteration stops when ``signal`` fires.

    Sync iterables are checked first; the returned object is always an async
    iterator, with ``aclose()`` for early exit.

    Args:
        source: An iterable or async iterable. The wrapper takes ownership of
            the iterator obtained from it.
        signal: Cancellation signal to observe.
        options: Abort behaviour; defaults apply when omitted.

    Returns:
        An async iterator yielding the source's items until the signal fires.

    Raises:
        UnsupportedSourceError: If ``source`` is neither iterable nor async
            iterable.
    """
    opts = options if options is not None else DEFAULT_OPTIONS
    if isinstance(source, Iterable):
        return SyncIteratorWrapper(iter(source), signal, opts)
    if isinstance(source, AsyncIterable):
        return AsyncIteratorWrapper(source.__aiter__(), signal, opts)
    raise UnsupportedSourceError(source)
