"""Abortable sinks and duplexes built on ``abortable_source``."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .abort import SignalLike
from .options import DEFAULT_OPTIONS, AbortOptions
from .source import abortable_source

R = TypeVar("R")
T = TypeVar("T")

Sink = Callable[[Any], R]


@dataclass
class Duplex(Generic[T, R]):
    """A pipe with an inbound ``sink`` and an outbound ``source``."""

    sink: Sink[R]
    source: Any


def abortable_sink(
    sink: Sink[R],
    signal: SignalLike,
    options: Optional[AbortOptions] = None,
) -> Sink[R]:
    """Wrap ``sink`` so the source it consumes stops when ``signal`` fires.

    The sink never sees the signal; it only sees an abortable source.

    Args:
        sink: Callable that drains a source and returns a result.
        signal: Cancellation signal to observe.
        options: Abort behaviour applied to every source passed in.

    Returns:
        A callable with the same signature as ``sink``.
    """

    @functools.wraps(sink)
    def wrapped(source: Any) -> R:
        return sink(abortable_source(source, signal, options))

    return wrapped


abortable_transform = abortable_sink


def abortable_duplex(
    duplex: Any,
    signal: SignalLike,
    options: Optional[AbortOptions] = None,
) -> Duplex[Any, Any]:
    """Wrap both sides of ``duplex`` with the same signal and options.

    The inbound side is wrapped without ``on_abort`` so one abort notifies
    the callback once, from the outbound side.

    Args:
        duplex: Object exposing ``sink`` and ``source`` attributes.
        signal: Cancellation signal to observe.
        options: Abort behaviour for both sides.

    Returns:
        A new ``Duplex`` whose sides are abortable.
    """
    opts = options if options is not None else DEFAULT_OPTIONS
    return Duplex(
        sink=abortable_sink(duplex.sink, signal, opts.without_abort_hook()),
        source=abortable_source(duplex.source, signal, opts),
    )
