"""Utilities for invoking user callbacks that may be sync or async."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Optional

from .options import AbortOptions
from .telemetry import event

logger = logging.getLogger(__name__)

Hook = Callable[[Any], Any]


async def maybe_call(func: Optional[Hook], arg: Any) -> None:
    """Call ``func`` with ``arg`` and await the result when it is awaitable."""
    if func is None:
        return
    result = func(arg)
    if inspect.isawaitable(result):
        await result


async def report_error(options: AbortOptions, exc: BaseException) -> None:
    """Route a side-channel error to the configured reporter, awaiting it.

    A reporter that raises is logged and does not interrupt the caller; the
    abort or cleanup path still settles the outstanding pull.
    """
    if options.report_cleanup_error is None:
        _discard(exc)
        return
    try:
        await maybe_call(options.report_cleanup_error, exc)
    except Exception as reporter_exc:
        logger.debug(
            "Cleanup error reporter failed",
            extra={
                "error_type": type(exc).__name__,
                "reporter_error_type": type(reporter_exc).__name__,
                "reporter_error": str(reporter_exc),
            },
        )
        event(
            "abortable_iterator.cleanup_reporter_failed",
            error_type=type(exc).__name__,
            reporter_error_type=type(reporter_exc).__name__,
        )


def _discard(exc: BaseException) -> None:
    """Drop an unreported error, leaving a debug trace."""
    logger.debug(
        "Discarding cleanup error",
        extra={"error_type": type(exc).__name__, "error": str(exc)},
    )
    event("abortable_iterator.cleanup_error_discarded", error_type=type(exc).__name__)
