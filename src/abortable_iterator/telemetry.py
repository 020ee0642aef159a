"""Optional Logfire instrumentation for abort and cleanup paths.

Nothing here is required at runtime: when ``logfire`` is missing or has not
been configured by the host application, spans and events are no-ops.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


def _maybe_logfire() -> Optional[Any]:
    """Return the ``logfire`` module when it is installed and configured."""
    try:
        import logfire
    except ImportError:
        return None

    try:
        instance = getattr(logfire, "DEFAULT_LOGFIRE_INSTANCE", None)
        config = getattr(instance, "config", None)
        if config is None:
            return None
        if getattr(config, "_initialized", False):
            return logfire
    except Exception:
        return None

    return None


def _attributes(attributes: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset attributes so spans only carry configured values."""
    return {key: value for key, value in attributes.items() if value is not None}


@contextmanager
def span(name: str, **attributes: Any) -> Iterator[None]:
    """Wrap a block in a Logfire span named ``name``."""
    logfire = _maybe_logfire()
    if logfire is None:
        yield
        return

    with logfire.span(name, **_attributes(attributes)):
        yield


def event(name: str, **attributes: Any) -> None:
    """Emit a debug-level Logfire event named ``name``."""
    logfire = _maybe_logfire()
    if logfire is None:
        return
    logfire.debug(name, **_attributes(attributes))
