"""
Abortable iterators for Python

Stop sync or async iteration when an abort signal fires, with cleanup of the
underlying producer guaranteed to run at most once.
"""

from .abort import AbortController, AbortSignal, SignalLike
from .async_wrapper import AsyncIteratorWrapper
from .compose import Duplex, abortable_duplex, abortable_sink, abortable_transform
from .exceptions import AbortableError, AbortError, UnsupportedSourceError
from .options import AbortOptions
from .source import abortable_source
from .sync_wrapper import SyncIteratorWrapper
from .views import AsyncSourceView, SyncSourceView

__version__ = "0.0.0-dev"

__all__ = [
    "AbortController",
    "AbortSignal",
    "SignalLike",
    "AbortOptions",
    "abortable_source",
    "abortable_sink",
    "abortable_transform",
    "abortable_duplex",
    "Duplex",
    "SyncIteratorWrapper",
    "AsyncIteratorWrapper",
    "SyncSourceView",
    "AsyncSourceView",
    "AbortableError",
    "AbortError",
    "UnsupportedSourceError",
]
