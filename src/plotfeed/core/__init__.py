"""Fetch engine, worker loop and the events they produce.

:class:`Fetcher` performs one blocking read pass over a command's stdout or
the process stdin; :class:`FetcherLoop` runs those passes on a dedicated
thread on demand and reports them through an :class:`EventChannel`.
"""

from .errors import ChannelClosed, FetcherError, IOFetchError, LineParseError
from .events import (
    DatasetCreated,
    DatasetReady,
    EventChannel,
    FetchEvent,
    FetchFailed,
    RowAppended,
)
from .fetch_loop import FetcherLoop, RefreshTicker, terminate_process
from .fetcher import FetchMode, Fetcher

__all__ = [
    "ChannelClosed",
    "DatasetCreated",
    "DatasetReady",
    "EventChannel",
    "FetchEvent",
    "FetchFailed",
    "FetchMode",
    "Fetcher",
    "FetcherError",
    "FetcherLoop",
    "IOFetchError",
    "LineParseError",
    "RefreshTicker",
    "RowAppended",
    "terminate_process",
]
