"""Events sent from the fetch worker to the consumer, and the channel carrying them."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from queue import Empty, Queue
from typing import List, Optional, Union

from ..data.series import SeriesSet, Slice
from .errors import ChannelClosed, FetcherError


@dataclass
class DatasetCreated:
    """Streaming mode: a new, still empty dataset begins."""

    dataset: SeriesSet


@dataclass
class RowAppended:
    """Streaming mode: one row for the most recently created dataset."""

    row: Slice


@dataclass
class DatasetReady:
    """A fully populated dataset.

    ``replace`` is True when the dataset replaces everything shown so far
    (snapshot refresh) and False when it is one more batch.
    """

    dataset: SeriesSet
    replace: bool = False


@dataclass
class FetchFailed:
    """A read pass was aborted."""

    error: FetcherError

    @property
    def description(self) -> str:
        return str(self.error)


FetchEvent = Union[DatasetCreated, RowAppended, DatasetReady, FetchFailed]


class EventChannel:
    """Unbounded many-producer/single-consumer queue of :data:`FetchEvent`.

    ``send`` never blocks. Once the consumer calls :meth:`close`, further
    sends raise :class:`ChannelClosed`.
    """

    def __init__(self) -> None:
        self._queue: Queue[FetchEvent] = Queue()
        self._closed = threading.Event()

    def send(self, event: FetchEvent) -> None:
        if self._closed.is_set():
            raise ChannelClosed(f"consumer is gone, dropping {type(event).__name__}")
        self._queue.put_nowait(event)

    def get(self, timeout: Optional[float] = None) -> FetchEvent:
        """Block for the next event; raises :class:`queue.Empty` on timeout."""
        return self._queue.get(timeout=timeout)

    def drain(self) -> List[FetchEvent]:
        """Return every queued event without blocking."""
        items: List[FetchEvent] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except Empty:
                break
        return items

    def close(self) -> None:
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()


__all__ = [
    "DatasetCreated",
    "DatasetReady",
    "EventChannel",
    "FetchEvent",
    "FetchFailed",
    "RowAppended",
]
