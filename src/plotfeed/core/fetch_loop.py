"""
Background worker that runs fetch passes on demand.

The UI thread calls :meth:`FetcherLoop.trigger` whenever it wants data; the
worker runs one :meth:`Fetcher.read` per trigger, strictly one after the
other, so blocking reads never stall the caller. Events produced during a
pass go straight to the :class:`EventChannel`; a failed pass adds a single
:class:`FetchFailed` and the worker goes back to waiting.

If even that error cannot be delivered because the consumer closed the
channel, nothing is left to report to and the ``on_fatal`` hook runs. By
default it terminates the process.
"""

from __future__ import annotations

import logging
import os
import threading
from queue import Queue
from typing import Callable, Optional

from ..config.runtime import FetchSettings
from .errors import ChannelClosed, FetcherError
from .events import EventChannel, FetchFailed
from .fetcher import Fetcher

logger = logging.getLogger(__name__)

FatalHandler = Callable[[BaseException], None]

_STOP = object()


def terminate_process(exc: BaseException) -> None:
    """Default fatal handler: log and exit immediately."""
    logger.critical("Fetch results can no longer be delivered, exiting: %s", exc)
    os._exit(1)


class FetcherLoop:
    """Owns the fetch worker thread and its trigger queue."""

    def __init__(
        self,
        fetcher: Fetcher,
        channel: EventChannel,
        *,
        on_fatal: Optional[FatalHandler] = None,
        thread_name: Optional[str] = None,
    ) -> None:
        self._fetcher = fetcher
        self._channel = channel
        self._on_fatal = on_fatal or terminate_process
        self._triggers: Queue[object] = Queue()
        self._pending = 0
        self._accepting = True
        self._idle = threading.Condition()
        self._thread = threading.Thread(
            target=self._run,
            name=thread_name or "plotfeed-fetcher",
            daemon=True,
        )
        self._thread.start()

    @classmethod
    def from_settings(
        cls,
        settings: FetchSettings,
        channel: EventChannel,
        **kwargs,
    ) -> FetcherLoop:
        return cls(Fetcher(settings, channel), channel, **kwargs)

    # ------------------------------------------------------------------ public API
    def trigger(self) -> None:
        """Request one more pass. Never blocks; passes queue up behind each other.

        Raises :class:`RuntimeError` after :meth:`stop` or once the worker has
        exited.
        """
        with self._idle:
            if not self._accepting or not self._thread.is_alive():
                raise RuntimeError("fetch worker is no longer running")
            self._pending += 1
            self._triggers.put_nowait(None)

    @property
    def pending(self) -> int:
        """Number of passes queued or running."""
        with self._idle:
            return self._pending

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no pass is queued or running; False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        """
        Ask the worker to exit once already queued passes are done.

        A pass in progress is never interrupted.
        """
        with self._idle:
            self._accepting = False
            self._triggers.put_nowait(_STOP)
        if join:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    # ------------------------------------------------------------------ worker
    def _run(self) -> None:
        while True:
            item = self._triggers.get()
            if item is _STOP:
                return
            try:
                self._run_pass()
            except ChannelClosed as exc:
                self._abandon_queued()
                self._on_fatal(exc)
                return
            finally:
                with self._idle:
                    self._pending = max(0, self._pending - 1)
                    self._idle.notify_all()

    def _abandon_queued(self) -> None:
        # queued passes will never run; the finally above accounts for the current one
        with self._idle:
            self._accepting = False
            self._pending = 1

    def _run_pass(self) -> None:
        logger.debug("Starting fetch pass")
        try:
            self._fetcher.read()
        except FetcherError as exc:
            logger.warning("Fetch pass failed: %s", exc)
            self._channel.send(FetchFailed(exc))
        else:
            logger.debug("Fetch pass finished")


class RefreshTicker:
    """Triggers a :class:`FetcherLoop` every ``interval`` seconds until stopped."""

    def __init__(self, loop: FetcherLoop, interval: float, *, thread_name: Optional[str] = None) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._loop = loop
        self._interval = float(interval)
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=thread_name or "plotfeed-ticker",
            daemon=True,
        )

    def start(self) -> RefreshTicker:
        self._thread.start()
        return self

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._loop.trigger()
            except Exception:
                logger.exception("Failed to trigger refresh")
            if self._stop_event.wait(self._interval):
                break

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if join:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()


__all__ = ["FatalHandler", "FetcherLoop", "RefreshTicker", "terminate_process"]
