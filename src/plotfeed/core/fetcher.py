"""
Reading CSV lines from a command or stdin and turning them into events.

One call to :meth:`Fetcher.read` is one pass over the input. How lines are
grouped into datasets depends on the :class:`FetchMode` picked once from
the settings:

* ``STREAMING``: every header starts a new dataset that is announced empty
  and then filled row by row, so points can be drawn as they arrive;
* ``BATCHED``: same grouping, but each batch is sent once it is complete;
* ``SNAPSHOT``: the whole input is one dataset replacing the previous one.
  Repetition is left to whoever triggers the passes.

In the first two modes a blank line ends the current batch and the next
line is a new header.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

from ..config.runtime import FetchSettings
from ..data.schema import Schema
from ..platform.exec import spawned_stdout
from ..tools.debug import time_block
from .errors import IOFetchError, LineParseError
from .events import DatasetCreated, DatasetReady, EventChannel, FetchEvent, RowAppended

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","


class FetchMode(Enum):
    STREAMING = "streaming"
    BATCHED = "batched"
    SNAPSHOT = "snapshot"

    @classmethod
    def select(cls, settings: FetchSettings) -> FetchMode:
        """Snapshot when refreshing, batched when an epoch column is set, else streaming."""
        if settings.refresh_rate > 0:
            return cls.SNAPSHOT
        if settings.epoch.is_set:
            return cls.BATCHED
        return cls.STREAMING


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_lines(source: Iterable[Any]) -> Iterator[str]:
    """
    Yield the lines of ``source`` without their ``\\n`` / ``\\r\\n`` endings.

    ``source`` may be a binary stream, a text stream, or any iterable of
    strings. Binary lines are split on ``\\n`` and then decoded one by one
    as strict UTF-8, so every line before an undecodable one is still
    handed out. Decoding failures raise :class:`LineParseError` and read
    failures :class:`IOFetchError`. The source is never closed.
    """
    it = iter(source)
    while True:
        try:
            raw = next(it)
        except StopIteration:
            return
        except UnicodeDecodeError as exc:
            raise LineParseError(exc) from exc
        except OSError as exc:
            raise IOFetchError(exc) from exc
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise LineParseError(exc) from exc
        yield _strip_line_ending(raw)


class Fetcher:
    """Performs read passes and sends the resulting events to ``channel``."""

    def __init__(
        self,
        settings: FetchSettings,
        channel: EventChannel,
        *,
        stdin: Any = None,
    ) -> None:
        settings = settings.sanitized()
        self.cmd: Optional[str] = settings.cmd
        self.x = settings.x
        self.epoch = settings.epoch
        self.mode = FetchMode.select(settings)
        self._channel = channel
        self._stdin = stdin
        self._algorithms = {
            FetchMode.STREAMING: self._read_lines,
            FetchMode.BATCHED: self._read_batches,
            FetchMode.SNAPSHOT: self._read_all,
        }

    def read(self) -> None:
        """Run one full pass; raises :class:`FetcherError` when it is aborted."""
        with time_block(f"{self.mode.value} pass", log=logger):
            if self.cmd is None:
                stdin = self._stdin if self._stdin is not None else sys.stdin.buffer
                self.read_from(stdin)
                return
            try:
                with spawned_stdout(self.cmd) as stdout:
                    self.read_from(stdout)
            except OSError as exc:
                raise IOFetchError(exc, detail=f"cannot run {self.cmd!r}: {exc}") from exc

    def read_from(self, source: Any) -> None:
        self._algorithms[self.mode](iter_lines(source))

    # ------------------------------------------------------------------ modes
    def _read_lines(self, lines: Iterator[str]) -> None:
        """Announce each dataset empty, then send its rows one by one.

        The header is the first non-blank line: blank lines between batches
        are skipped rather than read as a header with one empty title.
        """
        for header in lines:
            if not header:
                continue
            schema = self._schema(header)
            self._send(DatasetCreated(schema.empty_set()))
            for line in lines:
                if not line:
                    break
                self._send(RowAppended(schema.parse_row(line.split(FIELD_SEPARATOR))))

    def _read_batches(self, lines: Iterator[str]) -> None:
        """Send one dataset per batch, flushed on blank line or EOF.

        Headers are found as in :meth:`_read_lines`, skipping blank lines.
        """
        for header in lines:
            if not header:
                continue
            schema = self._schema(header)
            data = schema.empty_set()
            for line in lines:
                if not line:
                    break
                data.append_slice(schema.parse_row(line.split(FIELD_SEPARATOR)))
            self._send(DatasetReady(data, replace=False))

    def _read_all(self, lines: Iterator[str]) -> None:
        """Read to EOF and send a single dataset replacing the previous one.

        The first non-blank line is the header; later blank lines are skipped.
        """
        header = next((line for line in lines if line), None)
        if header is None:
            return
        schema = self._schema(header)
        data = schema.empty_set()
        for line in lines:
            if line:
                data.append_slice(schema.parse_row(line.split(FIELD_SEPARATOR)))
        self._send(DatasetReady(data, replace=True))

    # ------------------------------------------------------------------ helpers
    def _schema(self, header: str) -> Schema:
        schema = Schema.build(self.x, self.epoch, header.split(FIELD_SEPARATOR))
        logger.debug("New schema: x=%s epoch=%s series=%s", schema.x, schema.epoch, schema.series_titles)
        return schema

    def _send(self, event: FetchEvent) -> None:
        self._channel.send(event)


__all__ = ["FIELD_SEPARATOR", "FetchMode", "Fetcher", "iter_lines"]
