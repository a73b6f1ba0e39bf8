#!/usr/bin/env python3
"""
Print the events produced from CSV input, one line per event.

Reads from the given command (run through the shell) or from stdin when no
command is given, e.g.::

    vmstat 1 | awk -v OFS=, '{$1=$1; print}' | plotfeed-dump
    plotfeed-dump --refresh 2 -x 0 -- "cat metrics.csv"

Settings can come from a YAML file (``--config``); command-line options
override it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from queue import Empty
from typing import Optional, Sequence, TextIO

from ..config import FetchSettings, load_config
from ..core import (
    DatasetCreated,
    DatasetReady,
    EventChannel,
    FetchEvent,
    FetchFailed,
    FetcherLoop,
    FetchMode,
    RefreshTicker,
    RowAppended,
)
from ..data.schema import ColumnSelector
from ..data.series import SeriesSet, Slice

logger = logging.getLogger(__name__)

POLL_SECONDS = 0.1


# --------------------------------------------------------------------------- # formatting
def _format_values(values: Sequence[float]) -> str:
    return ",".join(f"{v:g}" for v in values)


def _format_row(row: Slice) -> str:
    parts = []
    if row.x is not None:
        parts.append(f"x={row.x}")
    if row.epoch is not None:
        parts.append(f"epoch={row.epoch}")
    parts.append(f"values={_format_values(row.values)}")
    return " ".join(parts)


def _format_dataset(data: SeriesSet) -> str:
    parts = []
    if data.x is not None:
        parts.append(f"x={data.x[0]}")
    if data.epoch is not None:
        parts.append(f"epoch={data.epoch}")
    parts.append(f"series={','.join(data.titles())}")
    parts.append(f"rows={len(data)}")
    return " ".join(parts)


def format_event(event: FetchEvent) -> str:
    if isinstance(event, DatasetCreated):
        return f"dataset {_format_dataset(event.dataset)}"
    if isinstance(event, RowAppended):
        return f"row {_format_row(event.row)}"
    if isinstance(event, DatasetReady):
        kind = "snapshot" if event.replace else "batch"
        lines = [f"{kind} {_format_dataset(event.dataset)}"]
        matrix = event.dataset.to_numpy()
        xs = event.dataset.x[1] if event.dataset.x is not None else None
        for i, values in enumerate(matrix):
            prefix = f"  x={xs[i]} " if xs is not None else "  "
            lines.append(f"{prefix}values={_format_values(values.tolist())}")
        return "\n".join(lines)
    if isinstance(event, FetchFailed):
        return f"error {event.description}"
    raise TypeError(f"unknown event {event!r}")


# --------------------------------------------------------------------------- # cli
def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dump plotfeed events for CSV input")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional YAML file with fetch settings",
    )
    parser.add_argument(
        "-x",
        dest="x",
        help="X column, by position (digits) or by exact title",
    )
    parser.add_argument(
        "--epoch",
        help="Epoch column, by position (digits) or by exact title",
    )
    parser.add_argument(
        "--refresh",
        type=float,
        help="Re-read the whole input every N seconds (snapshot mode)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "cmd",
        nargs="*",
        help="Command whose stdout is read; stdin is used when omitted",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> FetchSettings:
    cfg = load_config(args.config) if args.config else FetchSettings()
    if args.cmd:
        cfg.cmd = " ".join(args.cmd)
    if args.x is not None:
        cfg.x = ColumnSelector.parse(args.x)
    if args.epoch is not None:
        cfg.epoch = ColumnSelector.parse(args.epoch)
    if args.refresh is not None:
        cfg.refresh_rate = float(args.refresh)
    return cfg.sanitized()


def consume(
    channel: EventChannel,
    loop: FetcherLoop,
    *,
    follow: bool,
    out: TextIO,
) -> int:
    """Print events until the loop is idle (or forever when ``follow``)."""
    status = 0
    while True:
        try:
            events = [channel.get(timeout=POLL_SECONDS)]
        except Empty:
            if follow or not loop.wait_idle(0):
                continue
            events = channel.drain()
            for event in events:
                status = _write(event, out) or status
            return status
        for event in events:
            status = _write(event, out) or status


def _write(event: FetchEvent, out: TextIO) -> int:
    print(format_event(event), file=out, flush=True)
    return 1 if isinstance(event, FetchFailed) else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        cfg = _resolve_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    channel = EventChannel()
    loop = FetcherLoop.from_settings(cfg, channel)
    snapshot = FetchMode.select(cfg) is FetchMode.SNAPSHOT
    logger.debug("Fetching with %s", cfg)

    ticker: RefreshTicker | None = None
    if snapshot:
        ticker = RefreshTicker(loop, cfg.refresh_rate).start()
    else:
        loop.trigger()

    try:
        return consume(channel, loop, follow=snapshot, out=sys.stdout)
    except KeyboardInterrupt:
        return 130
    finally:
        if ticker is not None:
            ticker.stop(join=True, timeout=1.0)
        loop.stop()


if __name__ == "__main__":
    raise SystemExit(main())
