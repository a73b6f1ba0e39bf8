"""Spawning external data-producing commands."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from contextlib import contextmanager
from typing import IO, Iterator, List

logger = logging.getLogger(__name__)


def shell_argv(command: str) -> List[str]:
    """Return the argv that runs ``command`` through the platform shell."""
    if os.name == "nt":
        return ["cmd", "/C", command]
    return ["sh", "-c", command]


def _watch_stderr(stream: IO[bytes], command: str) -> None:
    try:
        for raw_err in iter(stream.readline, b""):
            text_err = raw_err.decode("utf-8", errors="replace").rstrip("\r\n")
            if text_err:
                logger.debug("[%s] %s", command, text_err)
    except (OSError, ValueError):
        # pipe closed underneath us once the child is reaped
        pass


@contextmanager
def spawned_stdout(command: str) -> Iterator[IO[bytes]]:
    """
    Start ``command`` and yield its standard output as a binary stream.

    Stderr lines go to the module logger at DEBUG level. On exit the pipe is
    closed and the child reaped; if the caller bailed out with an exception
    a still running child is killed first. Raises :class:`OSError` when the
    command cannot be started.
    """
    argv = shell_argv(command)
    logger.debug("Spawning %r", argv)
    proc = subprocess.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    assert proc.stdout is not None and proc.stderr is not None
    stderr_thread = threading.Thread(
        target=_watch_stderr,
        args=(proc.stderr, command),
        name="plotfeed-stderr",
        daemon=True,
    )
    stderr_thread.start()

    completed = False
    try:
        yield proc.stdout
        completed = True
    finally:
        if not completed and proc.poll() is None:
            proc.kill()
        proc.stdout.close()
        returncode = proc.wait()
        stderr_thread.join(timeout=1.0)
        if not stderr_thread.is_alive():
            # grandchildren may still hold the pipe; the daemon thread ends on their EOF
            proc.stderr.close()
        if completed and returncode != 0:
            logger.warning("Command %r exited with status %s", command, returncode)


__all__ = ["shell_argv", "spawned_stdout"]
