"""Failures raised while fetching input."""

from __future__ import annotations

from typing import Optional


class FetcherError(Exception):
    """Base error for a failed read pass."""

    label = "fetch error"

    def __init__(self, cause: BaseException | str, *, detail: Optional[str] = None) -> None:
        self.cause = cause
        self.detail = detail or str(cause)
        super().__init__(f"{self.label}: {self.detail}")


class IOFetchError(FetcherError):
    """The source could not be started or a read from it failed."""

    label = "IO error"


class LineParseError(FetcherError):
    """The byte stream could not be split into text lines."""

    label = "CSV parse error"


class ChannelClosed(Exception):
    """Raised when sending to an event channel whose consumer has gone away."""


__all__ = ["ChannelClosed", "FetcherError", "IOFetchError", "LineParseError"]
