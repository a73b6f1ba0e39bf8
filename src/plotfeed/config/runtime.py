"""Runtime configuration for the fetcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

import yaml

from ..data.schema import ColumnSelector

if TYPE_CHECKING:
    from ..core.fetcher import FetchMode


@dataclass(slots=True)
class FetchSettings:
    """
    What to read and how to group it.

    ``cmd`` is a shell command line whose stdout is read; ``None`` reads the
    process standard input. A positive ``refresh_rate`` (seconds) selects
    full-snapshot reads.
    """

    cmd: Optional[str] = None
    x: ColumnSelector = field(default_factory=ColumnSelector.unset)
    epoch: ColumnSelector = field(default_factory=ColumnSelector.unset)
    refresh_rate: float = 0.0

    def sanitized(self) -> FetchSettings:
        """Return a copy with normalized field types."""
        cmd: Union[str, Sequence[str], None] = self.cmd
        if cmd is not None and not isinstance(cmd, str):
            cmd = " ".join(str(part) for part in cmd)
        if cmd is not None and not cmd.strip():
            cmd = None
        return FetchSettings(
            cmd=cmd,
            x=ColumnSelector.parse(self.x),
            epoch=ColumnSelector.parse(self.epoch),
            refresh_rate=max(0.0, float(self.refresh_rate or 0.0)),
        )

    @property
    def mode(self) -> "FetchMode":
        from ..core.fetcher import FetchMode

        return FetchMode.select(self)


def _fetch_block(data: Mapping[str, Any]) -> dict[str, Any]:
    """Merge a nested ``fetch:`` section over the top-level keys."""
    merged = {key: value for key, value in data.items() if key != "fetch"}
    nested = data.get("fetch")
    if isinstance(nested, Mapping):
        merged.update(nested)
    return merged


def _command(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(part, str) for part in value):
        return " ".join(value)
    raise ValueError(f"invalid 'cmd': expected a string or a list of strings, got {value!r}")


def _selector(key: str, value: Any) -> ColumnSelector:
    if value is not None and not isinstance(value, (str, int)):
        raise ValueError(f"invalid {key!r} column: expected a position or a title, got {value!r}")
    try:
        return ColumnSelector.parse(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid {key!r} column: {exc}") from exc


def _refresh_rate(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"invalid 'refresh_rate': {value!r} is not a number of seconds")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid 'refresh_rate': {value!r} is not a number of seconds") from exc


def config_from_mapping(data: Mapping[str, Any] | None) -> FetchSettings:
    """
    Build :class:`FetchSettings` from ``data``.

    Keys may sit at the top level or under a ``fetch`` block; unknown keys are
    ignored. A value of the wrong shape raises :class:`ValueError` naming the
    offending key.
    """
    if not data:
        return FetchSettings()
    merged = _fetch_block(data)
    settings = FetchSettings(
        cmd=_command(merged.get("cmd")),
        x=_selector("x", merged.get("x")),
        epoch=_selector("epoch", merged.get("epoch")),
        refresh_rate=_refresh_rate(merged.get("refresh_rate")),
    )
    return settings.sanitized()


def load_config(path: str | Path | None) -> FetchSettings:
    """
    Load settings from a YAML file at ``path``.

    Missing files fall back to default :class:`FetchSettings`.
    """
    if path is None:
        return FetchSettings()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return FetchSettings()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["FetchSettings", "config_from_mapping", "load_config"]
