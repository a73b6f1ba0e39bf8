"""Configuration objects and helpers for plotfeed.

Settings come from an optional YAML file (top-level keys or a ``fetch:``
block) and are normalized into the typed :class:`FetchSettings` dataclass
that the fetcher and the command-line front end share.
"""

from .runtime import FetchSettings, config_from_mapping, load_config

__all__ = ["FetchSettings", "config_from_mapping", "load_config"]
