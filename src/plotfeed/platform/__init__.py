"""Operating-system specific helpers (process spawning)."""

from .exec import shell_argv, spawned_stdout

__all__ = ["shell_argv", "spawned_stdout"]
