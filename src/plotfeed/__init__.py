"""plotfeed: feeds CSV lines from a command or stdin to a chart renderer."""

__version__ = "0.1.0"
