"""Command-line front end and debugging helpers."""
