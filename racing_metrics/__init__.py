"""Replay biathlon race events and build a resulting table."""

__version__ = "0.1.0"