"""Runtime helpers for Lineup command-line entry points."""

from lineup.cli.runtime import configure_runtime

__all__ = ["configure_runtime"]
