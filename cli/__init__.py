"""Command-line entry points for Lineup."""

from . import retrieve_artists

__all__ = ["retrieve_artists"]
