"""Knowledge-layer utilities."""

from lineup.knowledge.artist_extractor import ArtistExtractor, extract_artists

__all__ = ["ArtistExtractor", "extract_artists"]
