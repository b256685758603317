"""Line-oriented extraction of artist names from announcement e-mails."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SEGMENT_DELIMITER = ","
QUALIFIER_SEPARATOR = " ("
QUALIFIER_SUFFIX = ")"


def is_candidate_line(line: str) -> bool:
    """Only lines opening with an ASCII capital are artist listings."""
    return bool(line) and "A" <= line[0] <= "Z"


def normalize_segment(segment: str) -> Optional[str]:
    """Return the artist name of ``segment`` or ``None`` if it does not qualify.

    A qualifying segment ends with a parenthetical such as ``"Bob Jones (UK)"``;
    everything from the first ``" ("`` onwards is dropped.
    """
    stripped = segment.strip()
    if not stripped.endswith(QUALIFIER_SUFFIX):
        return None
    cut = stripped.find(QUALIFIER_SEPARATOR)
    if cut == -1:
        logger.debug("Skipping segment without a qualifier separator: %r", stripped)
        return None
    return stripped[:cut]


class ArtistExtractor:
    def extract(self, text: str) -> Iterable[str]:
        for line in text.split("\n"):
            if not is_candidate_line(line):
                continue
            for segment in line.split(SEGMENT_DELIMITER):
                name = normalize_segment(segment)
                if name is not None:
                    yield name


def extract_artists(body: str) -> List[str]:
    artists = list(ArtistExtractor().extract(body))
    logger.debug("Extracted %s artist(s)", len(artists))
    return artists
