"""Dataclasses describing mailbox messages as seen by the selection pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional


@dataclass(frozen=True)
class MessageSummary:
    """Lookup key for a message, as returned by a mailbox listing."""

    id: str
    thread_id: Optional[str] = None


@dataclass
class MessageDetail:
    id: str
    labels: FrozenSet[str] = frozenset()
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)


@dataclass
class RetrievalResult:
    """Outcome of one selection + extraction run.

    ``body`` is ``None`` when no message matched; ``artists`` is then empty.
    """

    body: Optional[str]
    artists: List[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.body is not None
