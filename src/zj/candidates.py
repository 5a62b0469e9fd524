from __future__ import annotations

from typing import Sequence

from zj.constants import MAX_DISPLAY_ENTRIES
from zj.fuzzy import fuzzy_match
from zj.scoring import rescore, sort_entries
from zj.types import ScoredEntry


class CandidateStore:
    """Ranked view over a fixed master list of candidates.

    The master list is never modified. Every refresh re-runs the matcher over
    all of it, so the cost per keystroke is entries x query length.
    """

    def __init__(self, entries: Sequence[ScoredEntry], max_results: int = MAX_DISPLAY_ENTRIES):
        self._entries = tuple(entries)
        self.max_results = max_results
        self.query: bytes = b""
        self.filtered: list[ScoredEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[ScoredEntry, ...]:
        return self._entries

    def rank(self, query: str | bytes) -> list[ScoredEntry]:
        """All matches for query, best first, without truncation."""
        matches = []
        for entry in self._entries:
            score = fuzzy_match(query, entry.path)
            if score is None:
                continue
            matches.append(rescore(entry, score))
        return sort_entries(matches)

    def refresh(self, query: str | bytes) -> list[ScoredEntry]:
        """Rebuild the filtered view for query and return it."""
        self.query = query if isinstance(query, bytes) else query.encode("utf-8", "surrogateescape")
        self.filtered = self.rank(self.query)[: self.max_results]
        return self.filtered
