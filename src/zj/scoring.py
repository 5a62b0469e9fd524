"""Frecency decay and combined ranking of candidates."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Iterable

from zj.fuzzy import to_bytes
from zj.types import HistoryEntry, ScoredEntry

ONE_HOUR = 3600
ONE_DAY = 86400
ONE_WEEK = 604800

# (elapsed seconds upper bound, multiplier); first bucket that fits wins
DECAY_BUCKETS = (
    (ONE_HOUR, 4.0),
    (ONE_DAY, 2.0),
    (ONE_WEEK, 1.0),
    (ONE_WEEK * 4, 0.5),
)
OLDEST_MULTIPLIER = 0.25

FUZZY_WEIGHT = 10.0
FRECENCY_WEIGHT = 1.0


def current_timestamp() -> int:
    return int(time.time())


def frecency(visit_count: int, last_visit: int, now: int,
             buckets=DECAY_BUCKETS, oldest: float = OLDEST_MULTIPLIER) -> float:
    """Weight a visit count by how long ago the directory was last visited.

    A last_visit of 0 means the time is unknown and the count is used as is.
    """
    base = float(visit_count)
    if last_visit == 0:
        return base
    elapsed = now - last_visit
    for limit, multiplier in buckets:
        if elapsed < limit:
            return base * multiplier
    return base * oldest


def total_score(frecency_score: float, fuzzy_score: int) -> float:
    # Match quality dominates; frecency only orders similar matches
    return fuzzy_score * FUZZY_WEIGHT + frecency_score * FRECENCY_WEIGHT


def rescore(entry: ScoredEntry, fuzzy_score: int) -> ScoredEntry:
    """Copy of entry with a new fuzzy score and its total recomputed."""
    return replace(
        entry,
        fuzzy_score=fuzzy_score,
        total_score=total_score(entry.frecency_score, fuzzy_score),
    )


def rank_key(entry: ScoredEntry) -> tuple[float, int]:
    """Sort key: highest total first, shorter path on ties."""
    return (-entry.total_score, len(to_bytes(entry.path)))


def sort_entries(entries: list[ScoredEntry]) -> list[ScoredEntry]:
    # list.sort is stable, so equal keys keep their master order
    entries.sort(key=rank_key)
    return entries


def score_history(entries: Iterable[HistoryEntry], now: int | None = None) -> list[ScoredEntry]:
    """Turn history entries into candidates, computing frecency once."""
    if now is None:
        now = current_timestamp()
    scored = []
    for entry in entries:
        score = frecency(entry.visit_count, entry.timestamp, now)
        scored.append(ScoredEntry(
            path=entry.path,
            frecency_score=score,
            total_score=total_score(score, 0),
            visit_count=entry.visit_count,
            last_visit=entry.timestamp,
        ))
    return sort_entries(scored)


def score_lines(lines: Iterable[str]) -> list[ScoredEntry]:
    """Candidates from plain path lines; they carry no frecency."""
    return [ScoredEntry(path=line, frecency_score=0.0) for line in lines]
