import time
from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryEntry:
    path: str
    timestamp: int = 0  # unix seconds of last visit, 0 = unknown
    visit_count: int = 1


@dataclass
class ScoredEntry:
    path: str
    frecency_score: float
    fuzzy_score: int = 0
    total_score: float = 0.0
    visit_count: int = 0
    last_visit: int = 0


def ts_str(t: float) -> str:
    lt = time.localtime(t)
    return time.strftime("%H:%M:%S", lt)


def hex_preview(b: bytes, max_len: int = 48) -> str:
    hb = b[:max_len].hex(" ")
    if len(b) > max_len:
        hb += " \u2026"
    return hb
