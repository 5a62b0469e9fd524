"""Skip the interactive list when the answer is already clear."""

from __future__ import annotations

from typing import Sequence

from zj.types import ScoredEntry

AUTO_SELECT_MIN_SCORE = 100
AUTO_SELECT_SCORE_MARGIN = 50


def try_auto_select(
    ranked: Sequence[ScoredEntry],
    min_score: int = AUTO_SELECT_MIN_SCORE,
    margin: int = AUTO_SELECT_SCORE_MARGIN,
) -> str | None:
    """Pick a path from ranked matches without asking, or return None.

    A single match is always taken. Otherwise the top match is taken only
    when its fuzzy score is at least min_score and beats the runner-up by
    more than margin.
    """
    if len(ranked) == 1:
        return ranked[0].path
    if len(ranked) > 1:
        top, second = ranked[0], ranked[1]
        if top.fuzzy_score >= min_score and top.fuzzy_score > second.fuzzy_score + margin:
            return top.path
    return None
