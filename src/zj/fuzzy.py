"""Fuzzy matching of a query against directory paths.

Matching works on UTF-8 bytes with ASCII-only case folding, so paths never
need to be decoded and results do not depend on the locale. Candidates are
scored in tiers, best first:

  exact basename   100 + length bonus
  basename prefix   75 + length bonus
  basename fuzzy    50 + core score + length bonus
  full path fuzzy         core score + length bonus
"""

from __future__ import annotations

EXACT_MATCH_BONUS = 100
PREFIX_MATCH_BONUS = 75
BASENAME_MATCH_BONUS = 50
SEPARATOR_BONUS = 5
BASE_CHAR_SCORE = 1
MAX_CONSECUTIVE_BONUS = 5

LENGTH_BONUS_MAX = 20
LENGTH_BONUS_MAX_LEN = 200
LENGTH_BONUS_DIVISOR = 10

_SEPARATORS = frozenset(b"/_- ")


def to_bytes(text: str | bytes) -> bytes:
    if isinstance(text, bytes):
        return text
    return text.encode("utf-8", "surrogateescape")


def basename(path: str | bytes) -> bytes:
    """Return the last path component.

    A trailing slash is ignored ("/a/b/" -> "b"). Paths without a slash and
    paths made only of slashes come back whole.
    """
    data = to_bytes(path)
    trimmed = data.rstrip(b"/")
    if not trimmed:
        return data
    slash = trimmed.rfind(b"/")
    if slash < 0:
        return trimmed
    return trimmed[slash + 1 :]


def length_bonus(length: int) -> int:
    """Small bonus that weakly prefers shorter paths."""
    capped = min(length, LENGTH_BONUS_MAX_LEN)
    return max(0, LENGTH_BONUS_MAX - capped // LENGTH_BONUS_DIVISOR)


def fuzzy_core(pattern: bytes, text: bytes) -> int | None:
    """Score an in-order subsequence match of pattern inside text.

    Returns None when some pattern byte cannot be found; there is no partial
    credit. Both arguments must already be case folded.
    """
    if not pattern:
        return 0
    if not text:
        return None

    score = 0
    streak = 0
    prev_matched = False
    text_idx = 0
    text_len = len(text)

    for pattern_byte in pattern:
        found = False
        while text_idx < text_len:
            if text[text_idx] == pattern_byte:
                score += BASE_CHAR_SCORE
                if prev_matched:
                    streak += 1
                    score += min(streak, MAX_CONSECUTIVE_BONUS)
                else:
                    streak = 0
                if text_idx > 0 and text[text_idx - 1] in _SEPARATORS:
                    score += SEPARATOR_BONUS
                prev_matched = True
                text_idx += 1
                found = True
                break
            prev_matched = False
            streak = 0
            text_idx += 1
        if not found:
            return None

    return score


def fuzzy_match(pattern: str | bytes, path: str | bytes) -> int | None:
    """Score path against pattern, or None if the path does not match at all."""
    pattern_b = to_bytes(pattern)
    if not pattern_b:
        return 0

    path_b = to_bytes(path)
    # bytes.lower() only folds ASCII, non-ASCII bytes compare literally
    needle = pattern_b.lower()
    base = basename(path_b).lower()
    bonus = length_bonus(len(path_b))

    if base == needle:
        return EXACT_MATCH_BONUS + bonus
    if base.startswith(needle):
        return PREFIX_MATCH_BONUS + bonus

    core = fuzzy_core(needle, base)
    if core is not None:
        return BASENAME_MATCH_BONUS + core + bonus

    core = fuzzy_core(needle, path_b.lower())
    if core is not None:
        return core + bonus

    return None
