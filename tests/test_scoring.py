"""Tests for frecency decay and candidate ordering."""

from zj.scoring import (
    ONE_DAY,
    ONE_HOUR,
    ONE_WEEK,
    frecency,
    rank_key,
    rescore,
    score_history,
    score_lines,
    sort_entries,
    total_score,
)
from zj.types import HistoryEntry, ScoredEntry

NOW = 1_700_000_000


class TestFrecency:
    def test_unknown_time_uses_raw_count(self):
        assert frecency(10, 0, NOW) == 10.0

    def test_within_hour(self):
        assert frecency(2, NOW - 10, NOW) == 8.0

    def test_hour_boundary_falls_into_day_bucket(self):
        assert frecency(2, NOW - ONE_HOUR, NOW) == 4.0

    def test_within_week(self):
        assert frecency(2, NOW - 2 * ONE_DAY, NOW) == 2.0

    def test_within_four_weeks(self):
        assert frecency(2, NOW - 2 * ONE_WEEK, NOW) == 1.0

    def test_older(self):
        assert frecency(4, NOW - 60 * ONE_DAY, NOW) == 1.0

    def test_reference_points(self):
        assert frecency(10, NOW - 1800, NOW) == 40.0
        assert frecency(10, NOW - 43200, NOW) == 20.0
        assert frecency(10, NOW - 259200, NOW) == 10.0
        assert frecency(10, NOW - 1209600, NOW) == 5.0

    def test_more_visits_score_higher(self):
        assert frecency(5, NOW - 10, NOW) > frecency(1, NOW - 10, NOW)


class TestTotalScore:
    def test_fuzzy_weighted_ten_times(self):
        assert total_score(5.0, 100) == 1005.0

    def test_rescore_keeps_frecency(self):
        entry = ScoredEntry(path="/a", frecency_score=3.0)
        scored = rescore(entry, 7)
        assert scored.fuzzy_score == 7
        assert scored.total_score == 73.0
        assert entry.fuzzy_score == 0


class TestSortEntries:
    def test_descending_total(self):
        entries = [
            ScoredEntry(path="/low", frecency_score=1.0, total_score=1.0),
            ScoredEntry(path="/high", frecency_score=9.0, total_score=9.0),
        ]
        assert [e.path for e in sort_entries(entries)] == ["/high", "/low"]

    def test_tie_prefers_shorter_path(self):
        entries = [
            ScoredEntry(path="/aaaa", frecency_score=1.0, total_score=5.0),
            ScoredEntry(path="/a", frecency_score=1.0, total_score=5.0),
        ]
        assert [e.path for e in sort_entries(entries)] == ["/a", "/aaaa"]

    def test_tie_length_by_bytes(self):
        # "/é" is 3 bytes, "/ab" is 3 bytes: full tie keeps input order
        entries = [
            ScoredEntry(path="/é", frecency_score=0.0),
            ScoredEntry(path="/ab", frecency_score=0.0),
        ]
        assert [e.path for e in sort_entries(entries)] == ["/é", "/ab"]

    def test_rank_key(self):
        entry = ScoredEntry(path="/abc", frecency_score=0.0, total_score=2.5)
        assert rank_key(entry) == (-2.5, 4)


class TestScoreHistory:
    def test_ranked_by_frecency(self):
        entries = [
            HistoryEntry(path="/old", timestamp=NOW - 60 * ONE_DAY, visit_count=4),
            HistoryEntry(path="/new", timestamp=NOW - 10, visit_count=1),
        ]
        scored = score_history(entries, now=NOW)
        assert [e.path for e in scored] == ["/new", "/old"]
        assert scored[0].frecency_score == 4.0
        assert scored[0].total_score == 4.0
        assert scored[1].visit_count == 4
        assert scored[1].last_visit == NOW - 60 * ONE_DAY

    def test_score_lines_have_no_frecency(self):
        scored = score_lines(["/b", "/a"])
        assert [e.path for e in scored] == ["/b", "/a"]
        assert all(e.frecency_score == 0.0 for e in scored)
