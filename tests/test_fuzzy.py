"""Tests for fuzzy matching and its scoring tiers."""

from zj.fuzzy import (
    basename,
    fuzzy_core,
    fuzzy_match,
    length_bonus,
)

PATH = "/home/user/projects"  # 19 bytes -> length bonus 19


class TestBasename:
    def test_last_component(self):
        assert basename("/home/user/projects") == b"projects"

    def test_trailing_slash_ignored(self):
        assert basename("/a/b/") == b"b"

    def test_no_slash(self):
        assert basename("foo") == b"foo"

    def test_root(self):
        assert basename("/") == b"/"

    def test_bytes_input(self):
        assert basename(b"/tmp/x") == b"x"


class TestLengthBonus:
    def test_short_paths_get_full_bonus(self):
        assert length_bonus(0) == 20
        assert length_bonus(9) == 20

    def test_decreases_every_ten_bytes(self):
        assert length_bonus(10) == 19
        assert length_bonus(199) == 1

    def test_floor_at_zero(self):
        assert length_bonus(200) == 0
        assert length_bonus(5000) == 0


class TestFuzzyCore:
    def test_empty_pattern(self):
        assert fuzzy_core(b"", b"") == 0

    def test_empty_text(self):
        assert fuzzy_core(b"a", b"") is None

    def test_consecutive_run_bonus(self):
        # 1 + (1+1) + (1+2)
        assert fuzzy_core(b"abc", b"abc") == 6

    def test_gaps_reset_streak(self):
        assert fuzzy_core(b"abc", b"axbxc") == 3

    def test_separator_bonus(self):
        # b follows '/', so it earns the separator bonus
        assert fuzzy_core(b"b", b"a/b") == 1 + 5

    def test_missing_char_is_no_match(self):
        assert fuzzy_core(b"abz", b"abc") is None

    def test_order_matters(self):
        assert fuzzy_core(b"ba", b"ab") is None


class TestFuzzyMatch:
    def test_empty_query_matches_everything(self):
        assert fuzzy_match("", PATH) == 0
        assert fuzzy_match("", "") == 0

    def test_exact_basename(self):
        assert fuzzy_match("projects", PATH) == 100 + 19

    def test_exact_basename_is_case_insensitive(self):
        assert fuzzy_match("PROJECTS", PATH) == 100 + 19

    def test_basename_prefix(self):
        assert fuzzy_match("proj", PATH) == 75 + 19

    def test_basename_fuzzy(self):
        # p, j, s scattered through "projects": 3 points, no streaks
        assert fuzzy_match("pjs", PATH) == 50 + 3 + 19

    def test_full_path_fuzzy(self):
        # h, u, p each start a component after '/'
        assert fuzzy_match("hup", PATH) == 3 * (1 + 5) + 19

    def test_tier_ranges(self):
        assert fuzzy_match("work", "/a/b/work") >= 100
        assert 75 <= fuzzy_match("work", "/a/b/workflow") < 100
        assert fuzzy_match("xyz", "/a/b/projects") is None

    def test_no_match(self):
        assert fuzzy_match("xyz", PATH) is None

    def test_tiers_are_ordered(self):
        exact = fuzzy_match("projects", PATH)
        prefix = fuzzy_match("proj", PATH)
        fuzzy = fuzzy_match("pjs", PATH)
        assert exact > prefix > fuzzy

    def test_shorter_path_scores_higher_in_same_tier(self):
        short = fuzzy_match("src", "/a/src")
        long = fuzzy_match("src", "/" + "x" * 60 + "/src")
        assert short > long

    def test_non_ascii_compared_literally(self):
        # "/home/café" is 11 bytes
        assert fuzzy_match("café", "/home/café") == 100 + 19
        assert fuzzy_match("CAFÉ", "/home/café") is None
