"""Tests for the snapraid diff output parser."""

from snapraid_runner.snapraid.diff_parser import parse_diff
from snapraid_runner.snapraid.models import Category, ChangeSet


class TestBasicParsing:
    def test_itemised_and_equal(self):
        cs = parse_diff(["add a.txt", "remove b.txt", "remove c.txt", "3 equal"])
        assert cs.equal == 3
        assert cs.added == ("a.txt",)
        assert cs.removed == ("b.txt", "c.txt")
        assert cs.updated == ()
        assert cs.has_changes is True

    def test_full_report(self, sample_diff_lines):
        cs = parse_diff(sample_diff_lines)
        assert cs.equal == 1234
        assert cs.added == ("photos/2024/img\\ 001.jpg", "photos/2024/img_002.jpg")
        assert cs.removed == ("old/report.pdf",)
        assert cs.updated == ("docs/notes.txt",)
        assert cs.moved == ("music/a.flac -> music/b.flac",)
        assert cs.copied == ("video/clip.mkv -> backup/clip.mkv",)
        assert cs.restored == ("misc/restored.bin",)

    def test_summary_totals_do_not_populate_categories(self):
        cs = parse_diff(["12 added", "4 removed", "0 equal"])
        assert cs == ChangeSet()
        assert cs.has_changes is False

    def test_empty_input(self):
        cs = parse_diff([])
        assert cs == ChangeSet()
        assert cs.counts() == {c: 0 for c in Category}


class TestEqualLines:
    def test_case_insensitive(self):
        assert parse_diff(["7 EQUAL"]).equal == 7
        assert parse_diff(["7 Equal"]).equal == 7

    def test_surrounding_whitespace(self):
        assert parse_diff(["     42    equal   "]).equal == 42

    def test_multiple_equal_lines_accumulate(self):
        assert parse_diff(["1 equal", "2 equal"]).equal == 3

    def test_non_numeric_count_ignored(self):
        cs = parse_diff(["many equal"])
        assert cs == ChangeSet()

    def test_negative_count_ignored(self):
        assert parse_diff(["-3 equal"]).equal == 0

    def test_plus_sign_accepted(self):
        assert parse_diff(["+3 equal"]).equal == 3
        assert parse_diff(["+ equal", "++3 equal"]).equal == 0

    def test_three_tokens_not_a_summary(self):
        assert parse_diff(["3 equal files"]).equal == 0


class TestActions:
    def test_case_insensitive_action(self):
        cs = parse_diff(["ADD x", "Update y", "rEmOvE z"])
        assert cs.added == ("x",)
        assert cs.updated == ("y",)
        assert cs.removed == ("z",)

    def test_path_taken_verbatim(self):
        cs = parse_diff(["add dir/with\\ space/file\\ name.txt"])
        assert cs.added == ("dir/with\\ space/file\\ name.txt",)

    def test_path_inner_spaces_kept_outer_trimmed(self):
        cs = parse_diff(["update    a  b.txt   "])
        assert cs.updated == ("a  b.txt",)

    def test_order_preserved(self):
        cs = parse_diff(["add c", "add a", "add b"])
        assert cs.added == ("c", "a", "b")

    def test_unknown_action_ignored(self):
        cs = parse_diff(["delete a.txt", "Loading state from /x", "Comparing..."])
        assert cs == ChangeSet()

    def test_line_without_space_ignored(self):
        assert parse_diff(["add", "remove"]) == ChangeSet()

    def test_blank_lines_ignored(self):
        assert parse_diff(["", "   ", "\t"]) == ChangeSet()


class TestDeterminism:
    def test_same_input_same_result(self, sample_diff_lines):
        assert parse_diff(sample_diff_lines) == parse_diff(list(sample_diff_lines))

    def test_noise_does_not_affect_result(self):
        clean = ["add a", "remove b", "5 equal"]
        noisy = ["banner", "add a", "Scanning disk d1...", "remove b", "", "5 equal", "done"]
        assert parse_diff(clean) == parse_diff(noisy)


class TestHasChanges:
    def test_each_category_counts(self):
        for category in Category:
            cs = ChangeSet(**{category.value: ("p",)})
            assert cs.has_changes is True
            assert cs.total_changes == 1

    def test_equal_alone_is_not_a_change(self):
        assert ChangeSet(equal=100).has_changes is False
