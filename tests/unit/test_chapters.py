"""Unit tests for chapter labels and ledger list edits."""
import pytest

from scheduling.chapters import append_label, format_chapter_label, latest_label, remove_label


@pytest.mark.unit
class TestFormatChapterLabel:
    def test_trims_parts(self):
        assert format_chapter_label(" 3 ", "  Kinematics ") == "Ch 3: Kinematics"

    def test_accepts_int_number(self):
        assert format_chapter_label(3, "Kinematics") == "Ch 3: Kinematics"

    @pytest.mark.parametrize("number,name", [("", "Kinematics"), ("3", "   "), (None, "x"), ("3", None)])
    def test_blank_parts_rejected(self, number, name):
        assert format_chapter_label(number, name) is None


@pytest.mark.unit
class TestLedgerEdits:
    def test_append_keeps_order(self):
        labels = append_label([], "Ch 1: Units")
        labels = append_label(labels, "Ch 3: Kinematics")
        labels = append_label(labels, "Ch 2: Vectors")
        assert labels == ["Ch 1: Units", "Ch 3: Kinematics", "Ch 2: Vectors"]

    def test_append_does_not_mutate_input(self):
        original = ["Ch 1: Units"]
        append_label(original, "Ch 2: Vectors")
        assert original == ["Ch 1: Units"]

    def test_append_duplicate_rejected(self):
        assert append_label(["Ch 1: Units"], "Ch 1: Units") is None

    def test_remove_first_match(self):
        assert remove_label(["a", "b", "c"], "b") == ["a", "c"]

    def test_remove_absent_is_noop(self):
        labels = ["a", "b"]
        out = remove_label(labels, "z")
        assert out == labels
        assert out is not labels

    def test_latest(self):
        assert latest_label([]) is None
        assert latest_label(["a", "b"]) == "b"
