"""Unit tests for subject -> tutor bindings and the derived tutor index."""
import pytest

from scheduling.assignments import (
    Assignment,
    derive_tutor_uids,
    duplicate_subjects,
    find_assignment,
    is_bound_tutor,
    parse_assignments,
    subjects_for_tutor,
)


@pytest.fixture
def bindings():
    return [
        Assignment("Physics", "T1", "Tom"),
        Assignment("Chemistry", "T1", "Tom"),
        Assignment("Maths", "T2", "Mia"),
        Assignment("Art", ""),
    ]


@pytest.mark.unit
class TestParseAssignments:
    def test_reads_stored_json(self):
        parsed = parse_assignments([
            {"subject": " Physics ", "tutor_id": "T1", "tutor_name": "Tom"},
            {"subject": "", "tutor_id": "T2"},
            "garbage",
        ])
        assert parsed == [Assignment("Physics", "T1", "Tom")]

    def test_non_list_is_empty(self):
        assert parse_assignments(None) == []
        assert parse_assignments({"subject": "Physics"}) == []

    def test_to_dict_round_trips_keys(self):
        a = Assignment("Physics", "T1", "Tom")
        assert Assignment.from_dict(a.to_dict()) == a


@pytest.mark.unit
class TestDeriveTutorUids:
    def test_distinct_in_first_seen_order(self, bindings):
        assert derive_tutor_uids(bindings) == ["T1", "T2"]

    def test_empty(self):
        assert derive_tutor_uids([]) == []

    def test_unassigned_subjects_skipped(self):
        assert derive_tutor_uids([Assignment("Art", "")]) == []


@pytest.mark.unit
class TestLookups:
    def test_find_assignment(self, bindings):
        assert find_assignment(bindings, "Maths").tutor_id == "T2"
        assert find_assignment(bindings, "Biology") is None

    def test_is_bound_tutor(self, bindings):
        assert is_bound_tutor(bindings, "Physics", "T1")
        assert not is_bound_tutor(bindings, "Physics", "T2")
        assert not is_bound_tutor(bindings, "Biology", "T1")
        assert not is_bound_tutor(bindings, "Art", "")

    def test_subjects_for_tutor(self, bindings):
        assert subjects_for_tutor(bindings, "T1") == ["Physics", "Chemistry"]

    def test_duplicate_subjects(self):
        assert duplicate_subjects([Assignment("Physics", "T1"), Assignment("Physics", "T2")]) == ["Physics"]
        assert duplicate_subjects([Assignment("Physics", "T1")]) == []
