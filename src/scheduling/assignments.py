"""
Subject -> tutor bindings stored on a student profile.

`tutor_uids` on the profile is a derived index over these bindings (the store
can only filter by equality / array membership). It is recomputed from the
full assignment list on every write, never edited on its own.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Assignment:
    subject: str
    tutor_id: str
    tutor_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Assignment":
        return cls(
            subject=str(data.get("subject") or "").strip(),
            tutor_id=str(data.get("tutor_id") or "").strip(),
            tutor_name=str(data.get("tutor_name") or "").strip(),
        )

    def to_dict(self) -> dict[str, str]:
        return {"subject": self.subject, "tutor_id": self.tutor_id, "tutor_name": self.tutor_name}


def parse_assignments(raw: object) -> list[Assignment]:
    """Read the stored JSON list, skipping entries without a subject."""
    if not isinstance(raw, list):
        return []
    out: list[Assignment] = []
    for item in raw:
        if isinstance(item, Assignment):
            out.append(item)
        elif isinstance(item, dict):
            a = Assignment.from_dict(item)
            if a.subject:
                out.append(a)
    return out


def derive_tutor_uids(assignments: Iterable[Assignment]) -> list[str]:
    """Distinct non-empty tutor ids, in first-seen order."""
    seen: list[str] = []
    for a in assignments:
        if a.tutor_id and a.tutor_id not in seen:
            seen.append(a.tutor_id)
    return seen


def duplicate_subjects(assignments: Iterable[Assignment]) -> list[str]:
    counts: dict[str, int] = {}
    for a in assignments:
        counts[a.subject] = counts.get(a.subject, 0) + 1
    return [s for s, n in counts.items() if n > 1]


def find_assignment(assignments: Iterable[Assignment], subject: str) -> Optional[Assignment]:
    for a in assignments:
        if a.subject == subject:
            return a
    return None


def is_bound_tutor(assignments: Iterable[Assignment], subject: str, tutor_id: str) -> bool:
    """True when `tutor_id` is the tutor bound to `subject`."""
    a = find_assignment(assignments, subject)
    return a is not None and bool(tutor_id) and a.tutor_id == tutor_id


def subjects_for_tutor(assignments: Iterable[Assignment], tutor_id: str) -> list[str]:
    return [a.subject for a in assignments if a.tutor_id == tutor_id]
