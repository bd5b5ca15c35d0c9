"""Curriculum progress labels ("Ch 3: Kinematics") and ordered-list edits."""
from __future__ import annotations

from typing import Optional


def format_chapter_label(chapter_number: object, chapter_name: object) -> Optional[str]:
    """Normalized label, or None when either part is blank after trimming."""
    number = str(chapter_number if chapter_number is not None else "").strip()
    name = str(chapter_name if chapter_name is not None else "").strip()
    if not number or not name:
        return None
    return f"Ch {number}: {name}"


def append_label(labels: list[str], label: str) -> Optional[list[str]]:
    """
    New list with `label` at the end, or None if it is already recorded.
    Order is chronological, so an existing label is never moved.
    """
    if label in labels:
        return None
    return [*labels, label]


def remove_label(labels: list[str], label: str) -> list[str]:
    """New list without the first exact match (unchanged copy if absent)."""
    out = list(labels)
    if label in out:
        out.remove(label)
    return out


def latest_label(labels: list[str]) -> Optional[str]:
    return labels[-1] if labels else None
