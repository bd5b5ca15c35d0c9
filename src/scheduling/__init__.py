from scheduling.assignments import (
    Assignment,
    derive_tutor_uids,
    duplicate_subjects,
    find_assignment,
    is_bound_tutor,
    parse_assignments,
    subjects_for_tutor,
)
from scheduling.chapters import append_label, format_chapter_label, latest_label, remove_label
from scheduling.results import ErrorCode, ServiceResult
from scheduling.state_machine import (
    OPEN_STATUS_VALUES,
    SessionStatus,
    check_transition,
    is_attendance_due,
    is_terminal,
    normalize_status,
    sort_key,
)
from scheduling.time_projection import (
    REFERENCE_ZONE,
    TIMEZONES,
    CivilTime,
    InvalidTimeInput,
    convert_to_12_hour,
    format_display_date,
    format_display_time,
    is_known_timezone,
    project_civil_time,
    to_reference_instant,
)

__all__ = [
    "Assignment",
    "derive_tutor_uids",
    "duplicate_subjects",
    "find_assignment",
    "is_bound_tutor",
    "parse_assignments",
    "subjects_for_tutor",
    "append_label",
    "format_chapter_label",
    "latest_label",
    "remove_label",
    "ErrorCode",
    "ServiceResult",
    "OPEN_STATUS_VALUES",
    "SessionStatus",
    "check_transition",
    "is_attendance_due",
    "is_terminal",
    "normalize_status",
    "sort_key",
    "REFERENCE_ZONE",
    "TIMEZONES",
    "CivilTime",
    "InvalidTimeInput",
    "convert_to_12_hour",
    "format_display_date",
    "format_display_time",
    "is_known_timezone",
    "project_civil_time",
    "to_reference_instant",
]
