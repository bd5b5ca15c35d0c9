"""
Timezone projection for class times.

Admins schedule every class in the reference zone (IST, fixed +05:30).
Students and tutors see the same instant in the timezone stored on their profile.
No app (api) dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

REFERENCE_ZONE = "Asia/Kolkata"
REFERENCE_OFFSET = timezone(timedelta(hours=5, minutes=30), "IST")

TIME_TBD = "Time TBD"

# Choices offered when registering a student or tutor.
TIMEZONES: list[tuple[str, str]] = [
    # Middle East
    ("Asia/Dubai", "UAE (GST)"),
    ("Asia/Riyadh", "Saudi Arabia (AST)"),
    ("Asia/Qatar", "Qatar (AST)"),
    ("Asia/Kuwait", "Kuwait (AST)"),
    ("Asia/Bahrain", "Bahrain (AST)"),
    # Asia
    ("Asia/Kolkata", "India (IST)"),
    ("Asia/Colombo", "Sri Lanka (IST)"),
    ("Asia/Dhaka", "Bangladesh (BST)"),
    ("Asia/Singapore", "Singapore (SGT)"),
    ("Asia/Tokyo", "Japan (JST)"),
    # Europe
    ("Europe/London", "UK (GMT/BST)"),
    ("Europe/Paris", "France (CET)"),
    ("Europe/Berlin", "Germany (CET)"),
    # America
    ("America/New_York", "USA - Eastern"),
    ("America/Chicago", "USA - Central"),
    ("America/Denver", "USA - Mountain"),
    ("America/Los_Angeles", "USA - Pacific"),
    # Australia / NZ
    ("Australia/Sydney", "Australia"),
    ("Pacific/Auckland", "New Zealand"),
]


class InvalidTimeInput(ValueError):
    """A stored class date/time or a zone identifier could not be parsed."""


@dataclass(frozen=True)
class CivilTime:
    """Wall-clock reading in some zone, with no zone attached."""
    year: int
    month: int
    day: int
    hour: int
    minute: int

    @property
    def date_str(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def time_str(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def _load_zone(zone: str) -> ZoneInfo:
    if not zone or not isinstance(zone, str):
        raise InvalidTimeInput("Timezone is required")
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimeInput(f"Unknown timezone: {zone}") from e


def is_known_timezone(zone: Optional[str]) -> bool:
    """True when `zone` names an IANA zone available on this host."""
    try:
        _load_zone(zone or "")
    except InvalidTimeInput:
        return False
    return True


def parse_class_date(class_date: Optional[str]) -> datetime:
    if not class_date or not isinstance(class_date, str):
        raise InvalidTimeInput("Class date is required")
    try:
        return datetime.strptime(class_date.strip(), "%Y-%m-%d")
    except ValueError as e:
        raise InvalidTimeInput(f"Invalid class date: {class_date}") from e


def parse_class_time(class_time: Optional[str]) -> tuple[int, int]:
    if not class_time or not isinstance(class_time, str):
        raise InvalidTimeInput("Class time is required")
    try:
        parsed = datetime.strptime(class_time.strip(), "%H:%M")
    except ValueError as e:
        raise InvalidTimeInput(f"Invalid class time: {class_time}") from e
    return parsed.hour, parsed.minute


def to_reference_instant(class_date: Optional[str], class_time: Optional[str]) -> datetime:
    """
    Build the aware instant for a class stored as reference-zone civil time.
    Raises InvalidTimeInput if either part is missing or malformed.
    """
    day = parse_class_date(class_date)
    hour, minute = parse_class_time(class_time)
    return day.replace(hour=hour, minute=minute, tzinfo=REFERENCE_OFFSET)


def project_civil_time(instant: datetime, target_zone: str) -> CivilTime:
    """
    Civil date and time of `instant` as read on a wall clock in `target_zone`.
    Applies whatever offset (DST included) the zone has on that date.
    """
    if instant.tzinfo is None:
        raise InvalidTimeInput("Instant must be timezone-aware")
    local = instant.astimezone(_load_zone(target_zone))
    return CivilTime(local.year, local.month, local.day, local.hour, local.minute)


def convert_to_12_hour(time_24: Optional[str]) -> str:
    """
    "14:05" -> "2:05 PM". Empty input gives "Time TBD"; anything unparseable
    is returned unchanged.
    """
    if not time_24:
        return TIME_TBD
    try:
        hours, minutes = parse_class_time(time_24)
    except InvalidTimeInput:
        return str(time_24)
    period = "PM" if hours >= 12 else "AM"
    hours_12 = hours % 12 or 12
    return f"{hours_12}:{minutes:02d} {period}"


def _uses_reference_zone(target_zone: Optional[str]) -> bool:
    return not target_zone or target_zone == REFERENCE_ZONE


def format_display_time(
    class_date: Optional[str],
    class_time: Optional[str],
    target_zone: Optional[str],
) -> str:
    """
    12-hour display time of a class for a viewer in `target_zone`.

    Never raises: malformed stored values fall back to formatting the raw
    class time, so one bad record cannot break a dashboard.
    """
    if _uses_reference_zone(target_zone):
        return convert_to_12_hour(class_time)
    try:
        civil = project_civil_time(to_reference_instant(class_date, class_time), target_zone)
    except InvalidTimeInput:
        return convert_to_12_hour(class_time)
    return convert_to_12_hour(civil.time_str)


def format_display_date(
    class_date: Optional[str],
    class_time: Optional[str],
    target_zone: Optional[str],
) -> str:
    """
    Projected YYYY-MM-DD for a viewer in `target_zone`.
    Differs from `class_date` when the projection crosses midnight.
    """
    if _uses_reference_zone(target_zone):
        return class_date or ""
    try:
        civil = project_civil_time(to_reference_instant(class_date, class_time), target_zone)
    except InvalidTimeInput:
        return class_date or ""
    return civil.date_str
