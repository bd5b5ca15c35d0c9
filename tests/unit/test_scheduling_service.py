"""Unit tests for SchedulingService against an in-memory DB."""
import pytest

from api.models.class_session import ClassSession
from api.services.attendance_service import AttendanceService
from api.services.scheduling_service import RescheduleRequest, SchedulingService
from scheduling.results import ErrorCode


def _count(db):
    return db.query(ClassSession).count()


@pytest.mark.unit
class TestScheduleSession:
    def test_creates_scheduled_class_with_denormalized_names(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00")

        assert result.ok
        assert result.message == "Class scheduled successfully for Sam Student"
        cls = result.value
        assert cls.status == "scheduled"
        assert cls.student_name == "Sam Student"
        assert cls.tutor_name == "Tom Tutor"
        assert cls.is_rescheduled is False
        assert cls.original_class_date == ""
        assert cls.summary == ""

    def test_tutor_mismatch_writes_nothing(self, db_session, seeded):
        s, t2 = seeded["student"], seeded["tutor2"]
        result = SchedulingService(db_session).schedule_session(s.uid, "Physics", t2.uid, "2024-03-10", "15:00")
        assert not result.ok
        assert result.error == ErrorCode.TUTOR_MISMATCH
        assert _count(db_session) == 0

    def test_subject_not_assigned(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(s.uid, "Biology", t.uid, "2024-03-10", "15:00")
        assert result.error == ErrorCode.SUBJECT_NOT_ASSIGNED
        assert _count(db_session) == 0

    def test_unknown_student(self, db_session, seeded):
        result = SchedulingService(db_session).schedule_session(
            "nobody", "Physics", seeded["tutor"].uid, "2024-03-10", "15:00"
        )
        assert result.error == ErrorCode.UNKNOWN_STUDENT

    def test_tutor_is_not_a_student(self, db_session, seeded):
        t = seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(t.uid, "Physics", t.uid, "2024-03-10", "15:00")
        assert result.error == ErrorCode.UNKNOWN_STUDENT

    @pytest.mark.parametrize("class_date,class_time", [("", "15:00"), ("2024-03-10", ""), ("2024-02-30", "15:00")])
    def test_invalid_date_or_time(self, db_session, seeded, class_date, class_time):
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(s.uid, "Physics", t.uid, class_date, class_time)
        assert result.error == ErrorCode.INVALID_DATE_OR_TIME
        assert _count(db_session) == 0

    def test_double_booking_is_allowed(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        assert svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00").ok
        assert svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00").ok
        assert _count(db_session) == 2


@pytest.mark.unit
class TestReschedule:
    def _missed_class(self, db_session, seeded, subject="Physics", tutor_key="tutor", day="2024-03-10"):
        s, t = seeded["student"], seeded[tutor_key]
        cls = SchedulingService(db_session).schedule_session(s.uid, subject, t.uid, day, "15:00").value
        assert AttendanceService(db_session).mark_attendance(cls.id, s.uid, "missed", "").ok
        return cls

    def test_makeup_links_missed_class_and_leaves_it_missed(self, db_session, seeded):
        missed = self._missed_class(db_session, seeded)
        s, t = seeded["student"], seeded["tutor"]

        result = SchedulingService(db_session).schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00",
            reschedule=RescheduleRequest("2024-03-10"),
        )

        assert result.ok
        assert result.value.is_rescheduled is True
        assert result.value.original_class_date == "2024-03-10"
        assert result.value.status == "scheduled"
        db_session.refresh(missed)
        assert missed.status == "missed"

    def test_original_must_be_missed(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00")
        result = svc.schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest("2024-03-10"),
        )
        assert result.error == ErrorCode.ORIGINAL_SESSION_NOT_MISSED
        assert _count(db_session) == 1

    def test_completed_original_rejected(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        cls = SchedulingService(db_session).schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00").value
        AttendanceService(db_session).mark_attendance(cls.id, s.uid, "completed", "Optics")
        result = SchedulingService(db_session).schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest("2024-03-10"),
        )
        assert result.error == ErrorCode.ORIGINAL_SESSION_NOT_MISSED

    def test_missed_class_of_other_subject_does_not_count(self, db_session, seeded):
        self._missed_class(db_session, seeded, subject="Maths", tutor_key="tutor2")
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest("2024-03-10"),
        )
        assert result.error == ErrorCode.ORIGINAL_SESSION_NOT_MISSED

    def test_empty_original_date(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest("  "),
        )
        assert result.error == ErrorCode.ORIGINAL_SESSION_NOT_MISSED

    def test_targets_newest_first(self, db_session, seeded):
        self._missed_class(db_session, seeded, day="2024-03-01")
        self._missed_class(db_session, seeded, day="2024-03-08")
        targets = SchedulingService(db_session).list_reschedule_targets(seeded["student"].uid, "Physics")
        assert [c.class_date for c in targets] == ["2024-03-08", "2024-03-01"]


@pytest.mark.unit
class TestQueries:
    def test_classes_for_viewer_sorted_and_scoped(self, db_session, seeded):
        s, t, t2 = seeded["student"], seeded["tutor"], seeded["tutor2"]
        svc = SchedulingService(db_session)
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-12", "09:00")
        svc.schedule_session(s.uid, "Maths", t2.uid, "2024-03-10", "18:00")
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "08:30")

        assert [(c.class_date, c.class_time) for c in svc.classes_for_viewer(s.uid, "student")] == [
            ("2024-03-10", "08:30"), ("2024-03-10", "18:00"), ("2024-03-12", "09:00"),
        ]
        assert len(svc.classes_for_viewer(t.uid, "tutor")) == 2
        assert len(svc.classes_for_viewer(t2.uid, "tutor")) == 1
        assert len(svc.classes_for_viewer(seeded["admin"].uid, "admin")) == 3
        assert svc.classes_for_viewer(s.uid, "guest") == []

    def test_class_stats(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        a = svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00").value
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-11", "15:00")
        AttendanceService(db_session).mark_attendance(a.id, s.uid, "missed", "")
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-12", "15:00",
                             reschedule=RescheduleRequest("2024-03-10"))
        assert svc.class_stats(s.uid) == {
            "total": 3, "scheduled": 2, "completed": 0, "missed": 1, "rescheduled": 1,
        }

    def test_delete_session(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        cls = svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "15:00").value
        assert svc.delete_session(cls.id).ok
        assert svc.delete_session(cls.id).error == ErrorCode.SESSION_NOT_FOUND


@pytest.mark.unit
class TestStoredFormat:
    def test_unpadded_input_stored_zero_padded(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        cls = SchedulingService(db_session).schedule_session(s.uid, "Physics", t.uid, "2024-3-1", "9:5").value
        assert (cls.class_date, cls.class_time) == ("2024-03-01", "09:05")

    def test_unpadded_times_sort_ascending(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "10:00")
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-03-10", "9:5")
        svc.schedule_session(s.uid, "Physics", t.uid, "2024-3-9", "23:00")
        assert [(c.class_date, c.class_time) for c in svc.classes_for_viewer(s.uid, "student")] == [
            ("2024-03-09", "23:00"), ("2024-03-10", "09:05"), ("2024-03-10", "10:00"),
        ]

    @pytest.mark.parametrize("scheduled_as,original", [("2024-3-10", "2024-03-10"), ("2024-03-10", "2024-3-10")])
    def test_reschedule_matches_regardless_of_padding(self, db_session, seeded, scheduled_as, original):
        s, t = seeded["student"], seeded["tutor"]
        svc = SchedulingService(db_session)
        missed = svc.schedule_session(s.uid, "Physics", t.uid, scheduled_as, "15:00").value
        assert AttendanceService(db_session).mark_attendance(missed.id, s.uid, "missed", "").ok

        result = svc.schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest(original),
        )

        assert result.ok, result.message
        assert result.value.original_class_date == "2024-03-10"

    def test_malformed_original_date(self, db_session, seeded):
        s, t = seeded["student"], seeded["tutor"]
        result = SchedulingService(db_session).schedule_session(
            s.uid, "Physics", t.uid, "2024-03-12", "16:00", reschedule=RescheduleRequest("last tuesday"),
        )
        assert result.error == ErrorCode.INVALID_DATE_OR_TIME
        assert _count(db_session) == 0


@pytest.mark.unit
def test_binding_to_deleted_tutor_is_rejected(db_session, seeded):
    from api.services.user_service import UserService

    s, t = seeded["student"], seeded["tutor"]
    tutor_uid, student_uid = t.uid, s.uid
    assert UserService(db_session).delete_user(tutor_uid, acting_uid=seeded["admin"].uid).ok

    result = SchedulingService(db_session).schedule_session(student_uid, "Physics", tutor_uid, "2024-03-10", "15:00")

    assert result.error == ErrorCode.UNKNOWN_TUTOR
    assert _count(db_session) == 0
