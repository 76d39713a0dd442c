# /tests/test_dashboard_service.py

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.db.models.school_models import Attendance, ClassSubject, Period
from app.services import class_service, dashboard_service
from app.services.dashboard_service import (
    calculate_attendance_stats, find_best_attendance_class, round_percent
)


def _records(class_id, class_code, statuses, approved=None, justification=None):
    return [
        {"class_id": class_id, "class_code": class_code, "title": f"Class {class_code}",
         "status": status, "justification": justification, "approved": approved}
        for status in statuses
    ]


# --- Rounding ---

@pytest.mark.parametrize("part, total, expected", [
    (1, 16, 6.3),    # 6.25 rounds up, not to even
    (1, 3, 33.3),
    (2, 3, 66.7),
    (3, 3, 100.0),
    (5, 0, 0.0),
])
def test_round_percent_half_up(part, total, expected):
    assert round_percent(part, total) == expected


# --- Attendance Statistics ---

def test_attendance_stats_counts_and_percentages():
    records = (
        _records(1, "1A", ["P"] * 13)
        + _records(1, "1A", ["A"], approved=True, justification="Doctor's note")
        + _records(1, "1A", ["A"], approved=True, justification="   ")
        + _records(1, "1A", ["L"], approved=True, justification="Bus was late")
    )

    stats = calculate_attendance_stats(records)

    assert (stats.total, stats.present, stats.absent, stats.late) == (16, 13, 2, 1)
    assert stats.justified == 1
    assert stats.present_percent == 81.3
    assert stats.absent_percent == 12.5
    assert stats.late_percent == 6.3
    assert stats.justified_percent == 50.0


def test_only_approved_absences_with_a_reason_are_justified():
    records = (
        _records(1, "1A", ["A"], approved=True, justification="Family emergency")
        + _records(1, "1A", ["A"], approved=False, justification="Overslept")
        + _records(1, "1A", ["L"], approved=True, justification="Dentist")
    )

    stats = calculate_attendance_stats(records)

    assert stats.justified == 1
    assert stats.justified_percent == 50.0


def test_justified_percent_without_absences_is_zero():
    stats = calculate_attendance_stats(_records(1, "1A", ["P", "L"], approved=True, justification="note"))

    assert stats.justified == 0
    assert stats.justified_percent == 0.0


def test_approved_presence_is_not_a_justified_absence():
    stats = calculate_attendance_stats(_records(1, "1A", ["P", "P"], approved=True, justification="note"))

    assert stats.justified == 0


def test_attendance_stats_empty():
    stats = calculate_attendance_stats([])

    assert stats.total == 0
    assert stats.present_percent == 0.0


# --- Best Class ---

def test_best_class_ignores_classes_below_minimum_sample():
    records = (
        _records(1, "1A", ["P"] * 9 + ["A"])
        + _records(2, "2B", ["P"] * 5)
    )

    best = find_best_attendance_class(records, min_sample=10)

    assert best.class_code == "1A"
    assert best.attendance_percent == 90.0
    assert best.records == 10


def test_late_counts_as_attended():
    records = _records(1, "1A", ["L"] * 10) + _records(2, "2B", ["P"] * 9 + ["A"])

    best = find_best_attendance_class(records, min_sample=10)

    assert best.class_code == "1A"
    assert best.attendance_percent == 100.0


def test_best_class_tie_prefers_larger_sample_then_code():
    records = (
        _records(3, "3C", ["P"] * 10)
        + _records(2, "2B", ["P"] * 20)
        + _records(1, "1A", ["P"] * 20)
    )

    best = find_best_attendance_class(records, min_sample=10)

    assert best.class_code == "1A"
    assert best.records == 20


def test_no_best_class_without_enough_data():
    assert find_best_attendance_class(_records(1, "1A", ["P"] * 3), min_sample=10) is None
    assert find_best_attendance_class([], min_sample=10) is None


# --- Summary ---

def test_get_summary_data_with_mocked_service():
    mock_db = MagicMock()
    mock_db.count_users_per_role.return_value = {"Administrator": 1, "Teacher": 4, "Student": 30, "Parent": 0}
    mock_db.count_classes.return_value = 3
    mock_db.count_subjects.return_value = 7
    mock_db.count_assignments.return_value = 12
    mock_db.get_attendance_between.return_value = _records(1, "1A", ["P"] * 9 + ["A"])

    summary = dashboard_service.get_summary_data(mock_db, today=date(2024, 10, 31))

    mock_db.get_attendance_between.assert_called_once_with(date(2024, 10, 2), date(2024, 10, 31))
    assert summary.totalUsers == 35
    assert summary.usersPerRole["Student"] == 30
    assert (summary.classCount, summary.subjectCount, summary.assignmentCount) == (3, 7, 12)
    assert summary.windowDays == 30
    assert summary.attendance.present == 9
    assert summary.bestClass.class_code == "1A"
    print("\n✅ SUCCESS: Dashboard summary assembled from mocked counts.")


def test_summary_window_covers_exactly_window_days_up_to_today(db_service, session, admin, make_class,
                                                               make_student, make_teacher, make_subject):
    class_id = make_class("1A")
    student = make_student()
    teacher = make_teacher()
    enroll_id = class_service.enroll_student(class_id, student.student_id, db_service, admin).value
    assignment = ClassSubject(class_id=class_id, subject_id=make_subject(), teacher_id=teacher.teacher_id)
    session.add(assignment)
    session.flush()
    days = (
        (date(2024, 8, 1), "A", False),
        (date(2024, 10, 1), "A", False),
        (date(2024, 10, 2), "P", False),
        (date(2024, 10, 20), "P", False),
        (date(2024, 10, 21), "A", True),
        (date(2024, 10, 31), "P", False),
        (date(2024, 11, 5), "A", False),
    )
    for day, status, excused in days:
        period = Period(class_subject_id=assignment.class_subject_id, period_date=day, period_label="1st")
        session.add(period)
        session.flush()
        session.add(Attendance(
            enroll_id=enroll_id, period_id=period.period_id, status=status,
            justification="Medical appointment" if excused else None, approved=True if excused else None,
        ))
    session.commit()

    summary = dashboard_service.get_summary_data(db_service, today=date(2024, 10, 31))

    assert summary.usersPerRole == {"Administrator": 1, "Teacher": 1, "Student": 1, "Parent": 0}
    assert summary.attendance.total == 4
    assert summary.attendance.present_percent == 75.0
    assert summary.attendance.justified_percent == 100.0
    assert summary.bestClass is None
    assert summary.assignmentCount == 1
