from datetime import date, datetime, timedelta, timezone

import pytest

from campusgrid.schemas.attendance import AttendanceRow, AttendanceStatus
from campusgrid.services.attendance import (
    attendance_status,
    attendance_taken,
    build_student_report,
    day_bounds,
    round_percentage,
    round_subject_percentage,
    summarize_attendance,
    summarize_by_subject,
    summarize_cohort,
)


def make_rows(total, present, subject_id="sub-1", student_id="stu-1", **extra):
    start = datetime(2024, 6, 10, 4, 30, tzinfo=timezone.utc)
    return [
        AttendanceRow(
            id=f"{student_id}-{subject_id}-{index}",
            lecture_id=f"lec-{subject_id}",
            student_id=student_id,
            is_present=index < present,
            date=start + timedelta(days=index),
            subject_id=subject_id,
            **extra,
        )
        for index in range(total)
    ]


def test_overall_summary_counts_and_percentage():
    summary = summarize_attendance(make_rows(20, 13))

    assert summary.total_classes == 20
    assert summary.present_classes == 13
    assert summary.absent_classes == 7
    assert summary.attendance_percentage == 65.0


def test_empty_input_gives_zero_summary():
    summary = summarize_attendance([])

    assert summary.model_dump(by_alias=True) == {
        "totalClasses": 0,
        "presentClasses": 0,
        "absentClasses": 0,
        "attendancePercentage": 0,
    }
    assert summarize_by_subject([]) == []


def test_both_rounding_paths_agree_at_two_decimals():
    assert round_percentage(13, 19) == 68.42
    assert round_subject_percentage(13, 19) == 68.42
    assert round_percentage(2, 3) == 66.67
    assert round_subject_percentage(2, 3) == 66.67


def test_rounding_is_half_up():
    # 1/8 = 12.5% exactly; 1/16 = 6.25% exactly; 1/32 = 3.125% rounds up to 3.13
    assert round_percentage(1, 8) == 12.5
    assert round_subject_percentage(1, 16) == 6.25
    assert round_percentage(1, 32) == 3.13
    assert round_subject_percentage(1, 32) == 3.13


def test_per_subject_breakdown_in_first_seen_order():
    rows = make_rows(19, 13, subject_id="sub-b", subject_name="OS", subject_code="CE264")
    rows += make_rows(4, 4, subject_id="sub-a", subject_name="DBMS", subject_code="CE263")

    subjects = summarize_by_subject(rows)

    assert [subject.subject_id for subject in subjects] == ["sub-b", "sub-a"]
    assert subjects[0].subject_code == "CE264"
    assert subjects[0].total_classes == 19
    assert subjects[0].absent_classes == 6
    assert subjects[0].attendance_percentage == 68.42
    assert subjects[1].attendance_percentage == 100.0


def test_rows_without_subject_count_only_overall():
    rows = make_rows(3, 3, subject_id="sub-1") + make_rows(2, 0, subject_id=None)

    report = build_student_report("stu-1", rows)

    assert report.overall.total_classes == 5
    assert report.overall.present_classes == 3
    assert report.overall.attendance_percentage == 60.0
    assert len(report.subjects) == 1
    assert report.subjects[0].total_classes == 3


@pytest.mark.parametrize(
    ("percentage", "status"),
    [
        (100, AttendanceStatus.excellent),
        (85, AttendanceStatus.excellent),
        (84.99, AttendanceStatus.good),
        (75, AttendanceStatus.good),
        (74.99, AttendanceStatus.warning),
        (65, AttendanceStatus.warning),
        (64.99, AttendanceStatus.critical),
        (0, AttendanceStatus.critical),
    ],
)
def test_status_band_boundaries(percentage, status):
    assert attendance_status(percentage) == status


def test_cohort_summary_uses_whole_percent_and_counts_bands():
    records = {
        "24CE001": make_rows(18, 16, student_id="24CE001"),
        "24CE002": make_rows(18, 14, student_id="24CE002"),
        "24CE003": make_rows(18, 12, student_id="24CE003"),
        "24CE004": make_rows(18, 10, student_id="24CE004"),
        "": make_rows(3, 3, student_id="ghost"),
    }

    cohort = summarize_cohort(records)

    assert [row.student_id for row in cohort.students] == ["24CE001", "24CE002", "24CE003", "24CE004"]
    assert [row.attendance_percentage for row in cohort.students] == [89, 78, 67, 56]
    assert [row.status for row in cohort.students] == [
        AttendanceStatus.excellent,
        AttendanceStatus.good,
        AttendanceStatus.warning,
        AttendanceStatus.critical,
    ]
    assert cohort.status_counts == {status: 1 for status in AttendanceStatus}
    assert cohort.average_sessions == 18
    assert cohort.average_attendance == 73


def test_cohort_summary_of_nobody():
    cohort = summarize_cohort({})
    assert cohort.students == []
    assert cohort.average_sessions == 0
    assert cohort.average_attendance == 0


def test_day_bounds_cover_the_whole_day():
    start, end = day_bounds(date(2024, 6, 10))
    assert start == datetime(2024, 6, 10, 0, 0, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 6, 10, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_attendance_taken_checks_lecture_and_day_window():
    rows = [
        AttendanceRow(lecture_id="lec-1", student_id="s", is_present=True, date=datetime(2024, 6, 10, 23, 59, 59, 999000)),
        AttendanceRow(lecture_id="lec-2", student_id="s", is_present=True, date=datetime(2024, 6, 11, 0, 0, tzinfo=timezone.utc)),
    ]

    assert attendance_taken(rows, "lec-1", date(2024, 6, 10)) is True
    assert attendance_taken(rows, "lec-1", date(2024, 6, 11)) is False
    assert attendance_taken(rows, "lec-2", date(2024, 6, 10)) is False
    assert attendance_taken(rows, "lec-2", date(2024, 6, 11)) is True
    assert attendance_taken([], "lec-1", date(2024, 6, 10)) is False
