from datetime import date, datetime

import pytest

from seed import SESSION, TERM, add_attendance, add_merit, add_result, add_student
from services.errors import NoDataError, NotFoundError, ValidationError
from services.report_cards import (
    WeeklyThresholds,
    assess_week,
    ca_report_id,
    generate_bulk_ca_reports,
    generate_bulk_term_reports,
    generate_bulk_weekly_reports,
    generate_ca_report_card,
    generate_end_of_term_report_card,
    generate_weekly_report_card,
    get_ca_report_card,
    get_term_report_card,
    get_weekly_report_card,
    list_student_report_cards,
    mark_report_sent,
    rank_position,
    term_report_id,
    weekly_report_id,
)

WEEK_START = datetime(2024, 10, 7)
WEEK_END = datetime(2024, 10, 13, 23, 59, 59, 999000)


# ==========================================================
# [ID]
# ==========================================================
def test_report_ids_are_deterministic_and_slash_free():
    assert ca_report_id("stu_0001", TERM, SESSION, "ca1") == "ca1_stu_0001_First Term_2024_2025"
    assert term_report_id("stu_0001", TERM, SESSION) == "term_stu_0001_First Term_2024_2025"
    assert weekly_report_id("stu_0001", datetime(1970, 1, 1), datetime(1970, 1, 1, 0, 0, 2)) == "weekly_stu_0001_0_2000"


# ==========================================================
# [석차]
# ==========================================================
def test_rank_position_is_a_permutation_with_id_tie_break():
    averages = {"s3": 12.0, "s1": 15.0, "s2": 12.0, "s5": 0.0, "s4": 18.0}

    positions = {sid: rank_position(averages, sid) for sid in averages}

    assert sorted(positions.values()) == [1, 2, 3, 4, 5]
    assert positions == {"s4": 1, "s1": 2, "s2": 3, "s3": 4, "s5": 5}


# ==========================================================
# [CA]
# ==========================================================
def test_ca_report_end_to_end(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 18, recorded_at=datetime(2024, 10, 1))
    add_result(store, "stu_0001", "english", "ca1", 15, recorded_at=datetime(2024, 10, 2))
    add_result(store, "stu_0001", "mathematics", "ca1", 12, recorded_at=datetime(2024, 10, 3))  # 낮은 재시험 점수
    add_result(store, "stu_0001", "mathematics", "homework", 9)
    add_result(store, "stu_0002", "mathematics", "ca1", 10)
    for day, status in ((1, "present"), (2, "present"), (3, "present"), (4, "absent")):
        add_attendance(store, "stu_0001", datetime(2024, 10, day), status)
    add_merit(store, "stu_0001", datetime(2024, 10, 2), 5)
    add_merit(store, "stu_0001", datetime(2024, 10, 3), -2)

    report = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_1")

    assert report.total_score == 33
    assert report.average_score == 16.5
    assert report.grade == "A"
    lines = {s.subject_id: s for s in report.subjects}
    assert set(lines) == {"mathematics", "english"}
    assert lines["mathematics"].score == 18
    assert lines["mathematics"].grade == "A"
    assert lines["english"].grade == "A"
    assert lines["english"].subject_name == "English Language"
    assert lines["english"].remark == "Excellent"
    assert report.position == 1
    assert report.total_students == 2
    assert report.attendance_percentage == 75
    assert report.total_merits == 3
    assert report.student_name == "Ada Okafor"

    stored = store.get("caReportCards", report.id)
    assert stored.payload["average_score"] == 16.5
    assert stored.generated_by == "admin_1"
    assert stored.sent_to_parent is False


def test_ca_report_accepts_admission_number_and_ranks_lower_student(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 18)
    add_result(store, "stu_0002", "mathematics", "ca1", 10)

    report = generate_ca_report_card(store, "STU20240002", TERM, SESSION, "ca1", "admin_1")

    assert report.student_id == "stu_0002"
    assert report.position == 2
    assert report.grade == "C"


def test_ca_report_regeneration_overwrites(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 10)
    first = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_1")
    add_result(store, "stu_0001", "mathematics", "ca1", 20)
    second = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_2")

    assert first.id == second.id
    docs = store.query("caReportCards")
    assert len(docs) == 1
    assert docs[0].payload["total_score"] == 20


def test_ca_report_error_cases(store, school):
    with pytest.raises(NotFoundError):
        generate_ca_report_card(store, "ghost", TERM, SESSION, "ca1", "admin_1")
    with pytest.raises(NoDataError):
        generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_1")

    add_result(store, "stu_0001", "mathematics", "ca1", 14)
    with pytest.raises(ValidationError):
        generate_ca_report_card(store, "stu_0001", TERM, SESSION, "exam", "admin_1")

    assert store.query("caReportCards") == []


def test_ca_report_lists_every_recorded_subject_with_missing_scores_as_zero(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 18)
    add_result(store, "stu_0001", "english", "homework", 9)

    report = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_1")

    assert {s.subject_id: s.score for s in report.subjects} == {"mathematics": 18, "english": 0}
    assert report.total_score == 18
    assert report.average_score == 9


def test_ca_report_for_type_not_yet_recorded_scores_zero(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 14)

    report = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca2", "admin_1")

    assert [(s.subject_id, s.score) for s in report.subjects] == [("mathematics", 0)]
    assert report.grade == "F"


def test_bulk_ca_reports_include_classmate_with_other_ca_only(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 16)
    add_result(store, "stu_0002", "mathematics", "ca2", 19)

    result = generate_bulk_ca_reports(store, "jss_1a", TERM, SESSION, "ca1", "admin_1")

    assert (result.success, result.failed, result.errors) == (2, 0, [])
    tunde = get_ca_report_card(store, "stu_0002", TERM, SESSION, "ca1")
    assert tunde.average_score == 0
    assert tunde.position == 2
    assert tunde.total_students == 2


def test_ca_report_keeps_comments(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 15)

    report = generate_ca_report_card(
        store, "stu_0001", TERM, SESSION, "ca1", "admin_1",
        teacher_comment="Good start",
        principal_comment="Well done",
    )

    assert report.teacher_comment == "Good start"
    loaded = get_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1")
    assert loaded.teacher_comment == "Good start"
    assert loaded.principal_comment == "Well done"


# ==========================================================
# [학기말]
# ==========================================================
def test_term_report_combines_tagged_and_flat_results(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 18)
    add_result(store, "stu_0001", "mathematics", "ca2", 16)
    add_result(store, "stu_0001", "mathematics", "exam", 50)
    store.create("results", {
        "student_id": "stu_0001",
        "subject_id": "english",
        "term": TERM,
        "session": SESSION,
        "ca1": 12,
        "ca2": 10,
        "exam": 30,
    })
    add_result(store, "stu_0002", "mathematics", "exam", 30)
    for day, status in ((1, "present"), (2, "present"), (3, "absent"), (4, "late")):
        add_attendance(store, "stu_0001", datetime(2024, 10, day), status)
    add_merit(store, "stu_0001", datetime(2024, 10, 2), 60)

    report = generate_end_of_term_report_card(
        store, "stu_0001", TERM, SESSION, "admin_1",
        teacher_comment="Keep it up",
        next_term_begins=date(2025, 1, 6),
    )

    lines = {s.subject_id: s for s in report.subjects}
    assert lines["mathematics"].total == 84
    assert lines["mathematics"].grade == "A"
    assert lines["english"].total == 52
    assert lines["english"].grade == "C"
    assert report.total_score == 136
    assert report.average_score == 68
    assert report.overall_grade == "B"
    assert report.position == 1
    assert report.total_students == 2
    assert report.promoted is True
    assert (report.present_days, report.absent_days, report.late_days, report.total_school_days) == (2, 1, 1, 4)
    assert report.attendance_percentage == 50
    assert report.total_merits == 60
    assert report.merit_level == "silver"

    loaded = get_term_report_card(store, "STU20240001", TERM, SESSION)
    assert loaded.teacher_comment == "Keep it up"
    assert loaded.next_term_begins == date(2025, 1, 6)
    assert loaded.principal_comment is None


def test_term_report_not_promoted_below_forty(store, school):
    add_result(store, "stu_0002", "mathematics", "exam", 30)

    report = generate_end_of_term_report_card(store, "stu_0002", TERM, SESSION, "admin_1")

    assert report.average_score == 30
    assert report.overall_grade == "F"
    assert report.promoted is False
    assert report.merit_level == "bronze"
    assert report.attendance_percentage == 0


def test_term_report_counts_subject_with_only_weekly_work_as_zero(store, school):
    add_result(store, "stu_0001", "mathematics", "exam", 50)
    add_result(store, "stu_0001", "english", "homework", 8)

    report = generate_end_of_term_report_card(store, "stu_0001", TERM, SESSION, "admin_1")

    lines = {s.subject_id: s for s in report.subjects}
    assert lines["english"].total == 0
    assert lines["english"].grade == "F"
    assert report.total_score == 50
    assert report.average_score == 25


def test_bulk_term_reports_isolate_students_without_results(store, school):
    for i in range(30):
        add_student(store, f"bulk_{i:02d}", f"First{i:02d}", f"Last{i:02d}", class_id="jss_1b", admission_number=f"STU2024B{i:03d}")
        if i not in (7, 19):
            add_result(store, f"bulk_{i:02d}", "mathematics", "exam", 30 + i)

    result = generate_bulk_term_reports(store, "jss_1b", TERM, SESSION, "admin_1")

    assert result.success == 28
    assert result.failed == 2
    assert len(result.errors) == 2
    assert result.errors[0].startswith("First07 Last07: ")
    assert result.errors[1].startswith("First19 Last19: ")
    assert len(store.query("termReportCards")) == 28


def test_bulk_ca_reports_skip_inactive_students(store, school):
    add_result(store, "stu_0001", "mathematics", "ca2", 15)
    add_result(store, "stu_0002", "mathematics", "ca2", 12)
    store.update("students", "stu_0002", {"is_active": False})

    result = generate_bulk_ca_reports(store, "jss_1a", TERM, SESSION, "ca2", "admin_1")

    assert (result.success, result.failed) == (1, 0)
    assert get_ca_report_card(store, "stu_0001", TERM, SESSION, "ca2").total_students == 1


# ==========================================================
# [주간]
# ==========================================================
def _seed_week(store):
    add_attendance(store, "stu_0001", datetime(2024, 10, 7, 8), "present")
    add_attendance(store, "stu_0001", datetime(2024, 10, 9, 8), "absent")
    add_attendance(store, "stu_0001", datetime(2024, 10, 8, 8), "present")
    add_attendance(store, "stu_0001", datetime(2024, 10, 14, 8), "present")  # 다음 주
    add_result(store, "stu_0001", "mathematics", "classwork", 8, recorded_at=datetime(2024, 10, 8, 10))
    add_result(store, "stu_0001", "mathematics", "classwork", 6, recorded_at=datetime(2024, 10, 9, 10))
    add_result(store, "stu_0001", "english", "homework", 9, recorded_at=datetime(2024, 10, 10, 10))
    add_result(store, "stu_0001", "mathematics", "classwork", 2, recorded_at=datetime(2024, 10, 15, 10))
    add_merit(store, "stu_0001", datetime(2024, 10, 8), 5)
    add_merit(store, "stu_0001", datetime(2024, 10, 13, 23, 59, 59), -2)  # 주 마지막 순간 포함


def test_weekly_report_filters_to_the_week(store, school):
    _seed_week(store)

    report = generate_weekly_report_card(
        store, "stu_0001", WEEK_START, WEEK_END, TERM, SESSION, "admin_1", teacher_observation="Attentive"
    )

    assert report.attendance.total_days == 3
    assert report.attendance.present == 2
    assert report.attendance.absent == 1
    assert report.attendance.percentage == pytest.approx(66.666, rel=1e-3)
    assert [d.status for d in report.attendance.daily_records] == ["present", "present", "absent"]

    lines = {a.subject_id: a for a in report.academics}
    assert lines["mathematics"].classwork_scores == [8, 6]
    assert lines["mathematics"].classwork_average == 7
    assert lines["english"].homework_count == 1
    assert report.overall_classwork_average == 3.5
    assert report.overall_homework_average == 4.5
    assert report.total_classwork_count == 2
    assert report.total_homework_count == 1

    assert report.behavior.total_merits == 5
    assert report.behavior.total_demerits == 2
    assert report.behavior.net_points == 3
    assert len(report.behavior.merit_records) == 2

    assert report.strengths == ["Positive behavior and good conduct"]
    assert report.areas_for_improvement == [
        "Improve attendance consistency",
        "Focus on improving classwork scores",
        "Improve homework quality and understanding",
        "Submit homework more regularly",
    ]
    assert report.week_number == 6
    assert report.total_subjects == 3
    assert report.id == weekly_report_id("stu_0001", WEEK_START, WEEK_END)

    loaded = get_weekly_report_card(store, "stu_0001", WEEK_START, WEEK_END)
    assert loaded.teacher_observation == "Attentive"
    assert loaded.attendance.total_days == 3


def test_weekly_report_with_empty_week_is_not_an_error(store, school):
    report = generate_weekly_report_card(store, "stu_0002", WEEK_START, WEEK_END, TERM, SESSION, "admin_1")

    assert report.attendance.percentage == 0
    assert report.attendance.total_days == 0
    assert report.academics == []
    assert "Active participation in classwork activities" not in report.strengths
    assert "Consistent homework submission" not in report.strengths


def test_weekly_report_rejects_inverted_bounds(store, school):
    with pytest.raises(ValidationError):
        generate_weekly_report_card(store, "stu_0001", WEEK_END, WEEK_START, TERM, SESSION, "admin_1")


def test_weekly_report_week_across_new_year_is_first_week_of_second_term(store, school):
    week_start = datetime(2024, 12, 30)
    week_end = datetime(2025, 1, 5, 23, 59, 59, 999000)

    report = generate_weekly_report_card(
        store, "stu_0001", week_start, week_end, "Second Term", SESSION, "admin_1"
    )

    assert report.week_number == 1


def test_weekly_report_shows_trade_subject_name(store, school):
    add_student(store, "stu_0003", "Chi", "Eze", academic_track="science", trade_subject="basic_science")

    report = generate_weekly_report_card(store, "stu_0003", WEEK_START, WEEK_END, TERM, SESSION, "admin_1")

    assert report.academic_track == "science"
    assert report.trade_subject == "Basic Science"


def test_assess_week_strength_branches():
    strengths, improvements = assess_week(
        attendance_percentage=100,
        classwork_average=8,
        classwork_count=4,
        homework_average=9,
        homework_count=4,
        subject_count=2,
        net_points=0,
    )

    assert strengths == [
        "Excellent attendance record",
        "Strong academic performance in classwork",
        "Active participation in classwork activities",
        "Excellent homework completion and performance",
        "Consistent homework submission",
    ]
    assert improvements == []


def test_assess_week_thresholds_are_configurable():
    strict = WeeklyThresholds(attendance_strength=101, attendance_weak=99)

    strengths, improvements = assess_week(100, 0, 0, 0, 0, 0, 0, strict)

    assert "Excellent attendance record" not in strengths
    assert "Improve attendance consistency" not in improvements


def test_bulk_weekly_reports(store, school):
    _seed_week(store)

    result = generate_bulk_weekly_reports(store, "jss_1a", WEEK_START, WEEK_END, TERM, SESSION, "admin_1")

    assert (result.success, result.failed, result.errors) == (2, 0, [])


# ==========================================================
# [조회 / 발송]
# ==========================================================
def test_retrieve_missing_or_unknown_student_returns_none(store, school):
    assert get_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1") is None
    assert get_term_report_card(store, "ghost", TERM, SESSION) is None
    assert list_student_report_cards(store, "ghost") == []


def test_list_and_mark_sent(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 15)
    add_result(store, "stu_0001", "mathematics", "exam", 40)
    ca = generate_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1", "admin_1")
    generate_end_of_term_report_card(store, "stu_0001", TERM, SESSION, "admin_1")

    summaries = list_student_report_cards(store, "stu_0001")
    assert {s.kind for s in summaries} == {"ca", "term"}
    assert [s.kind for s in list_student_report_cards(store, "stu_0001", "ca")] == ["ca"]

    sent = mark_report_sent(store, "ca", ca.id)
    assert sent.sent_to_parent is True
    assert get_ca_report_card(store, "stu_0001", TERM, SESSION, "ca1").sent_at is not None

    with pytest.raises(NotFoundError):
        mark_report_sent(store, "term", ca.id)
    with pytest.raises(ValidationError):
        list_student_report_cards(store, "stu_0001", "monthly")
