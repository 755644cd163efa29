from datetime import datetime

import pytest

from schemas.attendance import AttendanceCreate
from schemas.merits import MeritCreate
from schemas.results import ResultCreate
from schemas.students import StudentCreate, StudentSubjectsUpdate
from seed import SESSION, TERM
from services.errors import NotFoundError, ValidationError
from services.recording import (
    award_merit,
    create_student,
    deactivate_student,
    generate_admission_number,
    get_merit_summary,
    mark_attendance,
    record_result,
    transfer_student,
    update_student_subjects,
)


def test_mark_attendance_resolves_admission_number(store, school):
    record = mark_attendance(
        store,
        AttendanceCreate(student_id="STU20240001", date=datetime(2024, 10, 7, 8), status="late", reason="Traffic"),
        TERM,
        SESSION,
    )

    assert record.student_id == "stu_0001"
    assert record.class_id == "jss_1a"
    assert record.reason == "Traffic"


def test_mark_attendance_unknown_student(store, school):
    with pytest.raises(NotFoundError):
        mark_attendance(store, AttendanceCreate(student_id="ghost", date=datetime(2024, 10, 7), status="present"), TERM, SESSION)


def test_merit_summary_never_goes_negative(store, school):
    totals = []
    for points in (10, -25, 40, 30, -5):
        award_merit(store, MeritCreate(student_id="stu_0001", points=points, reason="test"), TERM, SESSION)
        totals.append(get_merit_summary(store, "stu_0001", TERM, SESSION).total)

    assert totals == [10, 0, 40, 70, 65]
    summary = get_merit_summary(store, "STU20240001", TERM, SESSION)
    assert summary.level == "silver"
    assert summary.id == "stu_0001_First Term_2024_2025"
    assert len(store.query("merits")) == 5


def test_award_merit_validation(store, school):
    with pytest.raises(ValidationError):
        award_merit(store, MeritCreate(student_id="stu_0001", points=0), TERM, SESSION)
    with pytest.raises(NotFoundError):
        award_merit(store, MeritCreate(student_id="ghost", points=5), TERM, SESSION)

    assert store.query("merits") == []
    assert get_merit_summary(store, "ghost", TERM, SESSION) is None


def test_record_result_applies_default_max_and_bounds(store, school):
    record = record_result(
        store,
        ResultCreate(student_id="stu_0001", subject_id="mathematics", assessment_type="exam", score=55),
        TERM,
        SESSION,
    )
    assert record.max_score == 60
    assert record.ca1 is None

    with pytest.raises(ValidationError):
        record_result(store, ResultCreate(student_id="stu_0001", subject_id="mathematics", assessment_type="ca1", score=21), TERM, SESSION)
    with pytest.raises(ValidationError):
        record_result(store, ResultCreate(student_id="stu_0001", subject_id="mathematics", assessment_type="classwork", score=-1), TERM, SESSION)

    assert len(store.query("results")) == 1


def test_record_result_rejects_unknown_subject(store, school):
    with pytest.raises(NotFoundError):
        record_result(
            store,
            ResultCreate(student_id="stu_0001", subject_id="latin", assessment_type="ca1", score=10),
            TERM,
            SESSION,
        )

    assert store.query("results") == []


def test_create_student_generates_admission_number(store, school):
    expected = generate_admission_number(store, year=2025)
    student = create_student(store, StudentCreate(first_name="Ngozi", last_name="Obi", class_id="jss_1b"))

    assert student.admission_number.startswith("STU")
    assert student.admission_number.endswith("0003")
    assert expected == "STU20250003"
    assert student.class_name == "JSS 1B"
    assert student.is_active is True


def test_create_student_rejects_duplicates_and_unknown_class(store, school):
    with pytest.raises(ValidationError):
        create_student(store, StudentCreate(first_name="A", last_name="B", class_id="jss_1a", admission_number="STU20240001"))
    with pytest.raises(NotFoundError):
        create_student(store, StudentCreate(first_name="A", last_name="B", class_id="ss_3z"))


def test_generate_admission_number_skips_taken_numbers(store, school):
    store.update("students", "stu_0002", {"admission_number": "STU20250003"})

    assert generate_admission_number(store, year=2025) == "STU20250004"


def test_transfer_and_deactivate(store, school):
    moved = transfer_student(store, "stu_0002", "jss_1b")
    assert (moved.class_id, moved.class_name) == ("jss_1b", "JSS 1B")

    gone = deactivate_student(store, "STU20240002")
    assert gone.is_active is False
    assert store.get("students", "stu_0002") is not None

    with pytest.raises(NotFoundError):
        transfer_student(store, "stu_0001", "ss_3z")


def test_update_subjects_keeps_unspecified_fields(store, school):
    store.update("students", "stu_0001", {"academic_track": "science"})

    updated = update_student_subjects(
        store, "stu_0001", StudentSubjectsUpdate(subjects=["mathematics", "mathematics", "english"])
    )
    assert updated.subjects == ["mathematics", "english"]
    assert updated.academic_track == "science"

    cleared = update_student_subjects(
        store, "stu_0001", StudentSubjectsUpdate(subjects=["english"], academic_track=None)
    )
    assert cleared.academic_track is None
