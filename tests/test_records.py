from datetime import datetime

from services.records import (
    get_admission_number,
    get_results_for_students,
    get_student_attendance,
    get_student_merits,
    get_students_by_class,
    get_subject_names,
    resolve_student_id,
)
from seed import SESSION, TERM, add_attendance, add_merit, add_result


def test_resolve_by_id_or_admission_number(store, school):
    assert resolve_student_id(store, "stu_0001") == "stu_0001"
    assert resolve_student_id(store, "STU20240001") == "stu_0001"
    assert get_admission_number(store, "stu_0002") == "STU20240002"


def test_unresolved_student_fails_open(store, school, caplog):
    assert resolve_student_id(store, "ghost") is None
    assert get_student_attendance(store, "ghost", TERM, SESSION) == []
    assert get_student_merits(store, "ghost", TERM, SESSION) == []
    assert "Student not found: ghost" in caplog.text


def test_collectors_accept_admission_number_and_sort_newest_first(store, school):
    add_attendance(store, "stu_0001", datetime(2024, 10, 1), "present")
    add_attendance(store, "stu_0001", datetime(2024, 10, 3), "late")
    add_merit(store, "stu_0001", datetime(2024, 10, 2), 5)
    add_attendance(store, "stu_0001", datetime(2024, 10, 2), "absent", term="Second Term")

    attendance = get_student_attendance(store, "STU20240001", TERM, SESSION)
    assert [a.status for a in attendance] == ["late", "present"]
    assert len(get_student_merits(store, "STU20240001", TERM, SESSION)) == 1


def test_students_by_class_skips_inactive(store, school):
    store.update("students", "stu_0002", {"is_active": False})

    assert [s.id for s in get_students_by_class(store, "jss_1a")] == ["stu_0001"]


def test_results_for_students_grouped_by_student(store, school):
    add_result(store, "stu_0001", "mathematics", "ca1", 15)
    add_result(store, "stu_0002", "mathematics", "ca1", 11)
    add_result(store, "stu_0002", "english", "ca1", 13)

    grouped = get_results_for_students(store, ["stu_0001", "stu_0002", "stu_0099"], TERM, SESSION)

    assert len(grouped["stu_0001"]) == 1
    assert len(grouped["stu_0002"]) == 2
    assert grouped["stu_0099"] == []


def test_subject_names_fall_back_to_humanized_id(store, school):
    names = get_subject_names(store, ["mathematics", "further_maths"])

    assert names == {"mathematics": "Mathematics", "further_maths": "Further Maths"}
