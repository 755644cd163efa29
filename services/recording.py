"""
services/recording.py

- 원천 기록 쓰기: 출결 / 상벌점 / 원점수 + 학생 등록·반 이동·과목 변경·비활성화
- 원천 기록은 append-only (수정/삭제 API 없음)
- 학생 식별자는 내부 ID 또는 입학 번호 모두 허용, 찾지 못하면 NotFoundError
"""

import logging
from typing import List, Optional

from models.students import Student
from schemas.attendance import AttendanceCreate
from schemas.merits import MeritCreate
from schemas.results import ResultCreate
from schemas.students import StudentCreate, StudentSubjectsUpdate
from services.academic_calendar import sanitize_session, school_today, to_naive_utc, utcnow
from services.document_store import DocumentStore
from services.errors import NotFoundError, ValidationError
from services.grading import ASSESSMENT_TYPES, merit_level
from services.records import get_student

logger = logging.getLogger(__name__)

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")

# 평가 유형별 기본 만점
DEFAULT_MAX_SCORES = {
    "classwork": 10,
    "homework": 10,
    "ca1": 20,
    "ca2": 20,
    "exam": 60,
}


def _require_student(store: DocumentStore, id_or_admission_number: str) -> Student:
    student = get_student(store, id_or_admission_number)
    if student is None:
        raise NotFoundError(f"Student not found: {id_or_admission_number}")
    return student


def _require_class(store: DocumentStore, class_id: str):
    school_class = store.get("classes", class_id)
    if school_class is None:
        raise NotFoundError(f"Class not found: {class_id}")
    return school_class


# ==========================================================
# [출결]
# ==========================================================
def mark_attendance(store: DocumentStore, data: AttendanceCreate, term: str, session: str):
    if data.status not in ATTENDANCE_STATUSES:
        raise ValidationError(f"Invalid attendance status: {data.status!r}")

    student = _require_student(store, data.student_id)
    record = store.create("attendance", {
        "student_id": student.id,
        "class_id": student.class_id,
        "date": to_naive_utc(data.date),
        "status": data.status,
        "term": term,
        "session": session,
        "marked_by": data.marked_by,
        "reason": data.reason,
    })
    logger.info(f"Attendance marked: {student.id} {data.status} {record.date:%Y-%m-%d}")
    return record


# ==========================================================
# [상벌점] 기록 + 학기 요약 갱신 (한 트랜잭션)
# ==========================================================
def merit_summary_id(student_id: str, term: str, session: str) -> str:
    return f"{student_id}_{term}_{sanitize_session(session)}"


def award_merit(store: DocumentStore, data: MeritCreate, term: str, session: str):
    if data.points == 0:
        raise ValidationError("Merit points must be non-zero")

    student = _require_student(store, data.student_id)
    summary_id = merit_summary_id(student.id, term, session)

    with store.batch():
        merit = store.create("merits", {
            "student_id": student.id,
            "class_id": student.class_id,
            "teacher_id": data.teacher_id,
            "date": to_naive_utc(data.date) if data.date else utcnow(),
            "points": data.points,
            "category": data.category,
            "reason": data.reason,
            "term": term,
            "session": session,
        })

        previous = store.get("meritSummaries", summary_id)
        total = max(0, (previous.total if previous else 0) + data.points)
        store.set("meritSummaries", summary_id, {
            "student_id": student.id,
            "term": term,
            "session": session,
            "total": total,
            "level": merit_level(total),
            "last_updated": utcnow(),
        })

    logger.info(f"Merit awarded: {student.id} {data.points:+d} (summary total={total})")
    return merit


def get_merit_summary(store: DocumentStore, id_or_admission_number: str, term: str, session: str):
    student = get_student(store, id_or_admission_number)
    if student is None:
        logger.warning(f"Student not found: {id_or_admission_number}")
        return None
    return store.get("meritSummaries", merit_summary_id(student.id, term, session))


# ==========================================================
# [원점수]
# ==========================================================
def record_result(store: DocumentStore, data: ResultCreate, term: str, session: str):
    if data.assessment_type not in ASSESSMENT_TYPES:
        raise ValidationError(f"Invalid assessment type: {data.assessment_type!r}")

    max_score = data.max_score if data.max_score is not None else DEFAULT_MAX_SCORES[data.assessment_type]
    if max_score <= 0:
        raise ValidationError(f"max_score must be positive, got {max_score}")
    if not 0 <= data.score <= max_score:
        raise ValidationError(f"Score {data.score} is outside 0..{max_score}")

    student = _require_student(store, data.student_id)
    if store.get("subjects", data.subject_id) is None:
        raise NotFoundError(f"Subject not found: {data.subject_id}")

    record = store.create("results", {
        "student_id": student.id,
        "subject_id": data.subject_id,
        "class_id": student.class_id,
        "term": term,
        "session": session,
        "assessment_type": data.assessment_type,
        "score": data.score,
        "max_score": max_score,
        "recorded_at": to_naive_utc(data.recorded_at) if data.recorded_at else utcnow(),
        "teacher_id": data.teacher_id,
    })
    logger.info(f"Result recorded: {student.id} {data.subject_id} {data.assessment_type}={data.score}/{max_score}")
    return record


# ==========================================================
# [학생] 등록 / 반 이동 / 과목 변경 / 비활성화
# ==========================================================
def generate_admission_number(store: DocumentStore, year: Optional[int] = None) -> str:
    """STU<연도><4자리 일련번호>, 이미 쓰인 번호면 다음 번호로"""
    year = year or school_today().year
    sequence = len(store.query("students")) + 1
    while True:
        candidate = f"STU{year}{sequence:04d}"
        if not store.query("students", where={"admission_number": candidate}, limit=1):
            return candidate
        sequence += 1


def create_student(store: DocumentStore, data: StudentCreate) -> Student:
    school_class = _require_class(store, data.class_id)

    if data.id and store.get("students", data.id) is not None:
        raise ValidationError(f"Student id already exists: {data.id}")

    admission_number = data.admission_number or generate_admission_number(store)
    if store.query("students", where={"admission_number": admission_number}, limit=1):
        raise ValidationError(f"Admission number already exists: {admission_number}")

    student = store.create("students", {
        **data.model_dump(exclude={"admission_number"}),
        "admission_number": admission_number,
        "class_name": school_class.name,
        "is_active": True,
    })
    logger.info(f"Student created: {student.id} ({admission_number}) in {school_class.id}")
    return student


def transfer_student(store: DocumentStore, id_or_admission_number: str, new_class_id: str) -> Student:
    student = _require_student(store, id_or_admission_number)
    new_class = _require_class(store, new_class_id)

    old_class_id = student.class_id
    student = store.update("students", student.id, {
        "class_id": new_class.id,
        "class_name": new_class.name,
    })
    logger.info(f"Student transferred: {student.id} {old_class_id} → {new_class.id}")
    return student


def update_student_subjects(
    store: DocumentStore,
    id_or_admission_number: str,
    data: StudentSubjectsUpdate,
) -> Student:
    student = _require_student(store, id_or_admission_number)

    updates = {"subjects": list(dict.fromkeys(data.subjects))}
    # 요청에 명시된 필드만 변경 (생략하면 기존 계열/직업 과목 유지)
    for name in ("academic_track", "trade_subject"):
        if name in data.model_fields_set:
            updates[name] = getattr(data, name)

    student = store.update("students", student.id, updates)
    logger.info(f"Student subjects updated: {student.id} ({len(updates['subjects'])} subjects)")
    return student


def deactivate_student(store: DocumentStore, id_or_admission_number: str) -> Student:
    student = _require_student(store, id_or_admission_number)
    student = store.update("students", student.id, {"is_active": False})
    logger.info(f"Student deactivated: {student.id}")
    return student


def list_class_students(store: DocumentStore, class_id: str, include_inactive: bool = False) -> List[Student]:
    where = {"class_id": class_id}
    if not include_inactive:
        where["is_active"] = True
    return store.query("students", where=where, order_by="last_name")
