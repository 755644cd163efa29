"""
services/records.py

- 학생 식별자 해석 + 영역별 기록 조회 (출결 / 상벌점 / 원점수)
- 식별자 해석은 fail-open 정책:
  학생을 찾지 못하면 예외 대신 None / 빈 목록을 반환하고 경고 로그만 남김.
  "학생 없음"을 오류로 다뤄야 하는 곳(성적표 생성)은 호출 측에서 NotFoundError 를 발생시킴.
"""

import logging
from typing import Dict, Iterable, List, Optional

from models.students import Student
from services.document_store import DocumentStore
from services.grading import humanize_subject_id

logger = logging.getLogger(__name__)


# ==========================================================
# [식별자] 내부 ID ↔ 입학 번호
# ==========================================================
def get_student(store: DocumentStore, id_or_admission_number: str) -> Optional[Student]:
    """내부 ID로 먼저 찾고, 없으면 입학 번호로 한 건 검색"""
    if not id_or_admission_number:
        return None

    student = store.get("students", id_or_admission_number)
    if student is not None:
        return student

    matches = store.query(
        "students",
        where={"admission_number": id_or_admission_number},
        limit=1,
    )
    return matches[0] if matches else None


def resolve_student_id(store: DocumentStore, id_or_admission_number: str) -> Optional[str]:
    student = get_student(store, id_or_admission_number)
    if student is None:
        logger.warning(f"Student not found: {id_or_admission_number}")
        return None
    return student.id


def get_admission_number(store: DocumentStore, student_id: str) -> Optional[str]:
    student = store.get("students", student_id)
    return student.admission_number if student else None


def get_students_by_class(store: DocumentStore, class_id: str) -> List[Student]:
    """재학 중인 학생만, ID 순서로 반환"""
    return store.query(
        "students",
        where={"class_id": class_id, "is_active": True},
        order_by="id",
    )


# ==========================================================
# [조회] 학생/학기/학년도 단위 기록
# ==========================================================
def get_student_attendance(store: DocumentStore, id_or_admission_number: str, term: str, session: str) -> list:
    student_id = resolve_student_id(store, id_or_admission_number)
    if not student_id:
        return []
    return store.query(
        "attendance",
        where={"student_id": student_id, "term": term, "session": session},
        order_by="date",
        descending=True,
    )


def get_student_merits(store: DocumentStore, id_or_admission_number: str, term: str, session: str) -> list:
    student_id = resolve_student_id(store, id_or_admission_number)
    if not student_id:
        return []
    return store.query(
        "merits",
        where={"student_id": student_id, "term": term, "session": session},
        order_by="date",
        descending=True,
    )


def get_student_results_raw(store: DocumentStore, id_or_admission_number: str, term: str, session: str) -> list:
    student_id = resolve_student_id(store, id_or_admission_number)
    if not student_id:
        return []
    return store.query(
        "results",
        where={"student_id": student_id, "term": term, "session": session},
        order_by="recorded_at",
    )


def get_results_for_students(
    store: DocumentStore,
    student_ids: Iterable[str],
    term: str,
    session: str,
) -> Dict[str, list]:
    """반 전체 석차 계산용: 여러 학생의 원점수를 한 번에 조회해서 학생별로 묶음"""
    student_ids = list(student_ids)
    grouped: Dict[str, list] = {sid: [] for sid in student_ids}
    if not student_ids:
        return grouped

    records = store.query(
        "results",
        where={"term": term, "session": session},
        in_=("student_id", student_ids),
        order_by="recorded_at",
    )
    for record in records:
        grouped[record.student_id].append(record)
    return grouped


# ==========================================================
# [과목] 표시 이름
# ==========================================================
def get_subject_names(store: DocumentStore, subject_ids: Iterable[str]) -> Dict[str, str]:
    subject_ids = list(dict.fromkeys(subject_ids))
    if not subject_ids:
        return {}

    found = {s.id: s.name for s in store.query("subjects", in_=("id", subject_ids))}
    names = {}
    for subject_id in subject_ids:
        if subject_id in found:
            names[subject_id] = found[subject_id]
        else:
            logger.warning(f"Subject not found: {subject_id}")
            names[subject_id] = humanize_subject_id(subject_id)
    return names


def get_subject_name(store: DocumentStore, subject_id: str) -> str:
    return get_subject_names(store, [subject_id])[subject_id]
