"""
services/report_cards.py

- 성적표 생성기 3종 (CA / 학기말 / 주간) + 반 단위 일괄 생성 + 조회
- 공통 흐름:
  1) 학생 확인 (없으면 NotFoundError)
  2) 원점수/출결/상벌점 조회
  3) 과목별 그룹핑 → 최고 점수 → 합계/평균/등급
  4) 반 석차 계산 (평균 내림차순, 동점이면 학생 ID 오름차순)
  5) 결정적 ID 로 스냅샷 저장 (같은 ID면 덮어씀) 후 반환
- 2~4 단계에서 예외가 나면 아무것도 저장하지 않음 (저장은 마지막 한 번)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from models.students import Student
from schemas.report_cards import (
    BulkResult,
    CAReportCard,
    CASubjectLine,
    DailyAttendance,
    EndOfTermReportCard,
    MeritEntry,
    ReportCardSummary,
    TermSubjectLine,
    WeeklyAttendance,
    WeeklyBehavior,
    WeeklyReportCard,
    WeeklySubjectLine,
)
from services.academic_calendar import to_millis, to_naive_utc, utcnow, week_number_in_term
from services.document_store import DocumentStore
from services.errors import NoDataError, NotFoundError, SchoolError, ValidationError
from services.grading import (
    CA_TYPES,
    TERM_TYPES,
    NormalizedResult,
    average,
    calculate_grade,
    grade_remark,
    merit_level,
    normalize_result,
    reduce_subject_scores,
)
from services.records import (
    get_results_for_students,
    get_student,
    get_student_attendance,
    get_student_merits,
    get_student_results_raw,
    get_students_by_class,
    get_subject_name,
    get_subject_names,
    resolve_student_id,
)

logger = logging.getLogger(__name__)

COLLECTION_BY_KIND = {
    "ca": "caReportCards",
    "term": "termReportCards",
    "weekly": "weeklyReportCards",
}


# ==========================================================
# [ID] 결정적 성적표 ID
# ==========================================================
def ca_report_id(student_id: str, term: str, session: str, assessment_type: str) -> str:
    return f"{assessment_type}_{student_id}_{term}_{session}".replace("/", "_")


def term_report_id(student_id: str, term: str, session: str) -> str:
    return f"term_{student_id}_{term}_{session}".replace("/", "_")


def weekly_report_id(student_id: str, week_start: datetime, week_end: datetime) -> str:
    return f"weekly_{student_id}_{to_millis(week_start)}_{to_millis(week_end)}".replace("/", "_")


# ==========================================================
# [공통] 점수 집계 / 석차
# ==========================================================
def _normalize(records) -> List[NormalizedResult]:
    return [normalize_result(r) for r in records]


def ca_subject_scores(results: List[NormalizedResult], assessment_type: str) -> Dict[str, float]:
    reduced = reduce_subject_scores(results, (assessment_type,))
    return {subject_id: scores[assessment_type] for subject_id, scores in reduced.items()}


def term_subject_totals(results: List[NormalizedResult]) -> Dict[str, Dict[str, float]]:
    reduced = reduce_subject_scores(results, TERM_TYPES)
    for scores in reduced.values():
        scores["total"] = scores["ca1"] + scores["ca2"] + scores["exam"]
    return reduced


def rank_position(averages: Dict[str, float], student_id: str) -> int:
    """평균 내림차순 정렬 후 1부터 시작하는 순위 (동점은 학생 ID 오름차순)"""
    ordered = sorted(averages.items(), key=lambda item: (-item[1], item[0]))
    return [sid for sid, _ in ordered].index(student_id) + 1


def _class_averages(
    store: DocumentStore,
    student: Student,
    term: str,
    session: str,
    average_of: Callable[[List[NormalizedResult]], float],
) -> Dict[str, float]:
    classmate_ids = [s.id for s in get_students_by_class(store, student.class_id)]
    if student.id not in classmate_ids:
        classmate_ids.append(student.id)

    grouped = get_results_for_students(store, classmate_ids, term, session)
    return {sid: average_of(_normalize(records)) for sid, records in grouped.items()}


def _attendance_counts(records) -> Dict[str, int]:
    counts = {"present": 0, "absent": 0, "late": 0, "excused": 0}
    for record in records:
        if record.status in counts:
            counts[record.status] += 1
    return counts


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0


def _persist(store: DocumentStore, kind: str, report) -> None:
    store.set(COLLECTION_BY_KIND[kind], report.id, {
        "student_id": report.student_id,
        "term": report.term,
        "session": report.session,
        "payload": report.model_dump(mode="json", exclude_none=True),
        "generated_at": report.generated_at,
        "generated_by": report.generated_by,
        "sent_to_parent": False,
        "sent_at": None,
    })


def _require_student(store: DocumentStore, student_id: str) -> Student:
    student = get_student(store, student_id)
    if student is None:
        raise NotFoundError(f"Student not found: {student_id}")
    return student


# ==========================================================
# [1] CA 성적표
# ==========================================================
def generate_ca_report_card(
    store: DocumentStore,
    student_id: str,
    term: str,
    session: str,
    assessment_type: str,
    generated_by: str,
    teacher_comment: Optional[str] = None,
    principal_comment: Optional[str] = None,
) -> CAReportCard:
    if assessment_type not in CA_TYPES:
        raise ValidationError(f"Invalid CA assessment type: {assessment_type!r}")

    logger.info(f"CA report generation start: student={student_id} term={term} session={session} type={assessment_type}")

    student = _require_student(store, student_id)
    results = _normalize(get_student_results_raw(store, student.id, term, session))
    if not results:
        raise NoDataError("No results found for this student in this term/session")

    subject_scores = ca_subject_scores(results, assessment_type)
    max_score = settings.CA_MAX_SCORE
    names = get_subject_names(store, subject_scores)
    subjects = []
    for subject_id, score in subject_scores.items():
        grade = calculate_grade(score, max_score)
        subjects.append(CASubjectLine(
            subject_id=subject_id,
            subject_name=names[subject_id],
            score=score,
            max_score=max_score,
            grade=grade,
            remark=grade_remark(grade),
        ))

    total_score = sum(s.score for s in subjects)
    average_score = total_score / len(subjects)

    averages = _class_averages(
        store, student, term, session,
        lambda records: average(list(ca_subject_scores(records, assessment_type).values())),
    )

    attendance = get_student_attendance(store, student.id, term, session)
    present = _attendance_counts(attendance)["present"]
    merits = get_student_merits(store, student.id, term, session)

    report = CAReportCard(
        id=ca_report_id(student.id, term, session, assessment_type),
        student_id=student.id,
        student_name=student.full_name,
        admission_number=student.admission_number,
        class_id=student.class_id,
        class_name=student.class_name,
        term=term,
        session=session,
        assessment_type=assessment_type,
        subjects=subjects,
        total_score=total_score,
        average_score=average_score,
        position=rank_position(averages, student.id),
        total_students=len(averages),
        grade=calculate_grade(average_score, max_score),
        attendance_percentage=_percentage(present, len(attendance)),
        total_merits=sum(m.points for m in merits),
        teacher_comment=teacher_comment,
        principal_comment=principal_comment,
        generated_at=utcnow(),
        generated_by=generated_by,
    )

    _persist(store, "ca", report)
    logger.info(f"CA report saved: {report.id} (avg={average_score:.1f}, position={report.position}/{report.total_students})")
    return report


# ==========================================================
# [2] 학기말 성적표
# ==========================================================
def generate_end_of_term_report_card(
    store: DocumentStore,
    student_id: str,
    term: str,
    session: str,
    generated_by: str,
    teacher_comment: Optional[str] = None,
    principal_comment: Optional[str] = None,
    next_term_begins: Optional[date] = None,
) -> EndOfTermReportCard:
    logger.info(f"Term report generation start: student={student_id} term={term} session={session}")

    student = _require_student(store, student_id)
    results = _normalize(get_student_results_raw(store, student.id, term, session))
    if not results:
        raise NoDataError("No results found for this student in this term/session")

    subject_totals = term_subject_totals(results)
    max_score = settings.TERM_MAX_SCORE
    names = get_subject_names(store, subject_totals)
    subjects = []
    for subject_id, scores in subject_totals.items():
        grade = calculate_grade(scores["total"], max_score)
        subjects.append(TermSubjectLine(
            subject_id=subject_id,
            subject_name=names[subject_id],
            ca1=scores["ca1"],
            ca2=scores["ca2"],
            exam=scores["exam"],
            total=scores["total"],
            average=scores["total"],
            grade=grade,
            remark=grade_remark(grade),
        ))

    total_score = sum(s.total for s in subjects)
    average_score = total_score / len(subjects)

    averages = _class_averages(
        store, student, term, session,
        lambda records: average([s["total"] for s in term_subject_totals(records).values()]),
    )

    attendance = get_student_attendance(store, student.id, term, session)
    counts = _attendance_counts(attendance)
    total_merits = sum(m.points for m in get_student_merits(store, student.id, term, session))

    report = EndOfTermReportCard(
        id=term_report_id(student.id, term, session),
        student_id=student.id,
        student_name=student.full_name,
        admission_number=student.admission_number,
        class_id=student.class_id,
        class_name=student.class_name,
        term=term,
        session=session,
        subjects=subjects,
        total_score=total_score,
        average_score=average_score,
        position=rank_position(averages, student.id),
        total_students=len(averages),
        overall_grade=calculate_grade(average_score, max_score),
        attendance_percentage=_percentage(counts["present"], len(attendance)),
        present_days=counts["present"],
        absent_days=counts["absent"],
        late_days=counts["late"],
        total_school_days=len(attendance),
        total_merits=total_merits,
        merit_level=merit_level(total_merits),
        teacher_comment=teacher_comment,
        principal_comment=principal_comment,
        next_term_begins=next_term_begins,
        promoted=average_score >= settings.PROMOTION_AVERAGE,
        generated_at=utcnow(),
        generated_by=generated_by,
    )

    _persist(store, "term", report)
    logger.info(f"Term report saved: {report.id} (avg={average_score:.1f}, promoted={report.promoted})")
    return report


# ==========================================================
# [3] 주간 성적표
# ==========================================================
@dataclass
class WeeklyThresholds:
    attendance_strength: float = settings.WEEKLY_ATTENDANCE_STRENGTH
    attendance_weak: float = settings.WEEKLY_ATTENDANCE_WEAK
    score_strength: float = settings.WEEKLY_SCORE_STRENGTH
    score_weak: float = settings.WEEKLY_SCORE_WEAK


def assess_week(
    attendance_percentage: float,
    classwork_average: float,
    classwork_count: int,
    homework_average: float,
    homework_count: int,
    subject_count: int,
    net_points: int,
    thresholds: Optional[WeeklyThresholds] = None,
) -> Tuple[List[str], List[str]]:
    """규칙 기반 강점 / 보완점 문구"""
    t = thresholds or WeeklyThresholds()
    strengths: List[str] = []
    improvements: List[str] = []

    if attendance_percentage >= t.attendance_strength:
        strengths.append("Excellent attendance record")
    elif attendance_percentage < t.attendance_weak:
        improvements.append("Improve attendance consistency")

    if classwork_average >= t.score_strength:
        strengths.append("Strong academic performance in classwork")
    elif classwork_average < t.score_weak:
        improvements.append("Focus on improving classwork scores")

    # 과목 기록이 없는 주에는 참여도 문구를 만들지 않음
    if subject_count > 0:
        if classwork_count >= subject_count * 2:
            strengths.append("Active participation in classwork activities")
        elif classwork_count < subject_count:
            improvements.append("Increase participation in classwork activities")

    if homework_average >= t.score_strength:
        strengths.append("Excellent homework completion and performance")
    elif homework_average < t.score_weak and homework_count > 0:
        improvements.append("Improve homework quality and understanding")

    if subject_count > 0:
        if homework_count >= subject_count * 2:
            strengths.append("Consistent homework submission")
        elif homework_count < subject_count:
            improvements.append("Submit homework more regularly")

    if net_points > 0:
        strengths.append("Positive behavior and good conduct")
    elif net_points < 0:
        improvements.append("Work on behavior and classroom conduct")

    return strengths, improvements


def _in_week(value: Optional[datetime], week_start: datetime, week_end: datetime) -> bool:
    return value is not None and week_start <= value <= week_end


def generate_weekly_report_card(
    store: DocumentStore,
    student_id: str,
    week_start: datetime,
    week_end: datetime,
    term: str,
    session: str,
    generated_by: str,
    teacher_observation: Optional[str] = None,
    thresholds: Optional[WeeklyThresholds] = None,
) -> WeeklyReportCard:
    week_start = to_naive_utc(week_start)
    week_end = to_naive_utc(week_end)
    if week_end < week_start:
        raise ValidationError("week_end must not be earlier than week_start")

    logger.info(f"Weekly report generation start: student={student_id} week={week_start:%Y-%m-%d}~{week_end:%Y-%m-%d}")

    student = _require_student(store, student_id)

    # ✅ 출결 (요일 순서)
    week_attendance = sorted(
        (a for a in get_student_attendance(store, student.id, term, session) if _in_week(a.date, week_start, week_end)),
        key=lambda a: a.date,
    )
    counts = _attendance_counts(week_attendance)
    attendance = WeeklyAttendance(
        total_days=len(week_attendance),
        present=counts["present"],
        absent=counts["absent"],
        percentage=_percentage(counts["present"], len(week_attendance)),
        daily_records=[DailyAttendance(date=a.date, status=a.status) for a in week_attendance],
    )

    # ✅ 수업 과제 / 숙제 (과목별)
    classwork: Dict[str, List[float]] = {}
    homework: Dict[str, List[float]] = {}
    for result in _normalize(get_student_results_raw(store, student.id, term, session)):
        if not _in_week(result.recorded_at, week_start, week_end):
            continue
        if "classwork" in result.scores:
            classwork.setdefault(result.subject_id, []).append(result.scores["classwork"])
        if "homework" in result.scores:
            homework.setdefault(result.subject_id, []).append(result.scores["homework"])

    subject_ids = list(dict.fromkeys([*classwork, *homework]))
    names = get_subject_names(store, subject_ids)
    academics = []
    for subject_id in subject_ids:
        cw = classwork.get(subject_id, [])
        hw = homework.get(subject_id, [])
        academics.append(WeeklySubjectLine(
            subject_id=subject_id,
            subject_name=names[subject_id],
            classwork_scores=cw,
            classwork_average=average(cw),
            classwork_count=len(cw),
            homework_scores=hw,
            homework_average=average(hw),
            homework_count=len(hw),
        ))

    overall_classwork_average = average([a.classwork_average for a in academics])
    overall_homework_average = average([a.homework_average for a in academics])
    total_classwork_count = sum(a.classwork_count for a in academics)
    total_homework_count = sum(a.homework_count for a in academics)

    # ✅ 상벌점
    week_merits = [m for m in get_student_merits(store, student.id, term, session) if _in_week(m.date, week_start, week_end)]
    total_merits = sum(m.points for m in week_merits if m.points > 0)
    total_demerits = abs(sum(m.points for m in week_merits if m.points < 0))
    behavior = WeeklyBehavior(
        total_merits=total_merits,
        total_demerits=total_demerits,
        net_points=total_merits - total_demerits,
        merit_records=[
            MeritEntry(date=m.date, category=m.category, points=m.points, reason=m.reason)
            for m in week_merits
        ],
    )

    strengths, improvements = assess_week(
        attendance.percentage,
        overall_classwork_average,
        total_classwork_count,
        overall_homework_average,
        total_homework_count,
        len(academics),
        behavior.net_points,
        thresholds,
    )

    report = WeeklyReportCard(
        id=weekly_report_id(student.id, week_start, week_end),
        student_id=student.id,
        student_name=student.full_name,
        admission_number=student.admission_number,
        class_id=student.class_id,
        class_name=student.class_name,
        term=term,
        session=session,
        week_start=week_start,
        week_end=week_end,
        week_number=week_number_in_term(week_start, term, session),
        attendance=attendance,
        academics=academics,
        overall_classwork_average=overall_classwork_average,
        total_classwork_count=total_classwork_count,
        overall_homework_average=overall_homework_average,
        total_homework_count=total_homework_count,
        behavior=behavior,
        teacher_observation=teacher_observation,
        strengths=strengths,
        areas_for_improvement=improvements,
        academic_track=student.academic_track,
        trade_subject=get_subject_name(store, student.trade_subject) if student.trade_subject else None,
        total_subjects=len(student.subjects or []),
        generated_at=utcnow(),
        generated_by=generated_by,
    )

    _persist(store, "weekly", report)
    logger.info(f"Weekly report saved: {report.id} (attendance={attendance.percentage:.1f}%, net={behavior.net_points})")
    return report


# ==========================================================
# [4] 반 단위 일괄 생성
# ==========================================================
def _run_bulk(store: DocumentStore, class_id: str, label: str, generate: Callable[[str], object]) -> BulkResult:
    result = BulkResult()
    for student in get_students_by_class(store, class_id):
        try:
            generate(student.id)
            result.success += 1
        except (SchoolError, SQLAlchemyError) as e:
            if isinstance(e, SQLAlchemyError):
                store.db.rollback()
            message = e.message if isinstance(e, SchoolError) else str(e)
            logger.warning(f"{label} failed for {student.id}: {message}")
            result.failed += 1
            result.errors.append(f"{student.full_name}: {message}")

    logger.info(f"{label} bulk done: class={class_id} success={result.success} failed={result.failed}")
    return result


def generate_bulk_ca_reports(
    store: DocumentStore,
    class_id: str,
    term: str,
    session: str,
    assessment_type: str,
    generated_by: str,
) -> BulkResult:
    return _run_bulk(
        store, class_id, "CA report",
        lambda sid: generate_ca_report_card(store, sid, term, session, assessment_type, generated_by),
    )


def generate_bulk_term_reports(
    store: DocumentStore,
    class_id: str,
    term: str,
    session: str,
    generated_by: str,
    next_term_begins: Optional[date] = None,
) -> BulkResult:
    return _run_bulk(
        store, class_id, "Term report",
        lambda sid: generate_end_of_term_report_card(
            store, sid, term, session, generated_by, next_term_begins=next_term_begins
        ),
    )


def generate_bulk_weekly_reports(
    store: DocumentStore,
    class_id: str,
    week_start: datetime,
    week_end: datetime,
    term: str,
    session: str,
    generated_by: str,
) -> BulkResult:
    return _run_bulk(
        store, class_id, "Weekly report",
        lambda sid: generate_weekly_report_card(store, sid, week_start, week_end, term, session, generated_by),
    )


# ==========================================================
# [5] 조회 / 발송 표시
# ==========================================================
def _load(store: DocumentStore, kind: str, report_id: str, schema):
    doc = store.get(COLLECTION_BY_KIND[kind], report_id)
    if doc is None:
        return None
    return schema.model_validate({
        **doc.payload,
        "sent_to_parent": doc.sent_to_parent,
        "sent_at": doc.sent_at,
    })


def get_ca_report_card(
    store: DocumentStore, student_id: str, term: str, session: str, assessment_type: str
) -> Optional[CAReportCard]:
    resolved = resolve_student_id(store, student_id)
    if not resolved:
        return None
    return _load(store, "ca", ca_report_id(resolved, term, session, assessment_type), CAReportCard)


def get_term_report_card(
    store: DocumentStore, student_id: str, term: str, session: str
) -> Optional[EndOfTermReportCard]:
    resolved = resolve_student_id(store, student_id)
    if not resolved:
        return None
    return _load(store, "term", term_report_id(resolved, term, session), EndOfTermReportCard)


def get_weekly_report_card(
    store: DocumentStore, student_id: str, week_start: datetime, week_end: datetime
) -> Optional[WeeklyReportCard]:
    resolved = resolve_student_id(store, student_id)
    if not resolved:
        return None
    return _load(store, "weekly", weekly_report_id(resolved, week_start, week_end), WeeklyReportCard)


def list_student_report_cards(
    store: DocumentStore, student_id: str, kind: Optional[str] = None
) -> List[ReportCardSummary]:
    if kind is not None and kind not in COLLECTION_BY_KIND:
        raise ValidationError(f"Invalid report kind: {kind!r}")

    resolved = resolve_student_id(store, student_id)
    if not resolved:
        return []

    kinds = [kind] if kind else list(COLLECTION_BY_KIND)
    docs = []
    for k in kinds:
        docs.extend(store.query(COLLECTION_BY_KIND[k], where={"student_id": resolved}))
    docs.sort(key=lambda d: d.generated_at, reverse=True)
    return [ReportCardSummary.model_validate(d) for d in docs]


def mark_report_sent(store: DocumentStore, kind: str, report_id: str) -> ReportCardSummary:
    if kind not in COLLECTION_BY_KIND:
        raise ValidationError(f"Invalid report kind: {kind!r}")
    doc = store.update(COLLECTION_BY_KIND[kind], report_id, {"sent_to_parent": True, "sent_at": utcnow()})
    return ReportCardSummary.model_validate(doc)
