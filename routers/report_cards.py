from datetime import date, datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends

from dependencies.store import get_store, term_and_session
from schemas.report_cards import (
    BulkCARequest,
    BulkTermRequest,
    BulkWeeklyRequest,
    CAReportRequest,
    TermReportRequest,
    WeeklyReportRequest,
)
from services import report_cards
from services.academic_calendar import week_date_range
from services.document_store import DocumentStore
from services.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/report-cards", tags=["Report Cards"])


def _week_bounds(week_start: Optional[datetime], week_end: Optional[datetime], week_of: Optional[date]):
    if week_start is not None and week_end is not None:
        return week_start, week_end
    if week_of is not None:
        return week_date_range(week_of)
    raise ValidationError("Provide week_start and week_end, or week_of")


def _found(report, what: str):
    if report is None:
        raise NotFoundError(f"{what} not found")
    return report


# ==========================================================
# [1단계] 단일 학생 성적표 생성
# ==========================================================

# ✅ [CREATE] CA 성적표 (ca1 / ca2)
@router.post("/ca")
def create_ca_report(body: CAReportRequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    report = report_cards.generate_ca_report_card(
        store,
        body.student_id,
        term,
        session,
        body.assessment_type,
        body.generated_by,
        teacher_comment=body.teacher_comment,
        principal_comment=body.principal_comment,
    )
    return {"success": True, "data": report, "message": f"CA report {report.id} generated"}


# ✅ [CREATE] 학기말 성적표
@router.post("/term")
def create_term_report(body: TermReportRequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    report = report_cards.generate_end_of_term_report_card(
        store,
        body.student_id,
        term,
        session,
        body.generated_by,
        teacher_comment=body.teacher_comment,
        principal_comment=body.principal_comment,
        next_term_begins=body.next_term_begins,
    )
    return {"success": True, "data": report, "message": f"Term report {report.id} generated"}


# ✅ [CREATE] 주간 성적표 (week_start/week_end 또는 week_of)
@router.post("/weekly")
def create_weekly_report(body: WeeklyReportRequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    week_start, week_end = _week_bounds(body.week_start, body.week_end, body.week_of)
    report = report_cards.generate_weekly_report_card(
        store,
        body.student_id,
        week_start,
        week_end,
        term,
        session,
        body.generated_by,
        teacher_observation=body.teacher_observation,
    )
    return {"success": True, "data": report, "message": f"Weekly report {report.id} generated"}


# ==========================================================
# [2단계] 반 단위 일괄 생성 (학생별 실패는 errors 에 누적)
# ==========================================================

@router.post("/ca/bulk")
def create_bulk_ca_reports(body: BulkCARequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    result = report_cards.generate_bulk_ca_reports(
        store, body.class_id, term, session, body.assessment_type, body.generated_by
    )
    return {"success": True, "data": result, "message": f"{result.success} generated, {result.failed} failed"}


@router.post("/term/bulk")
def create_bulk_term_reports(body: BulkTermRequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    result = report_cards.generate_bulk_term_reports(
        store, body.class_id, term, session, body.generated_by, next_term_begins=body.next_term_begins
    )
    return {"success": True, "data": result, "message": f"{result.success} generated, {result.failed} failed"}


@router.post("/weekly/bulk")
def create_bulk_weekly_reports(body: BulkWeeklyRequest, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    week_start, week_end = _week_bounds(body.week_start, body.week_end, body.week_of)
    result = report_cards.generate_bulk_weekly_reports(
        store, body.class_id, week_start, week_end, term, session, body.generated_by
    )
    return {"success": True, "data": result, "message": f"{result.success} generated, {result.failed} failed"}


# ==========================================================
# [3단계] 조회 / 발송 표시
# ==========================================================

# ✅ [READ] 학생별 성적표 목록 (최신순)
@router.get("/student/{student_id}")
def read_student_reports(
    student_id: str,
    kind: Optional[Literal["ca", "term", "weekly"]] = None,
    store: DocumentStore = Depends(get_store),
):
    summaries = report_cards.list_student_report_cards(store, student_id, kind)
    return {"success": True, "data": summaries, "message": f"{len(summaries)} report cards"}


@router.get("/ca/{student_id}")
def read_ca_report(
    student_id: str,
    assessment_type: Literal["ca1", "ca2"],
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    report = report_cards.get_ca_report_card(store, student_id, term, session, assessment_type)
    return {"success": True, "data": _found(report, "CA report"), "message": "CA report loaded"}


@router.get("/term/{student_id}")
def read_term_report(
    student_id: str,
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    report = report_cards.get_term_report_card(store, student_id, term, session)
    return {"success": True, "data": _found(report, "Term report"), "message": "Term report loaded"}


@router.get("/weekly/{student_id}")
def read_weekly_report(
    student_id: str,
    week_start: Optional[datetime] = None,
    week_end: Optional[datetime] = None,
    week_of: Optional[date] = None,
    store: DocumentStore = Depends(get_store),
):
    week_start, week_end = _week_bounds(week_start, week_end, week_of)
    report = report_cards.get_weekly_report_card(store, student_id, week_start, week_end)
    return {"success": True, "data": _found(report, "Weekly report"), "message": "Weekly report loaded"}


# ✅ [UPDATE] 학부모 발송 완료 표시
@router.put("/{kind}/{report_id}/sent")
def mark_sent(
    kind: Literal["ca", "term", "weekly"],
    report_id: str,
    store: DocumentStore = Depends(get_store),
):
    summary = report_cards.mark_report_sent(store, kind, report_id)
    return {"success": True, "data": summary, "message": "Report marked as sent"}
