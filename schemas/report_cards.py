"""
schemas/report_cards.py

- 성적표 스냅샷 스키마 (CA / 학기말 / 주간) + 생성 요청 + 일괄 생성 결과
- 저장 시 model_dump(mode="json", exclude_none=True) 결과가 report_cards.payload 로 들어감
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =========================================================
# 1) CA 성적표
# =========================================================

class CASubjectLine(BaseModel):
    subject_id: str
    subject_name: str
    score: float                 # 해당 CA 최고 점수
    max_score: float             # 만점 (기본 20)
    grade: str
    remark: str


class CAReportCard(BaseModel):
    id: str
    student_id: str
    student_name: str
    admission_number: str
    class_id: str
    class_name: Optional[str] = None
    term: str
    session: str
    assessment_type: Literal["ca1", "ca2"]
    subjects: List[CASubjectLine]
    total_score: float
    average_score: float
    position: int                # 1부터 시작하는 반 석차
    total_students: int
    grade: str
    attendance_percentage: float
    total_merits: int
    teacher_comment: Optional[str] = None
    principal_comment: Optional[str] = None
    generated_at: datetime
    generated_by: str
    sent_to_parent: bool = False
    sent_at: Optional[datetime] = None


# =========================================================
# 2) 학기말 성적표
# =========================================================

class TermSubjectLine(BaseModel):
    subject_id: str
    subject_name: str
    ca1: float
    ca2: float
    exam: float
    total: float                 # ca1 + ca2 + exam (100점 만점)
    average: float
    grade: str
    remark: str


class EndOfTermReportCard(BaseModel):
    id: str
    student_id: str
    student_name: str
    admission_number: str
    class_id: str
    class_name: Optional[str] = None
    term: str
    session: str
    subjects: List[TermSubjectLine]
    total_score: float
    average_score: float
    position: int
    total_students: int
    overall_grade: str
    attendance_percentage: float
    present_days: int
    absent_days: int
    late_days: int
    total_school_days: int
    total_merits: int
    merit_level: str
    teacher_comment: Optional[str] = None
    principal_comment: Optional[str] = None
    next_term_begins: Optional[date] = None
    promoted: bool
    generated_at: datetime
    generated_by: str
    sent_to_parent: bool = False
    sent_at: Optional[datetime] = None


# =========================================================
# 3) 주간 성적표
# =========================================================

class DailyAttendance(BaseModel):
    date: datetime
    status: str


class WeeklyAttendance(BaseModel):
    total_days: int = 0
    present: int = 0
    absent: int = 0
    percentage: float = 0
    daily_records: List[DailyAttendance] = Field(default_factory=list)


class WeeklySubjectLine(BaseModel):
    subject_id: str
    subject_name: str
    classwork_scores: List[float] = Field(default_factory=list)
    classwork_average: float = 0
    classwork_count: int = 0
    homework_scores: List[float] = Field(default_factory=list)
    homework_average: float = 0
    homework_count: int = 0
    teacher_comment: Optional[str] = None


class MeritEntry(BaseModel):
    date: datetime
    category: Optional[str] = None
    points: int
    reason: Optional[str] = None


class WeeklyBehavior(BaseModel):
    total_merits: int = 0
    total_demerits: int = 0
    net_points: int = 0
    merit_records: List[MeritEntry] = Field(default_factory=list)


class WeeklyReportCard(BaseModel):
    id: str
    student_id: str
    student_name: str
    admission_number: str
    class_id: str
    class_name: Optional[str] = None
    term: str
    session: str
    week_start: datetime
    week_end: datetime
    week_number: int
    attendance: WeeklyAttendance
    academics: List[WeeklySubjectLine]
    overall_classwork_average: float
    total_classwork_count: int
    overall_homework_average: float
    total_homework_count: int
    behavior: WeeklyBehavior
    teacher_observation: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    academic_track: Optional[str] = None
    trade_subject: Optional[str] = None
    total_subjects: Optional[int] = None
    generated_at: datetime
    generated_by: str
    sent_to_parent: bool = False
    sent_at: Optional[datetime] = None


# =========================================================
# 4) 일괄 생성 결과 / 목록 요약
# =========================================================

class BulkResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class ReportCardSummary(BaseModel):
    id: str
    kind: str
    student_id: str
    term: str
    session: str
    generated_at: datetime
    generated_by: Optional[str] = None
    sent_to_parent: bool = False

    model_config = ConfigDict(from_attributes=True)


# =========================================================
# 5) 생성 요청 바디 (라우터용)
# =========================================================

class CAReportRequest(BaseModel):
    student_id: str                                  # 내부 ID 또는 입학 번호
    term: Optional[str] = None                       # 생략 시 현재 학기
    session: Optional[str] = None                    # 생략 시 현재 학년도
    assessment_type: Literal["ca1", "ca2"]
    generated_by: str
    teacher_comment: Optional[str] = None
    principal_comment: Optional[str] = None


class TermReportRequest(BaseModel):
    student_id: str
    term: Optional[str] = None
    session: Optional[str] = None
    generated_by: str
    teacher_comment: Optional[str] = None
    principal_comment: Optional[str] = None
    next_term_begins: Optional[date] = None


class WeekSelection(BaseModel):
    week_start: Optional[datetime] = None            # 생략 시 week_of 기준 월~일
    week_end: Optional[datetime] = None
    week_of: Optional[date] = None

    @model_validator(mode="after")
    def check_week(self):
        if (self.week_start is None) != (self.week_end is None):
            raise ValueError("week_start and week_end must be given together")
        if self.week_start is None and self.week_of is None:
            raise ValueError("either week_start/week_end or week_of is required")
        return self


class WeeklyReportRequest(WeekSelection):
    student_id: str
    term: Optional[str] = None
    session: Optional[str] = None
    generated_by: str
    teacher_observation: Optional[str] = None


class BulkCARequest(BaseModel):
    class_id: str
    term: Optional[str] = None
    session: Optional[str] = None
    assessment_type: Literal["ca1", "ca2"]
    generated_by: str


class BulkTermRequest(BaseModel):
    class_id: str
    term: Optional[str] = None
    session: Optional[str] = None
    generated_by: str
    next_term_begins: Optional[date] = None


class BulkWeeklyRequest(WeekSelection):
    class_id: str
    term: Optional[str] = None
    session: Optional[str] = None
    generated_by: str
