"""
services/academic_calendar.py

- 학년도(session)/학기(term) 계산과 주간 범위 계산
- 학년도는 9월에 시작 (예: 2024년 9월 ~ 2025년 8월 → "2024/2025")
- 학기: 9~12월 First Term, 1~4월 Second Term, 5~8월 Third Term
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from config.settings import settings
from services.errors import ValidationError

TERMS = ("First Term", "Second Term", "Third Term")
TERM_START_MONTH = {"First Term": 9, "Second Term": 1, "Third Term": 5}


def school_today() -> date:
    return datetime.now(ZoneInfo(settings.SCHOOL_TIMEZONE)).date()


def utcnow() -> datetime:
    """DB 저장용 naive UTC 시각"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_millis(value: datetime) -> int:
    """epoch 밀리초 (naive 값은 UTC로 간주)"""
    value = to_naive_utc(value)
    return calendar.timegm(value.timetuple()) * 1000 + value.microsecond // 1000


# ==========================================================
# [학년도/학기]
# ==========================================================
def current_session(today: Optional[date] = None) -> str:
    today = today or school_today()
    if today.month >= 9:
        return f"{today.year}/{today.year + 1}"
    return f"{today.year - 1}/{today.year}"


def current_term(today: Optional[date] = None) -> str:
    today = today or school_today()
    if today.month >= 9:
        return "First Term"
    if today.month <= 4:
        return "Second Term"
    return "Third Term"


def parse_session(session: str) -> Tuple[int, int]:
    try:
        start, end = (int(part) for part in session.split("/"))
    except ValueError:
        raise ValidationError(f"Invalid session format: {session!r} (expected YYYY/YYYY)")
    if end != start + 1:
        raise ValidationError(f"Invalid session range: {session!r}")
    return start, end


def sanitize_session(session: str) -> str:
    return session.replace("/", "_")


def validate_term(term: str) -> str:
    if term not in TERMS:
        raise ValidationError(f"Invalid term: {term!r}")
    return term


# ==========================================================
# [주간]
# ==========================================================
def week_date_range(day: date) -> Tuple[datetime, datetime]:
    """해당 날짜가 속한 주의 월요일 00:00:00 ~ 일요일 23:59:59.999"""
    if isinstance(day, datetime):
        day = day.date()
    monday = day - timedelta(days=day.weekday())
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time(23, 59, 59, 999000))
    return start, end


def term_start_date(term: str, session: str) -> datetime:
    """학기 시작일: First Term 은 학년도 시작 연도, 나머지 학기는 끝 연도"""
    start_year, end_year = parse_session(session)
    year = start_year if validate_term(term) == "First Term" else end_year
    return datetime(year, TERM_START_MONTH[term], 1)


def week_number_in_term(week_start: datetime, term: str, session: str) -> int:
    """학기 시작일부터 몇 번째 주인지 (1부터 시작, 학기 시작 전 주는 1)"""
    days = (to_naive_utc(week_start) - term_start_date(term, session)).days
    return max(0, days) // 7 + 1
