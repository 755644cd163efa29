"""
services/errors.py

- 서비스 계층 공용 예외 정의
- 모든 예외는 ErrorCode 를 가지고 있어 전역 에러 핸들러에서 HTTP 상태/응답 코드로 변환됨
"""

from enum import Enum


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"      # 학생/학급/과목 등 대상 없음
    NO_DATA = "NO_DATA"          # 집계할 기록이 없음
    VALIDATION = "VALIDATION"    # 입력값 오류
    UPSTREAM = "UPSTREAM"        # 외부 서버(챗봇 함수 서버) 오류


class SchoolError(Exception):
    """서비스 계층 예외의 공통 부모"""

    code: ErrorCode = ErrorCode.VALIDATION
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SchoolError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class NoDataError(SchoolError):
    code = ErrorCode.NO_DATA
    status_code = 422


class ValidationError(SchoolError):
    code = ErrorCode.VALIDATION
    status_code = 400


class ChatProxyError(SchoolError):
    """챗봇 함수 서버 연동 관련 예외"""
    code = ErrorCode.UPSTREAM
    status_code = 502
