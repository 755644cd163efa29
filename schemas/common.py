"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마
- 전역 에러 핸들러(middlewares/error_handler.py)가 이 형식으로 응답함
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: NOT_FOUND, NO_DATA, VALIDATION)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")


class ErrorResponse(BaseModel):
    """전역 에러 핸들러에서 내려주는 표준 에러 응답"""
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="응답 생성 시각 (UTC)",
    )

    model_config = ConfigDict(extra="ignore")
