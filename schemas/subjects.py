from typing import Optional

from pydantic import BaseModel


# ✅ 입력용: POST 요청에서 사용할 스키마
class SubjectCreate(BaseModel):
    id: str                                  # 과목 ID (예: mathematics)
    name: str                                # 과목 이름
    code: Optional[str] = None               # 과목 코드 (예: MTH)
    category: Optional[str] = None           # 과목 분류 (Core, Science, Arts ...)
    is_core: bool = False                    # 필수 과목 여부


# ✅ 출력용: GET, POST 응답 등에서 사용할 스키마
class Subject(SubjectCreate):
    class Config:
        from_attributes = True
