from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import Base, engine

# ✅ 로깅 설정 (모듈별 logger = logging.getLogger(__name__))
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# HTTP 라이브러리 디버그 로그 비활성화
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import (
    admin_chat, attendance, classes, merits,
    report_cards, results, students, subjects, teachers,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS 설정 (프론트엔드 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (ErrorCode → HTTP 상태)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(students.router,      prefix="/v1")
app.include_router(classes.router,       prefix="/v1")
app.include_router(subjects.router,      prefix="/v1")
app.include_router(teachers.router,      prefix="/v1")   # ✅ 교사 등록/승인
app.include_router(attendance.router,    prefix="/v1")
app.include_router(merits.router,        prefix="/v1")
app.include_router(results.router,       prefix="/v1")
app.include_router(report_cards.router,  prefix="/v1")   # ✅ 성적표 생성/조회
app.include_router(admin_chat.router,    prefix="/v1")   # ✅ 관리자 챗봇 프록시


# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.on_event("startup")
def _create_tables():
    # 테이블이 없으면 생성 (기존 테이블은 건드리지 않음)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({settings.ENV})")


# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} {settings.APP_VERSION}"}
