import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.errors import SchoolError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    # ✅ 서비스 계층 예외 → ErrorCode 별 HTTP 상태
    @app.exception_handler(SchoolError)
    async def school_error_handler(request: Request, exc: SchoolError):
        logger.warning(f"{request.method} {request.url.path} → {exc.code.value}: {exc.message}")
        return _error_response(exc.status_code, exc.code.value, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "INTERNAL_ERROR", str(exc))
