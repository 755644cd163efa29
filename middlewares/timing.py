import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

# 성적표 일괄 생성처럼 오래 걸리는 요청은 경고로 남김 (ms)
SLOW_REQUEST_MS = 2000


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Latency-Ms"] = str(latency_ms)

        if latency_ms >= SLOW_REQUEST_MS:
            logger.warning(f"Slow request: {request.method} {request.url.path} {response.status_code} ({latency_ms}ms)")
        else:
            logger.debug(f"{request.method} {request.url.path} {response.status_code} ({latency_ms}ms)")
        return response
