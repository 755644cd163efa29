import logging
from typing import Any, Dict, List, Optional

import httpx

from config.settings import settings
from services.errors import ChatProxyError

logger = logging.getLogger(__name__)


class ChatFunctionClient:
    """외부 함수 실행 서비스(관리자 채팅 에이전트) 프록시 클라이언트"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.CHAT_FUNCTION_URL).rstrip("/")
        self.timeout = timeout or settings.CHAT_TIMEOUT
        # 테스트에서는 httpx.MockTransport 주입
        self.transport = transport

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """공통 HTTP 요청 처리"""
        url = f"{self.base_url}{endpoint}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException:
            raise ChatProxyError("Chat function timed out")
        except httpx.HTTPStatusError as e:
            raise ChatProxyError(f"Chat function error (HTTP {e.response.status_code}): {_upstream_error(e.response)}")
        except httpx.HTTPError as e:
            raise ChatProxyError(f"Chat function unreachable: {e}")
        except ValueError:
            raise ChatProxyError("Chat function returned a non-JSON response")

    def admin_chat(
        self,
        message: str,
        admin_id: str,
        conversation_history: Optional[List[Dict[str, str]]] = None,
    ) -> str:
        payload = {
            "message": message,
            "adminId": admin_id,
            "conversationHistory": conversation_history or [],
        }
        logger.info(f"Forwarding admin chat for {admin_id} ({len(payload['conversationHistory'])} prior turns)")

        data = self._make_request("POST", "/admin-chat", json=payload)
        if "response" not in data:
            raise ChatProxyError("Chat function response is missing 'response'")
        return data["response"]


def _upstream_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


# ✅ 라우터에서 의존성으로 주입 (테스트에서 dependency_overrides 로 교체)
def get_chat_client() -> ChatFunctionClient:
    return ChatFunctionClient()
