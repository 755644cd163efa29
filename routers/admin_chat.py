import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from schemas.chat import AdminChatRequest, AdminChatResponse
from services.chat_client import ChatFunctionClient, get_chat_client
from services.errors import ChatProxyError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin-chat", tags=["Admin Chat"])


# ✅ 관리자 질의 + 대화 이력을 외부 함수 서버로 그대로 전달하고 응답 텍스트만 돌려줌
@router.post("", response_model=AdminChatResponse)
def admin_chat(body: AdminChatRequest, client: ChatFunctionClient = Depends(get_chat_client)):
    try:
        reply = client.admin_chat(
            body.message,
            body.admin_id,
            [turn.model_dump() for turn in body.conversation_history],
        )
    except ChatProxyError as e:
        logger.error(f"Admin chat failed for {body.admin_id}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    return AdminChatResponse(response=reply)
