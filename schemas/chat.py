from typing import List, Optional

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    role: str                                # user / assistant
    content: str


class AdminChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    admin_id: str = Field(..., min_length=1)
    conversation_history: List[ChatTurn] = Field(default_factory=list)


class AdminChatResponse(BaseModel):
    success: bool = True
    response: Optional[str] = None
