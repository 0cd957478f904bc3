from fastapi import APIRouter, Depends

from connectus.errors import ServiceError, as_http_exception
from connectus.models.user import User
from connectus.routers.dependencies import chat_assistant, get_current_user
from connectus.schemas.chat import ChatRequest, ChatResponse
from connectus.services.chat_service import ChatCompleter


router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    _user: User = Depends(get_current_user),
    assistant: ChatCompleter = Depends(chat_assistant),
) -> ChatResponse:
    try:
        reply = assistant.reply(payload.message.strip())
    except ServiceError as exc:
        raise as_http_exception(exc) from exc
    return ChatResponse(response=reply)
