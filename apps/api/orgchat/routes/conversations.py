"""Conversation and chat routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from orgchat.routes.dependencies import get_chat_service, get_conversation_service, get_session_principal
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.conversation import (
    ChatMessageRequest,
    ChatTurnResponse,
    Conversation,
    ConversationSummary,
    NewChatResponse,
)
from orgchat.schemas.error import ErrorResponse, NoLeakNotFoundError, UpstreamFailureError
from orgchat.services.chat import ChatService
from orgchat.services.conversations import ConversationService

router = APIRouter(prefix="/conversations", tags=["Conversations"])


@router.post(
    "",
    response_model=NewChatResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": UpstreamFailureError},
    },
)
async def new_chat(
    payload: ChatMessageRequest,
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> NewChatResponse:
    return await service.new_chat(principal, payload.message)


@router.get("", response_model=list[ConversationSummary], responses={401: {"model": ErrorResponse}})
async def list_conversations(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> list[ConversationSummary]:
    return service.list_conversations(owner_id=principal.user_id)


@router.get(
    "/{conversationId}",
    response_model=Conversation,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def get_conversation(
    conversation_id: Annotated[str, Path(alias="conversationId")],
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> Conversation:
    return service.get_conversation(owner_id=principal.user_id, conversation_id=conversation_id)


@router.post(
    "/{conversationId}/messages",
    response_model=ChatTurnResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": NoLeakNotFoundError},
        409: {"model": ErrorResponse},
        502: {"model": UpstreamFailureError},
    },
)
async def chat(
    conversation_id: Annotated[str, Path(alias="conversationId")],
    payload: ChatMessageRequest,
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatTurnResponse:
    return await service.chat(principal, conversation_id, payload.message)
