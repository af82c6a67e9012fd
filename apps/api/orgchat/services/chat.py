"""Chat actions: resolve credentials, call the completion endpoint, persist the turn."""

from __future__ import annotations

import logging

from orgchat.core.logging_safety import safe_log_identifier
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.conversation import ChatTurnResponse, NewChatResponse
from orgchat.services.completions import CompletionGateway
from orgchat.services.conversations import ConversationService
from orgchat.services.credentials import CredentialService

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        *,
        credentials: CredentialService,
        gateway: CompletionGateway,
        conversations: ConversationService,
    ) -> None:
        self._credentials = credentials
        self._gateway = gateway
        self._conversations = conversations

    async def new_chat(self, principal: AuthPrincipal, message: str) -> NewChatResponse:
        resolved = self._credentials.get_credentials(principal)
        answer = await self._gateway.complete(message, resolved.api_key, resolved.endpoint)
        conversation_id = self._conversations.create_conversation(
            user_id=principal.user_id,
            question=message,
            answer=answer,
        )
        return NewChatResponse(conversation_id=conversation_id, answer=answer)

    async def chat(self, principal: AuthPrincipal, conversation_id: str, message: str) -> ChatTurnResponse:
        # Ownership is checked before spending an upstream call.
        self._conversations.ensure_owned(owner_id=principal.user_id, conversation_id=conversation_id)
        resolved = self._credentials.get_credentials(principal)
        answer = await self._gateway.complete(message, resolved.api_key, resolved.endpoint)
        message_id = self._conversations.append_turn(
            owner_id=principal.user_id,
            conversation_id=conversation_id,
            question=message,
            answer=answer,
        )
        logger.info(
            "chat.turn_completed conversation_id=%s user_id=%s",
            safe_log_identifier(conversation_id, prefix="cvid"),
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return ChatTurnResponse(conversation_id=conversation_id, message_id=message_id, answer=answer)
