"""Conversation API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class StoredTurn(BaseModel):
    """Shape of one persisted message turn; text fields hold codec tokens."""

    id: str
    question: str
    answer: str


class ChatMessageRequest(BaseModel):
    message: str = Field(min_length=1)


class ConversationTurn(BaseModel):
    id: str
    question: str
    answer: str


class Conversation(BaseModel):
    id: str
    name: str
    messages: list[ConversationTurn]
    created_at: datetime
    updated_at: datetime


class ConversationSummary(BaseModel):
    id: str
    name: str
    created_at: datetime


class NewChatResponse(BaseModel):
    conversation_id: str
    answer: str


class ChatTurnResponse(BaseModel):
    conversation_id: str
    message_id: str
    answer: str
