"""Conversation persistence with encoded question/answer turns."""

from __future__ import annotations

from datetime import UTC, datetime
import logging
import secrets
import string

from pydantic import TypeAdapter, ValidationError

from orgchat.core.codec import decode_message, encode_message
from orgchat.core.logging_safety import safe_log_identifier
from orgchat.errors import DecodeError, NotFoundError
from orgchat.repositories.base import ConversationRecord, DocumentStore
from orgchat.schemas.conversation import Conversation, ConversationSummary, ConversationTurn, StoredTurn

logger = logging.getLogger(__name__)

TURN_ID_LENGTH = 8
_TURN_ID_ALPHABET = string.ascii_letters + string.digits
_stored_turns = TypeAdapter(list[StoredTurn])


def generate_turn_id(length: int = TURN_ID_LENGTH) -> str:
    return "".join(secrets.choice(_TURN_ID_ALPHABET) for _ in range(length))


def _encoded_turn(turn_id: str, question: str, answer: str) -> dict[str, str]:
    return {
        "id": turn_id,
        "question": encode_message(question),
        "answer": encode_message(answer),
    }


class ConversationService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def create_conversation(self, *, user_id: str, question: str, answer: str) -> str:
        """Start a conversation whose name is the first question; returns its id."""
        record = self._store.create_conversation(
            user_id=user_id,
            name=encode_message(question),
            messages=[_encoded_turn(generate_turn_id(), question, answer)],
            created_at=datetime.now(UTC),
        )
        logger.info(
            "conversation.created conversation_id=%s user_id=%s",
            safe_log_identifier(record.id, prefix="cvid"),
            safe_log_identifier(user_id, prefix="uid"),
        )
        return record.id

    def append_turn(self, *, owner_id: str, conversation_id: str, question: str, answer: str) -> str:
        """Append one turn and rewrite the full message list; returns the new turn id.

        Concurrent appends race on the rewrite and the last writer wins.
        """
        record = self._get_owned_record(owner_id=owner_id, conversation_id=conversation_id)
        turns = self._validated_turns(record)
        turn_id = generate_turn_id()
        messages = [turn.model_dump() for turn in turns]
        messages.append(_encoded_turn(turn_id, question, answer))
        self._store.replace_conversation_messages(
            conversation_id,
            messages=messages,
            updated_at=datetime.now(UTC),
        )
        logger.info(
            "conversation.turn_appended conversation_id=%s turns=%s",
            safe_log_identifier(conversation_id, prefix="cvid"),
            len(messages),
        )
        return turn_id

    def ensure_owned(self, *, owner_id: str, conversation_id: str) -> None:
        self._get_owned_record(owner_id=owner_id, conversation_id=conversation_id)

    def get_conversation(self, *, owner_id: str, conversation_id: str) -> Conversation:
        record = self._get_owned_record(owner_id=owner_id, conversation_id=conversation_id)
        turns = self._validated_turns(record)
        return Conversation(
            id=record.id,
            name=decode_message(record.name),
            messages=[
                ConversationTurn(
                    id=turn.id,
                    question=decode_message(turn.question),
                    answer=decode_message(turn.answer),
                )
                for turn in turns
            ],
            created_at=record.created_at,
            updated_at=record.updated_at or record.created_at,
        )

    def list_conversations(self, *, owner_id: str) -> list[ConversationSummary]:
        return [
            ConversationSummary(id=record.id, name=decode_message(record.name), created_at=record.created_at)
            for record in self._store.list_conversations_for_user(owner_id)
        ]

    def _get_owned_record(self, *, owner_id: str, conversation_id: str) -> ConversationRecord:
        record = self._store.get_conversation(conversation_id)
        if record is None or record.user_id != owner_id:
            raise NotFoundError()
        return record

    @staticmethod
    def _validated_turns(record: ConversationRecord) -> list[StoredTurn]:
        try:
            return _stored_turns.validate_python(record.messages)
        except ValidationError as exc:
            logger.error(
                "conversation.malformed_messages conversation_id=%s",
                safe_log_identifier(record.id, prefix="cvid"),
            )
            raise DecodeError("Stored conversation messages are malformed") from exc
