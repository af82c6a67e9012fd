"""Conversation persistence, ownership and decoding tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import unittest

from orgchat.core.codec import encode_message
from orgchat.errors import DecodeError, NotFoundError
from orgchat.repositories.memory import InMemoryStore
from orgchat.services.conversations import ConversationService, generate_turn_id


class ConversationServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.service = ConversationService(self.store)

    def test_create_stores_encoded_text_and_returns_id(self) -> None:
        conversation_id = self.service.create_conversation(user_id="user-a", question="What is 2+2?", answer="4")

        record = self.store.conversations[conversation_id]
        self.assertEqual(record.user_id, "user-a")
        self.assertEqual(record.name, encode_message("What is 2+2?"))
        self.assertEqual(len(record.messages), 1)
        self.assertEqual(record.messages[0]["question"], encode_message("What is 2+2?"))
        self.assertEqual(record.messages[0]["answer"], encode_message("4"))
        self.assertEqual(len(record.messages[0]["id"]), 8)

        conversation = self.service.get_conversation(owner_id="user-a", conversation_id=conversation_id)
        self.assertEqual(conversation.name, "What is 2+2?")
        self.assertEqual([(turn.question, turn.answer) for turn in conversation.messages], [("What is 2+2?", "4")])

    def test_append_adds_exactly_one_turn_and_keeps_order(self) -> None:
        conversation_id = self.service.create_conversation(user_id="user-a", question="first", answer="one")
        writes_before = self.store.conversation_write_count

        turn_id = self.service.append_turn(
            owner_id="user-a",
            conversation_id=conversation_id,
            question="second",
            answer="two",
        )

        self.assertEqual(self.store.conversation_write_count, writes_before + 1)
        conversation = self.service.get_conversation(owner_id="user-a", conversation_id=conversation_id)
        self.assertEqual([turn.question for turn in conversation.messages], ["first", "second"])
        self.assertEqual(conversation.messages[-1].id, turn_id)
        self.assertEqual(conversation.name, "first")

    def test_foreign_and_missing_conversations_share_not_found(self) -> None:
        conversation_id = self.service.create_conversation(user_id="user-a", question="mine", answer="ok")

        for owner_id, target in (("user-b", conversation_id), ("user-a", "does-not-exist")):
            with self.subTest(owner_id=owner_id, target=target):
                with self.assertRaises(NotFoundError) as context:
                    self.service.get_conversation(owner_id=owner_id, conversation_id=target)
                self.assertEqual(
                    context.exception.payload.model_dump(exclude_none=True),
                    {"code": "RESOURCE_NOT_FOUND", "message": "Resource not found"},
                )

        writes_before = self.store.conversation_write_count
        with self.assertRaises(NotFoundError):
            self.service.append_turn(owner_id="user-b", conversation_id=conversation_id, question="x", answer="y")
        self.assertEqual(self.store.conversation_write_count, writes_before)

    def test_plaintext_legacy_turns_are_returned_as_stored(self) -> None:
        conversation_id = self.service.create_conversation(user_id="user-a", question="q", answer="a")
        record = self.store.conversations[conversation_id]
        record.name = "Legacy name"
        record.messages = [{"id": "legacy01", "question": "plain question", "answer": "plain answer"}]

        conversation = self.service.get_conversation(owner_id="user-a", conversation_id=conversation_id)

        self.assertEqual(conversation.name, "Legacy name")
        self.assertEqual(conversation.messages[0].question, "plain question")
        self.assertEqual(conversation.messages[0].answer, "plain answer")

    def test_malformed_stored_messages_raise_decode_error(self) -> None:
        conversation_id = self.service.create_conversation(user_id="user-a", question="q", answer="a")
        self.store.conversations[conversation_id].messages = [{"id": "broken"}]

        with self.assertRaises(DecodeError):
            self.service.get_conversation(owner_id="user-a", conversation_id=conversation_id)
        with self.assertRaises(DecodeError):
            self.service.append_turn(owner_id="user-a", conversation_id=conversation_id, question="x", answer="y")

    def test_list_returns_only_own_conversations_newest_first(self) -> None:
        older = self.service.create_conversation(user_id="user-a", question="older", answer="1")
        newer = self.service.create_conversation(user_id="user-a", question="newer", answer="2")
        self.service.create_conversation(user_id="user-b", question="someone else", answer="3")
        base = datetime(2024, 1, 1, tzinfo=UTC)
        self.store.conversations[older].created_at = base
        self.store.conversations[newer].created_at = base + timedelta(minutes=5)

        summaries = self.service.list_conversations(owner_id="user-a")

        self.assertEqual([summary.id for summary in summaries], [newer, older])
        self.assertEqual([summary.name for summary in summaries], ["newer", "older"])


class TurnIdTests(unittest.TestCase):
    def test_turn_ids_are_short_alphanumeric(self) -> None:
        turn_id = generate_turn_id()

        self.assertEqual(len(turn_id), 8)
        self.assertTrue(turn_id.isalnum())
        self.assertTrue(turn_id.isascii())
