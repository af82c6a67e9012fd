"""In-memory document store used for local development and tests."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from orgchat.repositories.base import ConversationRecord, DocumentStore, OrganizationRecord, UserRecord
from orgchat.schemas.auth import Role


@dataclass(slots=True)
class InMemoryStore(DocumentStore):
    """Simple, deterministic persistence layer for scaffolding and tests.

    Records are copied on the way in and out so callers cannot mutate stored
    state without going through a write method.
    """

    users: dict[str, UserRecord] = field(default_factory=dict)
    organizations: dict[str, OrganizationRecord] = field(default_factory=dict)
    conversations: dict[str, ConversationRecord] = field(default_factory=dict)
    user_write_count: int = 0
    organization_write_count: int = 0
    conversation_write_count: int = 0
    failure_message: str | None = None

    def _maybe_fail(self) -> None:
        if self.failure_message is not None:
            message = self.failure_message
            self.failure_message = None
            raise RuntimeError(message)

    def get_user(self, user_id: str) -> UserRecord | None:
        self._maybe_fail()
        record = self.users.get(user_id)
        return replace(record) if record is not None else None

    def save_user(self, record: UserRecord) -> None:
        self._maybe_fail()
        self.users[record.id] = replace(record)
        self.user_write_count += 1

    def update_user(self, user_id: str, **fields: Any) -> None:
        self._maybe_fail()
        record = self.users.get(user_id)
        if record is None:
            raise KeyError(f"users/{user_id} does not exist")
        self.users[user_id] = replace(record, **fields)
        self.user_write_count += 1

    def list_users(self) -> list[UserRecord]:
        self._maybe_fail()
        return [replace(record) for record in self.users.values()]

    def list_users_for_organization(self, organization_id: str, *, role: Role | None = None) -> list[UserRecord]:
        self._maybe_fail()
        return [
            replace(record)
            for record in self.users.values()
            if record.organization_id == organization_id and (role is None or record.role == role)
        ]

    def get_organization(self, organization_id: str) -> OrganizationRecord | None:
        self._maybe_fail()
        record = self.organizations.get(organization_id)
        return replace(record) if record is not None else None

    def save_organization(self, record: OrganizationRecord) -> None:
        self._maybe_fail()
        self.organizations[record.id] = replace(record)
        self.organization_write_count += 1

    def update_organization(self, organization_id: str, **fields: Any) -> None:
        self._maybe_fail()
        record = self.organizations.get(organization_id)
        if record is None:
            raise KeyError(f"organizations/{organization_id} does not exist")
        self.organizations[organization_id] = replace(record, **fields)
        self.organization_write_count += 1

    def list_organizations(self) -> list[OrganizationRecord]:
        self._maybe_fail()
        return [replace(record) for record in self.organizations.values()]

    def create_conversation(
        self,
        *,
        user_id: str,
        name: str,
        messages: list[dict[str, str]],
        created_at: datetime,
    ) -> ConversationRecord:
        self._maybe_fail()
        record = ConversationRecord(
            id=uuid4().hex[:20],
            user_id=user_id,
            name=name,
            messages=copy.deepcopy(messages),
            created_at=created_at,
            updated_at=created_at,
        )
        self.conversations[record.id] = record
        self.conversation_write_count += 1
        return replace(record, messages=copy.deepcopy(record.messages))

    def get_conversation(self, conversation_id: str) -> ConversationRecord | None:
        self._maybe_fail()
        record = self.conversations.get(conversation_id)
        if record is None:
            return None
        return replace(record, messages=copy.deepcopy(record.messages))

    def replace_conversation_messages(
        self,
        conversation_id: str,
        *,
        messages: list[dict[str, str]],
        updated_at: datetime,
    ) -> None:
        self._maybe_fail()
        record = self.conversations.get(conversation_id)
        if record is None:
            raise KeyError(f"conversations/{conversation_id} does not exist")
        record.messages = copy.deepcopy(messages)
        record.updated_at = updated_at
        self.conversation_write_count += 1

    def list_conversations_for_user(self, user_id: str) -> list[ConversationRecord]:
        self._maybe_fail()
        records = [
            replace(record, messages=copy.deepcopy(record.messages))
            for record in self.conversations.values()
            if record.user_id == user_id
        ]
        records.sort(key=lambda record: record.created_at, reverse=True)
        return records
