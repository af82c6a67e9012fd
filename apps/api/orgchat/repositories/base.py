"""Document store records and interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from orgchat.schemas.auth import Role


@dataclass(slots=True)
class UserRecord:
    id: str
    email: str | None
    name: str
    is_admin: bool
    role: Role
    organization_id: str | None
    created_at: datetime
    invited_by: str | None = None


@dataclass(slots=True)
class OrganizationRecord:
    id: str
    name: str
    admin_id: str
    created_at: datetime
    last_updated: datetime
    encrypted_azure_api_key: str | None = None
    encrypted_azure_endpoint: str | None = None


@dataclass(slots=True)
class ConversationRecord:
    id: str
    user_id: str
    name: str
    # Raw stored turns; shape is validated by the conversation service on read.
    messages: list[Any] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentStore(ABC):
    """Per-document persistence for the users, organizations and conversations collections.

    Every write is a separate durable operation; there are no multi-document
    transactions.
    """

    @abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None: ...

    @abstractmethod
    def save_user(self, record: UserRecord) -> None:
        """Create or overwrite a user document."""

    @abstractmethod
    def update_user(self, user_id: str, **fields: Any) -> None:
        """Merge fields into an existing user document."""

    @abstractmethod
    def list_users(self) -> list[UserRecord]: ...

    @abstractmethod
    def list_users_for_organization(self, organization_id: str, *, role: Role | None = None) -> list[UserRecord]: ...

    @abstractmethod
    def get_organization(self, organization_id: str) -> OrganizationRecord | None: ...

    @abstractmethod
    def save_organization(self, record: OrganizationRecord) -> None: ...

    @abstractmethod
    def update_organization(self, organization_id: str, **fields: Any) -> None: ...

    @abstractmethod
    def list_organizations(self) -> list[OrganizationRecord]: ...

    @abstractmethod
    def create_conversation(
        self,
        *,
        user_id: str,
        name: str,
        messages: list[dict[str, str]],
        created_at: datetime,
    ) -> ConversationRecord: ...

    @abstractmethod
    def get_conversation(self, conversation_id: str) -> ConversationRecord | None: ...

    @abstractmethod
    def replace_conversation_messages(
        self,
        conversation_id: str,
        *,
        messages: list[dict[str, str]],
        updated_at: datetime,
    ) -> None:
        """Rewrite the full message sequence of a conversation."""

    @abstractmethod
    def list_conversations_for_user(self, user_id: str) -> list[ConversationRecord]:
        """Conversations owned by ``user_id``, newest ``created_at`` first."""


__all__ = ["ConversationRecord", "DocumentStore", "OrganizationRecord", "UserRecord"]
