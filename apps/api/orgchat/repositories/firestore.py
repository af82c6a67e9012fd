"""Firestore-backed document store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from google.cloud.firestore_v1.base_query import FieldFilter

from orgchat.core.config import Settings
from orgchat.core.firebase import get_firebase_app
from orgchat.repositories.base import ConversationRecord, DocumentStore, OrganizationRecord, UserRecord
from orgchat.schemas.auth import Role

USERS = "users"
ORGANIZATIONS = "organizations"
CONVERSATIONS = "conversations"

_USER_FIELDS = {
    "email": "email",
    "name": "name",
    "is_admin": "isAdmin",
    "role": "role",
    "organization_id": "organizationId",
    "created_at": "createdAt",
    "invited_by": "invitedBy",
}
_ORGANIZATION_FIELDS = {
    "name": "name",
    "admin_id": "adminId",
    "created_at": "createdAt",
    "last_updated": "lastUpdated",
    "encrypted_azure_api_key": "encryptedAzureApiKey",
    "encrypted_azure_endpoint": "encryptedAzureEndpoint",
}


def _to_document(record: Any, mapping: dict[str, str]) -> dict[str, Any]:
    document = {}
    for attribute, document_field in mapping.items():
        value = getattr(record, attribute)
        if value is not None:
            document[document_field] = value
    return document


def _rename_fields(fields: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    unknown = set(fields) - set(mapping)
    if unknown:
        raise ValueError(f"Unknown fields: {sorted(unknown)}")
    return {mapping[name]: value for name, value in fields.items()}


def _user_from_snapshot(snapshot) -> UserRecord:
    data = snapshot.to_dict() or {}
    role = data.get("role") if data.get("role") in ("admin", "coworker") else "coworker"
    return UserRecord(
        id=snapshot.id,
        email=data.get("email"),
        name=data.get("name") or "User",
        is_admin=data.get("isAdmin") is True,
        role=role,
        organization_id=data.get("organizationId") or None,
        created_at=data.get("createdAt") or datetime.fromtimestamp(0, UTC),
        invited_by=data.get("invitedBy"),
    )


def _organization_from_snapshot(snapshot) -> OrganizationRecord:
    data = snapshot.to_dict() or {}
    created_at = data.get("createdAt") or datetime.fromtimestamp(0, UTC)
    return OrganizationRecord(
        id=snapshot.id,
        name=data.get("name") or "",
        admin_id=data.get("adminId") or "",
        created_at=created_at,
        last_updated=data.get("lastUpdated") or created_at,
        encrypted_azure_api_key=data.get("encryptedAzureApiKey"),
        encrypted_azure_endpoint=data.get("encryptedAzureEndpoint"),
    )


def _conversation_from_snapshot(snapshot) -> ConversationRecord:
    data = snapshot.to_dict() or {}
    return ConversationRecord(
        id=snapshot.id,
        user_id=data.get("userId") or "",
        name=data.get("name") or "",
        messages=data.get("messages"),
        created_at=data.get("createdAt") or datetime.fromtimestamp(0, UTC),
        updated_at=data.get("updatedAt"),
    )


class FirestoreStore(DocumentStore):
    """Maps records onto the camelCase Firestore documents of each collection."""

    def __init__(self, client) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> FirestoreStore:
        from firebase_admin import firestore

        return cls(firestore.client(get_firebase_app(settings)))

    def _document(self, collection: str, document_id: str):
        return self._client.collection(collection).document(document_id)

    def get_user(self, user_id: str) -> UserRecord | None:
        snapshot = self._document(USERS, user_id).get()
        return _user_from_snapshot(snapshot) if snapshot.exists else None

    def save_user(self, record: UserRecord) -> None:
        self._document(USERS, record.id).set(_to_document(record, _USER_FIELDS))

    def update_user(self, user_id: str, **fields: Any) -> None:
        self._document(USERS, user_id).update(_rename_fields(fields, _USER_FIELDS))

    def list_users(self) -> list[UserRecord]:
        return [_user_from_snapshot(snapshot) for snapshot in self._client.collection(USERS).stream()]

    def list_users_for_organization(self, organization_id: str, *, role: Role | None = None) -> list[UserRecord]:
        query = self._client.collection(USERS).where(filter=FieldFilter("organizationId", "==", organization_id))
        if role is not None:
            query = query.where(filter=FieldFilter("role", "==", role))
        return [_user_from_snapshot(snapshot) for snapshot in query.stream()]

    def get_organization(self, organization_id: str) -> OrganizationRecord | None:
        snapshot = self._document(ORGANIZATIONS, organization_id).get()
        return _organization_from_snapshot(snapshot) if snapshot.exists else None

    def save_organization(self, record: OrganizationRecord) -> None:
        self._document(ORGANIZATIONS, record.id).set(_to_document(record, _ORGANIZATION_FIELDS))

    def update_organization(self, organization_id: str, **fields: Any) -> None:
        self._document(ORGANIZATIONS, organization_id).update(_rename_fields(fields, _ORGANIZATION_FIELDS))

    def list_organizations(self) -> list[OrganizationRecord]:
        return [
            _organization_from_snapshot(snapshot) for snapshot in self._client.collection(ORGANIZATIONS).stream()
        ]

    def create_conversation(
        self,
        *,
        user_id: str,
        name: str,
        messages: list[dict[str, str]],
        created_at: datetime,
    ) -> ConversationRecord:
        reference = self._client.collection(CONVERSATIONS).document()
        reference.set(
            {
                "messages": messages,
                "name": name,
                "userId": user_id,
                "createdAt": created_at,
                "updatedAt": created_at,
            }
        )
        return ConversationRecord(
            id=reference.id,
            user_id=user_id,
            name=name,
            messages=list(messages),
            created_at=created_at,
            updated_at=created_at,
        )

    def get_conversation(self, conversation_id: str) -> ConversationRecord | None:
        snapshot = self._document(CONVERSATIONS, conversation_id).get()
        return _conversation_from_snapshot(snapshot) if snapshot.exists else None

    def replace_conversation_messages(
        self,
        conversation_id: str,
        *,
        messages: list[dict[str, str]],
        updated_at: datetime,
    ) -> None:
        self._document(CONVERSATIONS, conversation_id).update({"messages": messages, "updatedAt": updated_at})

    def list_conversations_for_user(self, user_id: str) -> list[ConversationRecord]:
        query = self._client.collection(CONVERSATIONS).where(filter=FieldFilter("userId", "==", user_id))
        records = [_conversation_from_snapshot(snapshot) for snapshot in query.stream()]
        # Sorted here so the query needs no composite index.
        records.sort(key=lambda record: record.created_at or datetime.fromtimestamp(0, UTC), reverse=True)
        return records
