"""Firestore document mapping tests against an in-process fake client."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import unittest

from orgchat.repositories.base import OrganizationRecord, UserRecord
from orgchat.repositories.firestore import FirestoreStore


class _Snapshot:
    def __init__(self, document_id: str, data: dict | None) -> None:
        self.id = document_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict | None:
        return dict(self._data) if self._data is not None else None


class _DocumentReference:
    def __init__(self, collection: _Collection, document_id: str) -> None:
        self._collection = collection
        self.id = document_id

    def get(self) -> _Snapshot:
        return _Snapshot(self.id, self._collection.documents.get(self.id))

    def set(self, data: dict) -> None:
        self._collection.documents[self.id] = dict(data)

    def update(self, data: dict) -> None:
        if self.id not in self._collection.documents:
            raise KeyError(self.id)
        self._collection.documents[self.id].update(data)


class _Query:
    def __init__(self, collection: _Collection, filters: tuple = ()) -> None:
        self._collection = collection
        self._filters = filters

    def where(self, *, filter) -> _Query:
        assert filter.op_string == "=="
        return _Query(self._collection, self._filters + ((filter.field_path, filter.value),))

    def stream(self):
        for document_id, data in list(self._collection.documents.items()):
            if all(data.get(field) == value for field, value in self._filters):
                yield _Snapshot(document_id, data)


class _Collection(_Query):
    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}
        self._next_id = 0
        super().__init__(self)

    def document(self, document_id: str | None = None) -> _DocumentReference:
        if document_id is None:
            self._next_id += 1
            document_id = f"auto-{self._next_id}"
        return _DocumentReference(self, document_id)


class _FakeClient:
    def __init__(self) -> None:
        self.collections: dict[str, _Collection] = {}

    def collection(self, name: str) -> _Collection:
        return self.collections.setdefault(name, _Collection())


class FirestoreStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _FakeClient()
        self.store = FirestoreStore(self.client)
        self.now = datetime(2024, 5, 1, tzinfo=UTC)

    def test_users_are_stored_with_camel_case_fields(self) -> None:
        self.store.save_user(
            UserRecord(
                id="user-1",
                email="ada@example.com",
                name="ada",
                is_admin=True,
                role="admin",
                organization_id="user-1",
                created_at=self.now,
            )
        )

        document = self.client.collection("users").documents["user-1"]
        self.assertEqual(
            document,
            {
                "email": "ada@example.com",
                "name": "ada",
                "isAdmin": True,
                "role": "admin",
                "organizationId": "user-1",
                "createdAt": self.now,
            },
        )
        self.assertEqual(self.store.get_user("user-1").organization_id, "user-1")
        self.assertIsNone(self.store.get_user("missing"))

    def test_update_renames_fields_and_rejects_unknown_ones(self) -> None:
        self.client.collection("organizations").documents["org-1"] = {"name": "Acme", "adminId": "user-1"}

        self.store.update_organization("org-1", encrypted_azure_api_key="cgpt_a2V5", last_updated=self.now)

        document = self.client.collection("organizations").documents["org-1"]
        self.assertEqual(document["encryptedAzureApiKey"], "cgpt_a2V5")
        self.assertEqual(document["lastUpdated"], self.now)
        with self.assertRaises(ValueError):
            self.store.update_organization("org-1", colour="blue")

    def test_organization_defaults_for_sparse_documents(self) -> None:
        self.client.collection("organizations").documents["org-1"] = {"name": "Acme", "createdAt": self.now}

        organization = self.store.get_organization("org-1")

        self.assertIsInstance(organization, OrganizationRecord)
        self.assertEqual(organization.last_updated, self.now)
        self.assertIsNone(organization.encrypted_azure_api_key)
        self.assertEqual(organization.admin_id, "")

    def test_unknown_stored_role_reads_as_coworker(self) -> None:
        self.client.collection("users").documents["user-2"] = {"role": "owner", "isAdmin": "yes"}

        user = self.store.get_user("user-2")

        self.assertEqual(user.role, "coworker")
        self.assertFalse(user.is_admin)
        self.assertEqual(user.name, "User")

    def test_organization_members_filtered_by_role(self) -> None:
        users = self.client.collection("users").documents
        users["admin"] = {"organizationId": "org-1", "role": "admin"}
        users["bob"] = {"organizationId": "org-1", "role": "coworker"}
        users["eve"] = {"organizationId": "org-2", "role": "coworker"}

        coworkers = self.store.list_users_for_organization("org-1", role="coworker")
        members = self.store.list_users_for_organization("org-1")

        self.assertEqual([user.id for user in coworkers], ["bob"])
        self.assertEqual({user.id for user in members}, {"admin", "bob"})

    def test_conversations_round_trip_and_list_newest_first(self) -> None:
        first = self.store.create_conversation(
            user_id="user-1",
            name="msg_Zmlyc3Q=",
            messages=[{"id": "a1", "question": "q", "answer": "a"}],
            created_at=self.now,
        )
        second = self.store.create_conversation(
            user_id="user-1",
            name="msg_c2Vjb25k",
            messages=[],
            created_at=self.now + timedelta(hours=1),
        )
        self.store.create_conversation(user_id="user-2", name="other", messages=[], created_at=self.now)

        stored = self.client.collection("conversations").documents[first.id]
        self.assertEqual(stored["userId"], "user-1")
        self.assertEqual(stored["updatedAt"], self.now)

        later = self.now + timedelta(days=1)
        self.store.replace_conversation_messages(first.id, messages=[{"id": "b2"}], updated_at=later)
        reloaded = self.store.get_conversation(first.id)
        self.assertEqual(reloaded.messages, [{"id": "b2"}])
        self.assertEqual(reloaded.updated_at, later)

        listed = self.store.list_conversations_for_user("user-1")
        self.assertEqual([record.id for record in listed], [second.id, first.id])
        self.assertIsNone(self.store.get_conversation("missing"))
