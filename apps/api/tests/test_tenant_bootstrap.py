"""Tenant bootstrap self-healing and idempotency tests."""

from __future__ import annotations

from datetime import UTC, datetime
import unittest

from orgchat.errors import BootstrapError
from orgchat.repositories.base import OrganizationRecord, UserRecord
from orgchat.repositories.memory import InMemoryStore
from orgchat.schemas.auth import AuthPrincipal
from orgchat.services.tenancy import TenantBootstrapService


def _principal(user_id: str = "user-1", email: str = "ada@example.com") -> AuthPrincipal:
    return AuthPrincipal(user_id=user_id, email=email)


class TenantBootstrapTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.service = TenantBootstrapService(self.store)

    def test_missing_user_becomes_admin_of_own_organization(self) -> None:
        result = self.service.ensure_user_and_organization(_principal())

        self.assertEqual(result.organization_id, "user-1")
        self.assertTrue(result.user_created)
        self.assertTrue(result.organization_created)

        user = self.store.get_user("user-1")
        assert user is not None
        self.assertTrue(user.is_admin)
        self.assertEqual(user.role, "admin")
        self.assertEqual(user.organization_id, "user-1")
        self.assertEqual(user.name, "ada")

        organization = self.store.get_organization("user-1")
        assert organization is not None
        self.assertEqual(organization.name, "ada's Organization")
        self.assertEqual(organization.admin_id, "user-1")
        self.assertIsNone(organization.encrypted_azure_api_key)

    def test_repeated_bootstrap_is_read_only_and_stable(self) -> None:
        first = self.service.ensure_user_and_organization(_principal())
        user_writes = self.store.user_write_count
        organization_writes = self.store.organization_write_count

        for _ in range(3):
            again = self.service.ensure_user_and_organization(_principal())
            self.assertEqual(again.organization_id, first.organization_id)
            self.assertFalse(again.user_created)
            self.assertFalse(again.organization_created)

        self.assertEqual(self.store.user_write_count, user_writes)
        self.assertEqual(self.store.organization_write_count, organization_writes)
        self.assertEqual(len(self.store.organizations), 1)

    def test_coworker_resolves_admins_organization_without_writes(self) -> None:
        now = datetime.now(UTC)
        self.store.save_organization(
            OrganizationRecord(id="admin-1", name="Acme", admin_id="admin-1", created_at=now, last_updated=now)
        )
        self.store.save_user(
            UserRecord(
                id="coworker-1",
                email="bob@example.com",
                name="Bob",
                is_admin=False,
                role="coworker",
                organization_id="admin-1",
                created_at=now,
                invited_by="admin-1",
            )
        )
        writes = (self.store.user_write_count, self.store.organization_write_count)

        result = self.service.ensure_user_and_organization(_principal("coworker-1", "bob@example.com"))

        self.assertEqual(result.organization_id, "admin-1")
        self.assertEqual((self.store.user_write_count, self.store.organization_write_count), writes)
        coworker = self.store.get_user("coworker-1")
        assert coworker is not None
        self.assertFalse(coworker.is_admin)

    def test_user_without_organization_id_is_linked_back(self) -> None:
        self.store.save_user(
            UserRecord(
                id="user-2",
                email="eve@example.com",
                name="eve",
                is_admin=False,
                role="coworker",
                organization_id=None,
                created_at=datetime.now(UTC),
            )
        )

        result = self.service.ensure_user_and_organization(_principal("user-2", "eve@example.com"))

        self.assertEqual(result.organization_id, "user-2")
        self.assertTrue(result.user_linked)
        self.assertTrue(result.organization_created)
        user = self.store.get_user("user-2")
        assert user is not None
        self.assertEqual(user.organization_id, "user-2")
        self.assertFalse(user.is_admin)

    def test_missing_organization_is_recreated_for_existing_user(self) -> None:
        self.service.ensure_user_and_organization(_principal())
        del self.store.organizations["user-1"]

        result = self.service.ensure_user_and_organization(_principal())

        self.assertFalse(result.user_created)
        self.assertTrue(result.organization_created)
        self.assertIsNotNone(self.store.get_organization("user-1"))

    def test_store_failure_surfaces_as_bootstrap_error(self) -> None:
        self.store.failure_message = "firestore unavailable"

        with self.assertRaises(BootstrapError) as context:
            self.service.ensure_user_and_organization(_principal())

        self.assertEqual(context.exception.status_code, 500)
        self.assertEqual(context.exception.payload.code, "BOOTSTRAP_FAILED")
        self.assertEqual(self.store.users, {})
