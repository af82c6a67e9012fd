"""Organization membership: sign-up, coworker invitations and profiles."""

from __future__ import annotations

from datetime import UTC, datetime
import logging

from orgchat.adapters.auth import AccountProvisioner, AccountProvisioningError
from orgchat.core.logging_safety import safe_log_identifier
from orgchat.errors import PermissionDeniedError, ValidationFailedError
from orgchat.repositories.base import DocumentStore, OrganizationRecord, UserRecord
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.organization import Coworker, Profile, RegisterResponse
from orgchat.services.tenancy import TenantBootstrapService, default_organization_name, default_user_name

logger = logging.getLogger(__name__)


class OrganizationService:
    def __init__(
        self,
        store: DocumentStore,
        provisioner: AccountProvisioner,
        bootstrap: TenantBootstrapService | None = None,
    ) -> None:
        self._store = store
        self._provisioner = provisioner
        self._bootstrap = bootstrap or TenantBootstrapService(store)

    def register(self, principal: AuthPrincipal, *, organization_name: str | None = None) -> RegisterResponse:
        """Explicit sign-up: the new user founds and administers its own organization."""
        existing = self._store.get_user(principal.user_id)
        if existing is not None and existing.organization_id:
            return RegisterResponse(organization_id=existing.organization_id, created=False)

        now = datetime.now(UTC)
        # An organization left behind by a lost user document keeps its credentials.
        created = self._store.get_organization(principal.user_id) is None
        if created:
            name = (organization_name or "").strip() or default_organization_name(principal.email)
            self._store.save_organization(
                OrganizationRecord(
                    id=principal.user_id,
                    name=name,
                    admin_id=principal.user_id,
                    created_at=now,
                    last_updated=now,
                )
            )

        if existing is not None:
            self._store.update_user(principal.user_id, organization_id=principal.user_id, role="admin", is_admin=True)
        else:
            self._store.save_user(
                UserRecord(
                    id=principal.user_id,
                    email=principal.email,
                    name=default_user_name(principal.email),
                    is_admin=True,
                    role="admin",
                    organization_id=principal.user_id,
                    created_at=now,
                )
            )
        logger.info(
            "organization.registered user_id=%s organization_created=%s",
            safe_log_identifier(principal.user_id, prefix="uid"),
            created,
        )
        return RegisterResponse(organization_id=principal.user_id, created=created)

    def _require_admin(self, principal: AuthPrincipal) -> UserRecord:
        self._bootstrap.ensure_user_and_organization(principal)
        user = self._store.get_user(principal.user_id)
        if user is None or not user.is_admin:
            logger.warning(
                "organization.admin_required user_id=%s",
                safe_log_identifier(principal.user_id, prefix="uid"),
            )
            raise PermissionDeniedError()
        return user

    def invite_coworker(self, principal: AuthPrincipal, *, email: str, password: str, name: str) -> Coworker:
        admin = self._require_admin(principal)
        organization_id = admin.organization_id or principal.user_id
        try:
            user_id = self._provisioner.create_account(email=email, password=password, display_name=name)
        except AccountProvisioningError as exc:
            raise ValidationFailedError(str(exc) or "Failed to create coworker account") from exc

        record = UserRecord(
            id=user_id,
            email=email,
            name=name,
            is_admin=False,
            role="coworker",
            organization_id=organization_id,
            created_at=datetime.now(UTC),
            invited_by=principal.user_id,
        )
        self._store.save_user(record)
        logger.info(
            "organization.coworker_invited admin_id=%s coworker_id=%s",
            safe_log_identifier(principal.user_id, prefix="uid"),
            safe_log_identifier(user_id, prefix="uid"),
        )
        return Coworker(id=record.id, name=record.name, email=email, created_at=record.created_at)

    def list_coworkers(self, principal: AuthPrincipal) -> list[Coworker]:
        admin = self._require_admin(principal)
        records = self._store.list_users_for_organization(
            admin.organization_id or principal.user_id,
            role="coworker",
        )
        records.sort(key=lambda record: record.created_at, reverse=True)
        return [
            Coworker(
                id=record.id,
                name=record.name or "Unknown",
                email=record.email or "No email",
                created_at=record.created_at,
            )
            for record in records
        ]

    def get_profile(self, principal: AuthPrincipal) -> Profile:
        organization_id = self._bootstrap.ensure_user_and_organization(principal).organization_id
        user = self._store.get_user(principal.user_id)
        organization = self._store.get_organization(organization_id)
        return Profile(
            id=principal.user_id,
            email=user.email if user else principal.email,
            name=user.name if user else default_user_name(principal.email),
            role=user.role if user else principal.role,
            is_admin=user.is_admin if user else False,
            organization_id=organization_id,
            organization_name=organization.name if organization else default_organization_name(principal.email),
            invited_by=user.invited_by if user else None,
        )
