"""Repair and diagnostics for user and organization documents."""

from __future__ import annotations

import logging

from orgchat.core.logging_safety import safe_log_identifier
from orgchat.repositories.base import DocumentStore
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.maintenance import DatabaseReport, PromotionResult, RepairReport
from orgchat.services.tenancy import TenantBootstrapService

logger = logging.getLogger(__name__)


class MaintenanceService:
    def __init__(self, store: DocumentStore, bootstrap: TenantBootstrapService | None = None) -> None:
        self._store = store
        self._bootstrap = bootstrap or TenantBootstrapService(store)

    def repair(self, principal: AuthPrincipal) -> RepairReport:
        result = self._bootstrap.ensure_user_and_organization(principal)
        return RepairReport(
            organization_id=result.organization_id,
            user_created=result.user_created,
            organization_created=result.organization_created,
            user_linked=result.user_linked,
        )

    def promote_to_admin(self, principal: AuthPrincipal) -> PromotionResult:
        self._bootstrap.ensure_user_and_organization(principal)
        self._store.update_user(principal.user_id, role="admin", is_admin=True)
        logger.warning("maintenance.promoted_to_admin user_id=%s", safe_log_identifier(principal.user_id, prefix="uid"))
        return PromotionResult(user_id=principal.user_id, role="admin", is_admin=True)

    def describe_database(self) -> DatabaseReport:
        users = self._store.list_users()
        organizations = self._store.list_organizations()
        existing_ids = {organization.id for organization in organizations}
        referenced_ids = {user.organization_id for user in users if user.organization_id}
        return DatabaseReport(
            total_users=len(users),
            admin_users=sum(1 for user in users if user.role == "admin"),
            total_organizations=len(organizations),
            missing_organization_ids=sorted(referenced_ids - existing_ids),
        )
