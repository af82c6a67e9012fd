"""Tenant bootstrap: guarantees user and organization documents exist."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
import logging

from orgchat.core.logging_safety import safe_log_identifier
from orgchat.errors import ApiError, BootstrapError
from orgchat.repositories.base import DocumentStore, OrganizationRecord, UserRecord
from orgchat.schemas.auth import AuthPrincipal

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BootstrapResult:
    organization_id: str
    user_created: bool = False
    organization_created: bool = False
    user_linked: bool = False


def default_user_name(email: str | None) -> str:
    local_part = (email or "").split("@")[0]
    return local_part or "User"


def default_organization_name(email: str | None) -> str:
    return f"{default_user_name(email)}'s Organization"


class TenantBootstrapService:
    """Self-healing setup run before any credential or conversation operation.

    A principal with no user document is treated as the admin of a new
    organization keyed by its own id. Each step is its own write; a crash
    between steps can leave a user without an organization until the next
    call repairs it.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def ensure_user_and_organization(self, principal: AuthPrincipal) -> BootstrapResult:
        safe_user_id = safe_log_identifier(principal.user_id, prefix="uid")
        try:
            return self._ensure(principal, safe_user_id)
        except ApiError:
            raise
        except Exception as exc:
            logger.error(
                "bootstrap.failed user_id=%s error_type=%s",
                safe_user_id,
                type(exc).__name__,
            )
            raise BootstrapError() from exc

    def _ensure(self, principal: AuthPrincipal, safe_user_id: str) -> BootstrapResult:
        user = self._store.get_user(principal.user_id)
        user_created = False
        if user is None:
            user = UserRecord(
                id=principal.user_id,
                email=principal.email,
                name=default_user_name(principal.email),
                is_admin=True,
                role="admin",
                organization_id=principal.user_id,
                created_at=datetime.now(UTC),
            )
            self._store.save_user(user)
            user_created = True
            logger.info("bootstrap.user_created user_id=%s", safe_user_id)

        organization_id = user.organization_id or principal.user_id

        organization_created = False
        if self._store.get_organization(organization_id) is None:
            now = datetime.now(UTC)
            self._store.save_organization(
                OrganizationRecord(
                    id=organization_id,
                    name=default_organization_name(user.email or principal.email),
                    admin_id=principal.user_id,
                    created_at=now,
                    last_updated=now,
                )
            )
            organization_created = True
            logger.info(
                "bootstrap.organization_created user_id=%s organization_id=%s",
                safe_user_id,
                safe_log_identifier(organization_id, prefix="oid"),
            )

        user_linked = False
        if not user.organization_id:
            self._store.update_user(principal.user_id, organization_id=organization_id)
            user_linked = True
            logger.info("bootstrap.user_linked user_id=%s", safe_user_id)

        return BootstrapResult(
            organization_id=organization_id,
            user_created=user_created,
            organization_created=organization_created,
            user_linked=user_linked,
        )
