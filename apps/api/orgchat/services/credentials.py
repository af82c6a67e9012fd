"""Organization upstream credential resolution."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
import logging

from orgchat.core.codec import decode_credential, encode_credential
from orgchat.core.logging_safety import safe_log_identifier
from orgchat.errors import (
    BootstrapError,
    NotConfiguredError,
    PermissionDeniedError,
    ValidationFailedError,
)
from orgchat.repositories.base import DocumentStore, OrganizationRecord
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.organization import CredentialStatus
from orgchat.services.tenancy import TenantBootstrapService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedCredentials:
    api_key: str
    endpoint: str

    def __repr__(self) -> str:
        return "ResolvedCredentials(api_key='***', endpoint='***')"


class CredentialService:
    def __init__(self, store: DocumentStore, bootstrap: TenantBootstrapService | None = None) -> None:
        self._store = store
        self._bootstrap = bootstrap or TenantBootstrapService(store)

    def _load_organization(self, principal: AuthPrincipal) -> OrganizationRecord:
        organization_id = self._bootstrap.ensure_user_and_organization(principal).organization_id
        organization = self._store.get_organization(organization_id)
        if organization is None:
            raise BootstrapError("Organization setup failed")
        return organization

    def get_credentials(self, principal: AuthPrincipal) -> ResolvedCredentials:
        organization = self._load_organization(principal)
        if not organization.encrypted_azure_api_key or not organization.encrypted_azure_endpoint:
            raise NotConfiguredError()

        # Both decodes raise DecodeError; credentials never degrade to raw text.
        api_key = decode_credential(organization.encrypted_azure_api_key)
        endpoint = decode_credential(organization.encrypted_azure_endpoint)
        if not api_key or not endpoint:
            raise NotConfiguredError()
        return ResolvedCredentials(api_key=api_key, endpoint=endpoint)

    def has_credentials(self, principal: AuthPrincipal) -> bool:
        try:
            self.get_credentials(principal)
        except NotConfiguredError:
            return False
        return True

    def get_credential_status(self, principal: AuthPrincipal) -> CredentialStatus:
        organization = self._load_organization(principal)
        configured = bool(organization.encrypted_azure_api_key and organization.encrypted_azure_endpoint)
        return CredentialStatus(
            organization_id=organization.id,
            organization_name=organization.name,
            configured=configured,
            last_updated=organization.last_updated if configured else None,
        )

    def save_credentials(self, principal: AuthPrincipal, *, api_key: str, endpoint: str) -> None:
        """Overwrite the organization's credentials. Admins only, checked against the stored user."""
        organization_id = self._bootstrap.ensure_user_and_organization(principal).organization_id
        safe_user_id = safe_log_identifier(principal.user_id, prefix="uid")
        user = self._store.get_user(principal.user_id)
        if user is None or not user.is_admin:
            logger.warning("credentials.save_rejected user_id=%s reason=not_admin", safe_user_id)
            raise PermissionDeniedError("Only administrators can save credentials")

        api_key = (api_key or "").strip()
        endpoint = (endpoint or "").strip()
        if not api_key or not endpoint:
            raise ValidationFailedError("Azure API key and endpoint are required")

        self._store.update_organization(
            organization_id,
            encrypted_azure_api_key=encode_credential(api_key),
            encrypted_azure_endpoint=encode_credential(endpoint),
            last_updated=datetime.now(UTC),
        )
        logger.info(
            "credentials.saved user_id=%s organization_id=%s",
            safe_user_id,
            safe_log_identifier(organization_id, prefix="oid"),
        )
