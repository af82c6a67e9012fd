"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request

from orgchat.adapters.auth import AccountProvisioner, FirebaseTokenVerifier, MockTokenVerifier, TokenVerifier
from orgchat.core.config import Settings, get_settings
from orgchat.core.logging_safety import safe_log_identifier
from orgchat.core.session import decode_cookie
from orgchat.errors import NotAuthenticatedError, NotFoundError
from orgchat.repositories.base import DocumentStore
from orgchat.schemas.auth import AuthPrincipal
from orgchat.services.chat import ChatService
from orgchat.services.completions import CompletionGateway
from orgchat.services.conversations import ConversationService
from orgchat.services.credentials import CredentialService
from orgchat.services.maintenance import MaintenanceService
from orgchat.services.organizations import OrganizationService
from orgchat.services.tenancy import TenantBootstrapService

logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(settings)
    return MockTokenVerifier()


def get_account_provisioner(request: Request) -> AccountProvisioner:
    return request.app.state.account_provisioner


def get_session_principal(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthPrincipal:
    """Decode the session cookie and attach the principal to request context."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    principal = decode_cookie(request.cookies.get(settings.session_cookie_name))
    if principal is None:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=missing_session",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise NotAuthenticatedError()

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="pid"),
        principal.role,
    )
    request.state.auth_principal = principal
    return principal


def require_debug_routes(settings: Annotated[Settings, Depends(get_settings)]) -> None:
    if not settings.debug_routes_enabled:
        raise NotFoundError()


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_completion_gateway(request: Request) -> CompletionGateway:
    return request.app.state.completion_gateway


def get_bootstrap_service(store: Annotated[DocumentStore, Depends(get_store)]) -> TenantBootstrapService:
    return TenantBootstrapService(store)


def get_credential_service(
    store: Annotated[DocumentStore, Depends(get_store)],
    bootstrap: Annotated[TenantBootstrapService, Depends(get_bootstrap_service)],
) -> CredentialService:
    return CredentialService(store, bootstrap)


def get_conversation_service(store: Annotated[DocumentStore, Depends(get_store)]) -> ConversationService:
    return ConversationService(store)


def get_chat_service(
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    gateway: Annotated[CompletionGateway, Depends(get_completion_gateway)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
) -> ChatService:
    return ChatService(credentials=credentials, gateway=gateway, conversations=conversations)


def get_organization_service(
    store: Annotated[DocumentStore, Depends(get_store)],
    provisioner: Annotated[AccountProvisioner, Depends(get_account_provisioner)],
    bootstrap: Annotated[TenantBootstrapService, Depends(get_bootstrap_service)],
) -> OrganizationService:
    return OrganizationService(store, provisioner, bootstrap)


def get_maintenance_service(
    store: Annotated[DocumentStore, Depends(get_store)],
    bootstrap: Annotated[TenantBootstrapService, Depends(get_bootstrap_service)],
) -> MaintenanceService:
    return MaintenanceService(store, bootstrap)
