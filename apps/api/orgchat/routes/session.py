"""Session cookie routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from orgchat.adapters.auth import AuthVerificationError, TokenVerifier
from orgchat.core.config import Settings, get_settings
from orgchat.core.logging_safety import safe_log_identifier
from orgchat.core.session import encode_principal
from orgchat.errors import NotAuthenticatedError, ValidationFailedError
from orgchat.repositories.base import DocumentStore
from orgchat.routes.dependencies import get_store, get_token_verifier
from orgchat.schemas.auth import AuthPrincipal, CreateSessionRequest, SessionResponse
from orgchat.schemas.error import ErrorResponse

router = APIRouter(prefix="/auth", tags=["Session"])
logger = logging.getLogger(__name__)


def _sync_role_claims(store: DocumentStore, principal: AuthPrincipal) -> AuthPrincipal:
    """Copy role claims from the stored user; store failures keep the defaults."""
    try:
        user = store.get_user(principal.user_id)
    except Exception as exc:
        logger.warning(
            "session.sync_failed user_id=%s error_type=%s",
            safe_log_identifier(principal.user_id, prefix="uid"),
            type(exc).__name__,
        )
        return principal
    if user is None:
        return principal
    return principal.model_copy(
        update={
            "role": user.role,
            "is_admin": user.is_admin,
            "name": user.name or principal.name,
            "email": user.email or principal.email,
        }
    )


@router.post(
    "/session",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_session(
    payload: CreateSessionRequest,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    store: Annotated[DocumentStore, Depends(get_store)],
) -> SessionResponse:
    if not payload.id_token or not payload.user_id:
        raise ValidationFailedError("ID token and user ID required")

    try:
        verified = verifier.verify_token(payload.id_token)
    except AuthVerificationError as exc:
        raise NotAuthenticatedError(str(exc) or "Invalid ID token") from exc
    if verified.user_id != payload.user_id:
        raise NotAuthenticatedError("ID token does not match user ID")

    email = payload.email or verified.email or f"user-{payload.user_id}@temp.com"
    principal = AuthPrincipal(
        user_id=payload.user_id,
        email=email,
        name=payload.display_name or email.split("@")[0] or "User",
        role="coworker",
        is_admin=False,
    )
    principal = _sync_role_claims(store, principal)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=encode_principal(principal),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    logger.info("session.created user_id=%s role=%s", safe_log_identifier(principal.user_id, prefix="uid"), principal.role)
    return SessionResponse(success=True)


@router.post("/signout", response_model=SessionResponse)
async def sign_out(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return SessionResponse(success=True)
