"""Firebase Auth adapters."""

from __future__ import annotations

from orgchat.adapters.auth.base import (
    AccountProvisioner,
    AccountProvisioningError,
    AuthVerificationError,
    TokenVerifier,
)
from orgchat.core.config import Settings
from orgchat.core.firebase import get_firebase_app
from orgchat.schemas.auth import VerifiedToken


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens and normalizes identity data."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def verify_token(self, token: str) -> VerifiedToken:
        from firebase_admin import auth as firebase_auth

        app = get_firebase_app(self._settings)
        try:
            decoded = firebase_auth.verify_id_token(token, app=app, check_revoked=True)
        except Exception as exc:  # pragma: no cover - provider exception surface
            raise AuthVerificationError("Invalid ID token") from exc

        audience = self._settings.firebase_audience
        if audience and decoded.get("aud") != audience:
            raise AuthVerificationError("Invalid ID token audience")

        project_id = self._settings.firebase_project_id
        if project_id:
            issuer = str(decoded.get("iss", ""))
            if project_id not in issuer and str(decoded.get("aud", "")) != project_id:
                raise AuthVerificationError("Invalid ID token issuer")

        user_id = str(decoded.get("uid") or decoded.get("sub") or "").strip()
        if not user_id:
            raise AuthVerificationError("ID token missing user identity")

        return VerifiedToken(user_id=user_id, email=decoded.get("email"))


class FirebaseAccountProvisioner(AccountProvisioner):
    """Creates Firebase Auth users with the Admin SDK."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        from firebase_admin import auth as firebase_auth

        app = get_firebase_app(self._settings)
        try:
            user = firebase_auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                app=app,
            )
        except firebase_auth.EmailAlreadyExistsError as exc:
            raise AccountProvisioningError("An account with this email already exists") from exc
        except ValueError as exc:
            raise AccountProvisioningError(str(exc)) from exc
        return user.uid


__all__ = ["FirebaseAccountProvisioner", "FirebaseTokenVerifier"]
