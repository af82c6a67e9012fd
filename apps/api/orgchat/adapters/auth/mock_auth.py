"""Mock identity adapters for local development and tests."""

from uuid import uuid4

from orgchat.adapters.auth.base import (
    AccountProvisioner,
    AccountProvisioningError,
    AuthVerificationError,
    TokenVerifier,
)
from orgchat.schemas.auth import VerifiedToken


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<email>``
    """

    def verify_token(self, token: str) -> VerifiedToken:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid ID token")

        user_id = parts[1].strip()
        email = parts[2].strip() if len(parts) == 3 else None

        if not user_id:
            raise AuthVerificationError("ID token missing user identity")

        return VerifiedToken(user_id=user_id, email=email or None)


class MockAccountProvisioner(AccountProvisioner):
    """Issues ``mock-<hex>`` user ids and rejects duplicate emails."""

    def __init__(self) -> None:
        self.accounts: dict[str, str] = {}

    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        normalized = email.strip().lower()
        if normalized in self.accounts:
            raise AccountProvisioningError("An account with this email already exists")
        user_id = f"mock-{uuid4().hex[:12]}"
        self.accounts[normalized] = user_id
        return user_id


__all__ = ["MockAccountProvisioner", "MockTokenVerifier"]
