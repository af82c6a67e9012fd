"""Identity provider interfaces."""

from abc import ABC, abstractmethod

from orgchat.schemas.auth import VerifiedToken


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class AccountProvisioningError(Exception):
    """Raised when the identity provider refuses to create an account."""


class TokenVerifier(ABC):
    """Provider-neutral ID token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> VerifiedToken:
        """Verify token and return the normalized identity."""


class AccountProvisioner(ABC):
    """Creates sign-in accounts on behalf of an organization admin."""

    @abstractmethod
    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        """Create an account and return its user id."""


__all__ = ["AccountProvisioner", "AccountProvisioningError", "AuthVerificationError", "TokenVerifier"]
