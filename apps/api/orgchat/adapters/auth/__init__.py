"""Identity provider adapters."""

from .base import AccountProvisioner, AccountProvisioningError, AuthVerificationError, TokenVerifier
from .firebase_auth import FirebaseAccountProvisioner, FirebaseTokenVerifier
from .mock_auth import MockAccountProvisioner, MockTokenVerifier

__all__ = [
    "AccountProvisioner",
    "AccountProvisioningError",
    "AuthVerificationError",
    "TokenVerifier",
    "FirebaseAccountProvisioner",
    "FirebaseTokenVerifier",
    "MockAccountProvisioner",
    "MockTokenVerifier",
]
