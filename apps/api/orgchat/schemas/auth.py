"""Authentication schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["admin", "coworker"]


class AuthPrincipal(BaseModel):
    """Identity and role claims carried by the session cookie for one request."""

    user_id: str = Field(min_length=1)
    email: str = "user@example.com"
    role: Role = "coworker"
    is_admin: bool = False
    name: str | None = None


class VerifiedToken(BaseModel):
    """Normalized result of ID token verification."""

    user_id: str = Field(min_length=1)
    email: str | None = None


class CreateSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: str | None = Field(default=None, alias="idToken")
    user_id: str | None = Field(default=None, alias="userId")
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class SessionResponse(BaseModel):
    success: bool
