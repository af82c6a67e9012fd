"""Organization and membership API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from orgchat.schemas.auth import Role


class SaveCredentialsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Blank values are rejected by the service after the admin check.
    api_key: str = Field(default="", alias="azureApiKey")
    endpoint: str = Field(default="", alias="azureEndpoint")


class CredentialStatus(BaseModel):
    organization_id: str
    organization_name: str
    configured: bool
    last_updated: datetime | None = None


class RegisterRequest(BaseModel):
    organization_name: str | None = None


class RegisterResponse(BaseModel):
    organization_id: str
    created: bool


class InviteCoworkerRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)


class Coworker(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime


class Profile(BaseModel):
    id: str
    email: str | None
    name: str
    role: Role
    is_admin: bool
    organization_id: str
    organization_name: str
    invited_by: str | None = None
