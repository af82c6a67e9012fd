"""Maintenance (debug) API schemas."""

from pydantic import BaseModel


class RepairReport(BaseModel):
    organization_id: str
    user_created: bool
    organization_created: bool
    user_linked: bool


class PromotionResult(BaseModel):
    user_id: str
    role: str
    is_admin: bool


class DatabaseReport(BaseModel):
    total_users: int
    admin_users: int
    total_organizations: int
    missing_organization_ids: list[str]
