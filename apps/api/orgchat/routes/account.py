"""Account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from orgchat.routes.dependencies import get_organization_service, get_session_principal
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.error import ErrorResponse
from orgchat.schemas.organization import Profile, RegisterRequest, RegisterResponse
from orgchat.services.organizations import OrganizationService

router = APIRouter(tags=["Account"])


@router.post("/account/register", response_model=RegisterResponse, responses={401: {"model": ErrorResponse}})
async def register(
    payload: RegisterRequest,
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> RegisterResponse:
    return service.register(principal, organization_name=payload.organization_name)


@router.get("/me", response_model=Profile, responses={401: {"model": ErrorResponse}})
async def get_profile(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> Profile:
    return service.get_profile(principal)
