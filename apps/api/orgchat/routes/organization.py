"""Organization credential and membership routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from orgchat.routes.dependencies import get_credential_service, get_organization_service, get_session_principal
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.error import ErrorResponse
from orgchat.schemas.organization import (
    Coworker,
    CredentialStatus,
    InviteCoworkerRequest,
    SaveCredentialsRequest,
)
from orgchat.services.credentials import CredentialService
from orgchat.services.organizations import OrganizationService

router = APIRouter(prefix="/organization", tags=["Organization"])


@router.get("/credentials", response_model=CredentialStatus, responses={401: {"model": ErrorResponse}})
async def get_credential_status(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[CredentialService, Depends(get_credential_service)],
) -> CredentialStatus:
    return service.get_credential_status(principal)


@router.put(
    "/credentials",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
async def save_credentials(
    payload: SaveCredentialsRequest,
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[CredentialService, Depends(get_credential_service)],
) -> Response:
    service.save_credentials(principal, api_key=payload.api_key, endpoint=payload.endpoint)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/coworkers",
    response_model=list[Coworker],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_coworkers(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> list[Coworker]:
    return service.list_coworkers(principal)


@router.post(
    "/coworkers",
    response_model=Coworker,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
async def invite_coworker(
    payload: InviteCoworkerRequest,
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> Coworker:
    return service.invite_coworker(
        principal,
        email=payload.email,
        password=payload.password,
        name=payload.name,
    )
