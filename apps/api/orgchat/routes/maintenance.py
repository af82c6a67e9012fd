"""Maintenance routes; they answer 404 unless debug routes are enabled in settings."""

from typing import Annotated

from fastapi import APIRouter, Depends

from orgchat.routes.dependencies import get_maintenance_service, get_session_principal, require_debug_routes
from orgchat.schemas.auth import AuthPrincipal
from orgchat.schemas.error import ErrorResponse, NoLeakNotFoundError
from orgchat.schemas.maintenance import DatabaseReport, PromotionResult, RepairReport
from orgchat.services.maintenance import MaintenanceService

router = APIRouter(
    prefix="/debug",
    tags=["Maintenance"],
    dependencies=[Depends(require_debug_routes)],
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)


@router.post("/repair", response_model=RepairReport)
async def repair(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[MaintenanceService, Depends(get_maintenance_service)],
) -> RepairReport:
    return service.repair(principal)


@router.post("/promote", response_model=PromotionResult)
async def promote_to_admin(
    principal: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[MaintenanceService, Depends(get_maintenance_service)],
) -> PromotionResult:
    return service.promote_to_admin(principal)


@router.get("/database", response_model=DatabaseReport)
async def describe_database(
    _: Annotated[AuthPrincipal, Depends(get_session_principal)],
    service: Annotated[MaintenanceService, Depends(get_maintenance_service)],
) -> DatabaseReport:
    return service.describe_database()
