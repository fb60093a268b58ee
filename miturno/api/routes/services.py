from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.deps import Capability, require
from miturno.core.db import get_session
from miturno.models.service import ServiceCreate, ServicePublic, ServiceUpdate
from miturno.models.user import User
from miturno.services.catalog_service import (
    create_service,
    delete_service,
    list_services,
    service_to_public,
    update_service,
)

router = APIRouter(prefix="/admin/services", tags=["services"])

manage_services = require(Capability.MANAGE_SERVICES)


@router.get("", response_model=list[ServicePublic])
async def services(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_services),
) -> list[ServicePublic]:
    return [service_to_public(s) for s in await list_services(session, current_user.business_id)]


@router.post("", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def add_service(
    body: ServiceCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_services),
) -> ServicePublic:
    return service_to_public(await create_service(session, current_user.business_id, body))


@router.patch("/{service_id}", response_model=ServicePublic)
async def edit_service(
    service_id: int,
    body: ServiceUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_services),
) -> ServicePublic:
    service = await update_service(session, current_user.business_id, service_id, body)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return service_to_public(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_service(
    service_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_services),
) -> None:
    if not await delete_service(session, current_user.business_id, service_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
