from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.appointment import Appointment
from miturno.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate


async def list_services(session: AsyncSession, business_id: int) -> list[Service]:
    result = await session.execute(
        select(Service)
        .where(Service.business_id == business_id)
        .order_by(Service.created_at.desc(), Service.id.desc())
    )
    return list(result.scalars().all())


async def get_service(session: AsyncSession, business_id: int, service_id: int) -> Service | None:
    result = await session.execute(
        select(Service).where(Service.id == service_id, Service.business_id == business_id)
    )
    return result.scalar_one_or_none()


async def create_service(session: AsyncSession, business_id: int, data: ServiceCreate) -> Service:
    service = Service(business_id=business_id, **data.model_dump())
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def update_service(
    session: AsyncSession, business_id: int, service_id: int, data: ServiceUpdate
) -> Service | None:
    service = await get_service(session, business_id, service_id)
    if not service:
        return None
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in ("name", "price", "duration_minutes"):
            continue
        setattr(service, key, value)
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def delete_service(session: AsyncSession, business_id: int, service_id: int) -> bool:
    """Delete the service together with the appointments booked for it."""
    service = await get_service(session, business_id, service_id)
    if not service:
        return False
    await session.execute(delete(Appointment).where(Appointment.service_id == service.id))
    await session.delete(service)
    await session.flush()
    return True


def service_to_public(service: Service) -> ServicePublic:
    return ServicePublic(
        id=service.id,
        business_id=service.business_id,
        name=service.name,
        description=service.description,
        price=service.price,
        duration_minutes=service.duration_minutes,
        image_url=service.image_url,
    )
