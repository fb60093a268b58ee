from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.business import Business, BusinessPublic, BusinessUpdate
from miturno.models.service import Service
from miturno.models.user import Role, User
from miturno.utils import generate_slug


async def _slug_taken(session: AsyncSession, slug: str, exclude_id: int | None) -> bool:
    q = select(Business.id).where(Business.slug == slug)
    if exclude_id is not None:
        q = q.where(Business.id != exclude_id)
    result = await session.execute(q)
    return result.first() is not None


async def unique_slug(session: AsyncSession, name: str, exclude_id: int | None = None) -> str:
    """Slug of `name`, suffixed -2, -3... until no other business uses it."""
    base = generate_slug(name) or "negocio"
    slug = base
    n = 1
    while await _slug_taken(session, slug, exclude_id):
        n += 1
        slug = f"{base}-{n}"
    return slug


async def create_business(
    session: AsyncSession, name: str, phone: str | None = None, address: str | None = None
) -> Business:
    business = Business(
        name=name,
        slug=await unique_slug(session, name),
        phone=phone,
        address=address,
    )
    session.add(business)
    await session.flush()
    await session.refresh(business)
    return business


async def get_business(session: AsyncSession, business_id: int) -> Business | None:
    result = await session.execute(select(Business).where(Business.id == business_id))
    return result.scalar_one_or_none()


async def get_business_by_slug(session: AsyncSession, slug: str) -> Business | None:
    result = await session.execute(select(Business).where(Business.slug == slug))
    return result.scalar_one_or_none()


async def list_businesses(session: AsyncSession) -> list[Business]:
    result = await session.execute(select(Business).order_by(Business.name))
    return list(result.scalars().all())


async def update_business(
    session: AsyncSession, business: Business, data: BusinessUpdate
) -> Business:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name"):
        business.name = changes["name"]
        business.slug = await unique_slug(session, business.name, exclude_id=business.id)
    if "phone" in changes:
        business.phone = changes["phone"]
    if "address" in changes:
        business.address = changes["address"]
    session.add(business)
    await session.flush()
    await session.refresh(business)
    return business


async def get_public_catalog(
    session: AsyncSession, business_id: int
) -> tuple[list[Service], list[User]]:
    """Services by name and employees by full name, as shown on the booking page."""
    services = await session.execute(
        select(Service).where(Service.business_id == business_id).order_by(Service.name)
    )
    employees = await session.execute(
        select(User)
        .where(User.business_id == business_id, User.role == Role.EMPLOYEE.value)
        .order_by(User.full_name)
    )
    return list(services.scalars().all()), list(employees.scalars().all())


def business_to_public(business: Business) -> BusinessPublic:
    return BusinessPublic(
        id=business.id,
        name=business.name,
        slug=business.slug,
        phone=business.phone,
        address=business.address,
    )
