from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.appointment import Appointment
from miturno.models.refresh_token import RefreshToken
from miturno.models.schedule import WeeklySchedule
from miturno.models.user import Role, User, UserCreate, UserUpdate
from miturno.services.auth_service import create_user, get_user_by_email


async def list_employees(session: AsyncSession, business_id: int) -> list[User]:
    result = await session.execute(
        select(User)
        .where(User.business_id == business_id, User.role == Role.EMPLOYEE.value)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    return list(result.scalars().all())


async def get_employee(session: AsyncSession, business_id: int, employee_id: int) -> User | None:
    result = await session.execute(
        select(User).where(
            User.id == employee_id,
            User.business_id == business_id,
            User.role == Role.EMPLOYEE.value,
        )
    )
    return result.scalar_one_or_none()


async def create_employee(session: AsyncSession, business_id: int, data: UserCreate) -> User | None:
    """None if another account already uses the email."""
    if await get_user_by_email(session, data.email):
        return None
    return await create_user(session, business_id, data, Role.EMPLOYEE)


async def update_user_profile(session: AsyncSession, user: User, data: UserUpdate) -> User | None:
    """Apply the set fields; None if the new email belongs to someone else."""
    changes = data.model_dump(exclude_unset=True)
    email = changes.pop("email", None)
    if email and email.lower() != user.email:
        if await get_user_by_email(session, email):
            return None
        user.email = email.lower()
    for key, value in changes.items():
        if key == "full_name" and not value:
            continue
        setattr(user, key, value)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def delete_employee(session: AsyncSession, business_id: int, employee_id: int) -> bool:
    """Delete the employee, their weekly schedule, appointments and tokens."""
    employee = await get_employee(session, business_id, employee_id)
    if not employee:
        return False
    await session.execute(delete(WeeklySchedule).where(WeeklySchedule.employee_id == employee.id))
    await session.execute(delete(Appointment).where(Appointment.employee_id == employee.id))
    await session.execute(delete(RefreshToken).where(RefreshToken.user_id == employee.id))
    await session.delete(employee)
    await session.flush()
    return True
