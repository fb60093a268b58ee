from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.schedule import DAY_OFF_TIME, WeeklySchedule, WeeklySchedulePublic
from miturno.models.user import User
from miturno.services.slot_service import get_schedule_for_weekday


async def list_schedule(session: AsyncSession, employee_id: int) -> list[WeeklySchedule]:
    result = await session.execute(
        select(WeeklySchedule)
        .where(WeeklySchedule.employee_id == employee_id)
        .order_by(WeeklySchedule.weekday)
    )
    return list(result.scalars().all())


async def upsert_schedule_day(
    session: AsyncSession,
    employee: User,
    weekday: int,
    open_time: str,
    close_time: str,
    is_day_off: bool,
) -> WeeklySchedule:
    """Create or replace the single row for (employee, weekday).

    Day-off rows keep "00:00" in both times. Callers validate open < close.
    """
    if is_day_off:
        open_time = close_time = DAY_OFF_TIME
    row = await get_schedule_for_weekday(session, employee.id, weekday)
    if row is None:
        row = WeeklySchedule(
            employee_id=employee.id,
            business_id=employee.business_id,
            weekday=weekday,
        )
    row.open_time = open_time
    row.close_time = close_time
    row.is_day_off = is_day_off
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row


def schedule_to_public(row: WeeklySchedule) -> WeeklySchedulePublic:
    return WeeklySchedulePublic(
        id=row.id,
        employee_id=row.employee_id,
        weekday=row.weekday,
        open_time=row.open_time,
        close_time=row.close_time,
        is_day_off=row.is_day_off,
    )
