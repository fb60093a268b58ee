from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.appointment import Appointment, AppointmentStatus
from miturno.models.schedule import WeeklySchedule


def parse_hhmm(value: str) -> int:
    """Minutes since midnight for an "HH:MM" string."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def compute_available_slots(
    open_time: str,
    close_time: str,
    duration_minutes: int,
    booked_starts: Collection[str],
) -> list[str]:
    """Bookable start times on a fixed grid of `duration_minutes` from `open_time`.

    A slot fits while start + duration <= close. A slot is dropped only when its
    "HH:MM" start equals one of `booked_starts`; appointments of other lengths
    are not checked for overlap.
    """
    slots: list[str] = []
    current = parse_hhmm(open_time)
    end = parse_hhmm(close_time)
    while current + duration_minutes <= end:
        start = format_hhmm(current)
        if start not in booked_starts:
            slots.append(start)
        current += duration_minutes
    return slots


@dataclass
class DayAvailability:
    day: date
    slots: list[str] = field(default_factory=list)
    day_off: bool = False


async def get_schedule_for_weekday(
    session: AsyncSession, employee_id: int, weekday: int
) -> WeeklySchedule | None:
    result = await session.execute(
        select(WeeklySchedule).where(
            WeeklySchedule.employee_id == employee_id,
            WeeklySchedule.weekday == weekday,
        )
    )
    return result.scalar_one_or_none()


async def get_booked_starts(session: AsyncSession, employee_id: int, d: date) -> set[str]:
    """"HH:MM" starts of the employee's confirmed appointments on `d`."""
    start = datetime.combine(d, time.min)
    end = start + timedelta(days=1)
    result = await session.execute(
        select(Appointment.starts_at).where(
            Appointment.employee_id == employee_id,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
            Appointment.starts_at >= start,
            Appointment.starts_at < end,
        )
    )
    return {row[0].strftime("%H:%M") for row in result.all()}


async def get_available_slots_for_date(
    session: AsyncSession, employee_id: int, duration_minutes: int, d: date
) -> DayAvailability:
    """A missing schedule row counts as a day off."""
    schedule = await get_schedule_for_weekday(session, employee_id, d.isoweekday())
    if schedule is None or schedule.is_day_off:
        return DayAvailability(day=d, day_off=True)
    booked = await get_booked_starts(session, employee_id, d)
    slots = compute_available_slots(schedule.open_time, schedule.close_time, duration_minutes, booked)
    return DayAvailability(day=d, slots=slots)
