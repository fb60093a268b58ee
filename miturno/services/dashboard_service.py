from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.appointment import Appointment, AppointmentStatus
from miturno.models.service import Service
from miturno.models.user import User


@dataclass
class DashboardStats:
    total_appointments: int
    confirmed_appointments: int
    cancelled_appointments: int
    total_revenue: float
    revenue_this_month: float
    most_popular_service: str | None
    top_employee: str | None


async def _count_by_status(session: AsyncSession, business_id: int) -> dict[str, int]:
    result = await session.execute(
        select(Appointment.status, func.count(Appointment.id))
        .where(Appointment.business_id == business_id)
        .group_by(Appointment.status)
    )
    return {status: count for status, count in result.all()}


async def _confirmed_revenue(
    session: AsyncSession, business_id: int, since: datetime | None = None
) -> float:
    q = (
        select(func.coalesce(func.sum(Service.price), 0))
        .select_from(Appointment)
        .join(Service, Service.id == Appointment.service_id)
        .where(
            Appointment.business_id == business_id,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
        )
    )
    if since is not None:
        q = q.where(Appointment.starts_at >= since)
    result = await session.execute(q)
    return float(result.scalar_one())


async def _top_name(session: AsyncSession, business_id: int, model, key_column, name_column) -> str | None:
    """Name of the entity with most confirmed appointments; ties go to the lowest id."""
    booked = func.count(Appointment.id)
    result = await session.execute(
        select(name_column)
        .select_from(Appointment)
        .join(model, key_column == model.id)
        .where(
            Appointment.business_id == business_id,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
        )
        .group_by(key_column, name_column)
        .order_by(booked.desc(), key_column)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_dashboard_stats(
    session: AsyncSession, business_id: int, today: date | None = None
) -> DashboardStats:
    today = today or date.today()
    counts = await _count_by_status(session, business_id)
    month_start = datetime(today.year, today.month, 1)
    return DashboardStats(
        total_appointments=sum(counts.values()),
        confirmed_appointments=counts.get(AppointmentStatus.CONFIRMED.value, 0),
        cancelled_appointments=counts.get(AppointmentStatus.CANCELLED.value, 0),
        total_revenue=await _confirmed_revenue(session, business_id),
        revenue_this_month=await _confirmed_revenue(session, business_id, since=month_start),
        most_popular_service=await _top_name(session, business_id, Service, Appointment.service_id, Service.name),
        top_employee=await _top_name(session, business_id, User, Appointment.employee_id, User.full_name),
    )
