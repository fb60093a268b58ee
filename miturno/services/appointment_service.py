from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.models.appointment import (
    Appointment,
    AppointmentAdminPublic,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
)
from miturno.models.client import Client
from miturno.models.service import Service
from miturno.models.user import User
from miturno.services.slot_service import get_available_slots_for_date

AppointmentRow = tuple[Appointment, Client, User, Service]


async def find_or_create_client(
    session: AsyncSession, business_id: int, full_name: str, email: str, phone: str
) -> Client:
    email = email.lower()
    result = await session.execute(
        select(Client).where(Client.business_id == business_id, Client.email == email)
    )
    client = result.scalar_one_or_none()
    if client:
        return client
    client = Client(business_id=business_id, full_name=full_name, email=email, phone=phone)
    session.add(client)
    await session.flush()
    await session.refresh(client)
    return client


async def is_slot_available(
    session: AsyncSession, employee_id: int, duration_minutes: int, starts_at: datetime
) -> bool:
    availability = await get_available_slots_for_date(
        session, employee_id, duration_minutes, starts_at.date()
    )
    return starts_at.strftime("%H:%M") in availability.slots


async def create_appointment(
    session: AsyncSession, business_id: int, data: AppointmentCreate
) -> Appointment | None:
    """Store a confirmed appointment; None if the start is not an offered slot."""
    starts_at = data.starts_at.replace(second=0, microsecond=0, tzinfo=None)
    if not await is_slot_available(session, data.employee_id, data.duration_minutes, starts_at):
        return None
    appointment = Appointment(
        business_id=business_id,
        employee_id=data.employee_id,
        client_id=data.client_id,
        service_id=data.service_id,
        starts_at=starts_at,
        ends_at=starts_at + timedelta(minutes=data.duration_minutes),
        status=AppointmentStatus.CONFIRMED.value,
        notes=data.notes,
    )
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


def _detailed_query():
    return (
        select(Appointment, Client, User, Service)
        .join(Client, Client.id == Appointment.client_id)
        .join(User, User.id == Appointment.employee_id)
        .join(Service, Service.id == Appointment.service_id)
    )


async def list_business_appointments(
    session: AsyncSession, business_id: int, status: AppointmentStatus | None = None
) -> list[AppointmentRow]:
    q = _detailed_query().where(Appointment.business_id == business_id)
    if status:
        q = q.where(Appointment.status == status.value)
    q = q.order_by(Appointment.starts_at.desc(), Appointment.id.desc())
    result = await session.execute(q)
    return [tuple(row) for row in result.all()]


async def get_appointment_details(
    session: AsyncSession, business_id: int, appointment_id: int
) -> AppointmentRow | None:
    result = await session.execute(
        _detailed_query().where(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id,
        )
    )
    row = result.first()
    return tuple(row) if row else None


async def set_appointment_status(
    session: AsyncSession, appointment: Appointment, status: AppointmentStatus
) -> bool:
    """Apply a status change. Only confirmed -> cancelled is allowed; same status is a no-op."""
    if appointment.status == status.value:
        return True
    if not (appointment.status == AppointmentStatus.CONFIRMED.value and status == AppointmentStatus.CANCELLED):
        return False
    appointment.status = status.value
    session.add(appointment)
    await session.flush()
    return True


async def delete_appointment(session: AsyncSession, business_id: int, appointment_id: int) -> bool:
    result = await session.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        return False
    await session.delete(appointment)
    await session.flush()
    return True


async def list_employee_appointments(
    session: AsyncSession, employee_id: int, from_date: date | None = None
) -> list[AppointmentRow]:
    q = _detailed_query().where(Appointment.employee_id == employee_id)
    if from_date:
        q = q.where(Appointment.starts_at >= datetime.combine(from_date, time.min))
    result = await session.execute(q.order_by(Appointment.starts_at))
    return [tuple(row) for row in result.all()]


def appointment_to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        business_id=a.business_id,
        employee_id=a.employee_id,
        client_id=a.client_id,
        service_id=a.service_id,
        starts_at=a.starts_at,
        ends_at=a.ends_at,
        status=a.status,
        notes=a.notes,
        created_at=a.created_at,
    )


def row_to_admin_public(row: AppointmentRow) -> AppointmentAdminPublic:
    a, client, employee, service = row
    return AppointmentAdminPublic(
        **appointment_to_public(a).model_dump(),
        client_full_name=client.full_name,
        client_email=client.email,
        client_phone=client.phone,
        employee_full_name=employee.full_name,
        service_name=service.name,
        service_price=service.price,
    )
