import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.deps import Capability, require
from miturno.api.schemas.admin import AppointmentStatusRequest
from miturno.api.schemas.booking import BookAppointmentRequest
from miturno.core.db import get_session
from miturno.models.appointment import AppointmentAdminPublic, AppointmentCreate, AppointmentStatus
from miturno.models.user import User
from miturno.services.appointment_service import (
    create_appointment,
    delete_appointment,
    find_or_create_client,
    get_appointment_details,
    list_business_appointments,
    row_to_admin_public,
    set_appointment_status,
)
from miturno.services.business_service import get_business
from miturno.services.catalog_service import get_service
from miturno.services.email_service import (
    appointment_email_for,
    send_appointment_cancellation_email,
    send_appointment_confirmation_email,
)
from miturno.services.employee_service import get_employee

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/appointments", tags=["appointments"])

manage_appointments = require(Capability.MANAGE_APPOINTMENTS)


@router.get("", response_model=list[AppointmentAdminPublic])
async def list_appointments(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_appointments),
) -> list[AppointmentAdminPublic]:
    """All appointments of the business with client, employee and service details, latest first."""
    rows = await list_business_appointments(session, current_user.business_id, status_filter)
    return [row_to_admin_public(row) for row in rows]


@router.post("", response_model=AppointmentAdminPublic, status_code=status.HTTP_201_CREATED)
async def add_appointment(
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_appointments),
) -> AppointmentAdminPublic:
    """Book on behalf of a client (phone or walk-in); same slot rules as the public page."""
    business_id = current_user.business_id
    service = await get_service(session, business_id, body.service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    employee = await get_employee(session, business_id, body.employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    client = await find_or_create_client(
        session,
        business_id,
        full_name=body.client.full_name,
        email=body.client.email,
        phone=body.client.phone,
    )
    appointment = await create_appointment(
        session,
        business_id,
        AppointmentCreate(
            employee_id=employee.id,
            client_id=client.id,
            service_id=service.id,
            starts_at=body.starts_at(),
            duration_minutes=service.duration_minutes,
            notes=body.notes,
        ),
    )
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Selected time is no longer available",
        )
    logger.info("Admin user_id=%s created appointment_id=%s", current_user.id, appointment.id)
    row = (appointment, client, employee, service)
    business = await get_business(session, business_id)
    if business:
        background_tasks.add_task(send_appointment_confirmation_email, appointment_email_for(row, business))
    return row_to_admin_public(row)


@router.patch("/{appointment_id}", response_model=AppointmentAdminPublic)
async def change_status(
    appointment_id: int,
    body: AppointmentStatusRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_appointments),
) -> AppointmentAdminPublic:
    row = await get_appointment_details(session, current_user.business_id, appointment_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    appointment = row[0]
    previous = appointment.status
    if not await set_appointment_status(session, appointment, body.status):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change status from {previous} to {body.status.value}",
        )
    if previous != appointment.status and appointment.status == AppointmentStatus.CANCELLED.value:
        logger.info("Cancelled appointment_id=%s", appointment.id)
        business = await get_business(session, current_user.business_id)
        if business:
            background_tasks.add_task(
                send_appointment_cancellation_email,
                appointment_email_for(row, business),
            )
    return row_to_admin_public(row)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_appointments),
) -> None:
    if not await delete_appointment(session, current_user.business_id, appointment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
