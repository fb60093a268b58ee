import logging
from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.schemas.booking import (
    AvailabilityResponse,
    BookAppointmentRequest,
    BusinessPage,
    EmployeeCard,
)
from miturno.core.db import get_session
from miturno.models.appointment import AppointmentCreate, AppointmentPublic
from miturno.models.business import Business, BusinessPublic
from miturno.models.service import Service
from miturno.models.user import User
from miturno.services.appointment_service import (
    appointment_to_public,
    create_appointment,
    find_or_create_client,
)
from miturno.services.business_service import (
    business_to_public,
    get_business_by_slug,
    get_public_catalog,
    list_businesses,
)
from miturno.services.catalog_service import get_service, service_to_public
from miturno.services.email_service import appointment_email_for, send_appointment_confirmation_email
from miturno.services.employee_service import get_employee
from miturno.services.slot_service import get_available_slots_for_date

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/public", tags=["public"])

DAY_OFF_MESSAGE = "This employee does not work that day"
NO_SLOTS_MESSAGE = "No available times for this date"
LOAD_FAILED_MESSAGE = "Could not load available times"


async def _business_or_404(session: AsyncSession, slug: str) -> Business:
    business = await get_business_by_slug(session, slug)
    if not business:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    return business


async def _service_and_employee(
    session: AsyncSession, business: Business, service_id: int, employee_id: int
) -> tuple[Service, User]:
    service = await get_service(session, business.id, service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    employee = await get_employee(session, business.id, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return service, employee


@router.get("/businesses", response_model=list[BusinessPublic])
async def businesses(session: AsyncSession = Depends(get_session)) -> list[BusinessPublic]:
    return [business_to_public(b) for b in await list_businesses(session)]


@router.get("/businesses/{slug}", response_model=BusinessPage)
async def business_page(slug: str, session: AsyncSession = Depends(get_session)) -> BusinessPage:
    business = await _business_or_404(session, slug)
    services, employees = await get_public_catalog(session, business.id)
    return BusinessPage(
        business=business_to_public(business),
        services=[service_to_public(s) for s in services],
        employees=[EmployeeCard(id=e.id, full_name=e.full_name, photo_url=e.photo_url) for e in employees],
    )


@router.get("/businesses/{slug}/availability", response_model=AvailabilityResponse)
async def availability(
    slug: str,
    service_id: int = Query(...),
    employee_id: int = Query(...),
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
) -> AvailabilityResponse:
    """Start times ("HH:MM") still bookable for the service with this employee on the date."""
    business = await _business_or_404(session, slug)
    service, employee = await _service_and_employee(session, business, service_id, employee_id)
    try:
        result = await get_available_slots_for_date(session, employee.id, service.duration_minutes, date_param)
    except SQLAlchemyError as e:
        logger.exception("Availability lookup failed for employee_id=%s date=%s: %s", employee.id, date_param, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=LOAD_FAILED_MESSAGE) from e
    message = None
    if result.day_off:
        message = DAY_OFF_MESSAGE
    elif not result.slots:
        message = NO_SLOTS_MESSAGE
    return AvailabilityResponse(
        date=date_param.isoformat(),
        employee_id=employee.id,
        service_id=service.id,
        duration_minutes=service.duration_minutes,
        slots=result.slots,
        day_off=result.day_off,
        message=message,
    )


@router.post(
    "/businesses/{slug}/appointments",
    response_model=AppointmentPublic,
    status_code=status.HTTP_201_CREATED,
)
async def book_appointment(
    slug: str,
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    business = await _business_or_404(session, slug)
    service, employee = await _service_and_employee(session, business, body.service_id, body.employee_id)
    client = await find_or_create_client(
        session,
        business.id,
        full_name=body.client.full_name,
        email=body.client.email,
        phone=body.client.phone,
    )
    appointment = await create_appointment(
        session,
        business.id,
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
    logger.info(
        "Booked appointment_id=%s business=%s employee_id=%s at %s",
        appointment.id,
        business.slug,
        employee.id,
        appointment.starts_at,
    )
    background_tasks.add_task(
        send_appointment_confirmation_email,
        appointment_email_for((appointment, client, employee, service), business),
    )
    return appointment_to_public(appointment)
