from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.deps import Capability, require
from miturno.api.schemas.admin import ProfileUpdateRequest
from miturno.core.db import get_session
from miturno.models.appointment import AppointmentAdminPublic
from miturno.models.schedule import WeeklySchedulePublic
from miturno.models.user import User, UserPublic, UserUpdate
from miturno.services.appointment_service import list_employee_appointments, row_to_admin_public
from miturno.services.auth_service import user_to_public
from miturno.services.employee_service import update_user_profile
from miturno.services.schedule_service import list_schedule, schedule_to_public

router = APIRouter(prefix="/employee", tags=["employee"])


@router.get("/profile", response_model=UserPublic)
async def profile(current_user: User = Depends(require(Capability.EDIT_OWN_PROFILE))) -> UserPublic:
    return user_to_public(current_user)


@router.put("/profile", response_model=UserPublic)
async def update_profile(
    body: ProfileUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.EDIT_OWN_PROFILE)),
) -> UserPublic:
    user = await update_user_profile(
        session, current_user, UserUpdate(**body.model_dump(exclude_unset=True))
    )
    return user_to_public(user)


@router.get("/schedule", response_model=list[WeeklySchedulePublic])
async def my_schedule(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.VIEW_OWN_SCHEDULE)),
) -> list[WeeklySchedulePublic]:
    return [schedule_to_public(row) for row in await list_schedule(session, current_user.id)]


@router.get("/appointments", response_model=list[AppointmentAdminPublic])
async def my_appointments(
    from_date: date | None = Query(None),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.VIEW_OWN_APPOINTMENTS)),
) -> list[AppointmentAdminPublic]:
    rows = await list_employee_appointments(session, current_user.id, from_date=from_date)
    return [row_to_admin_public(row) for row in rows]
