from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.deps import Capability, require
from miturno.api.schemas.admin import (
    EmployeeCreateRequest,
    EmployeeUpdateRequest,
    ScheduleDayRequest,
)
from miturno.core.db import get_session
from miturno.models.schedule import WeeklySchedulePublic
from miturno.models.user import User, UserCreate, UserPublic, UserUpdate
from miturno.services.auth_service import user_to_public
from miturno.services.employee_service import (
    create_employee,
    delete_employee,
    get_employee,
    list_employees,
    update_user_profile,
)
from miturno.services.schedule_service import list_schedule, schedule_to_public, upsert_schedule_day
from miturno.services.slot_service import parse_hhmm

router = APIRouter(prefix="/admin/employees", tags=["employees"])

manage_employees = require(Capability.MANAGE_EMPLOYEES)
manage_schedules = require(Capability.MANAGE_SCHEDULES)


async def _employee_or_404(session: AsyncSession, admin: User, employee_id: int) -> User:
    employee = await get_employee(session, admin.business_id, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee


@router.get("", response_model=list[UserPublic])
async def employees(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_employees),
) -> list[UserPublic]:
    return [user_to_public(e) for e in await list_employees(session, current_user.business_id)]


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def add_employee(
    body: EmployeeCreateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_employees),
) -> UserPublic:
    employee = await create_employee(
        session,
        current_user.business_id,
        UserCreate(email=body.email, password=body.password, full_name=body.full_name, phone=body.phone),
    )
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )
    return user_to_public(employee)


@router.patch("/{employee_id}", response_model=UserPublic)
async def edit_employee(
    employee_id: int,
    body: EmployeeUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_employees),
) -> UserPublic:
    employee = await _employee_or_404(session, current_user, employee_id)
    updated = await update_user_profile(session, employee, UserUpdate(**body.model_dump(exclude_unset=True)))
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )
    return user_to_public(updated)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_employees),
) -> None:
    if not await delete_employee(session, current_user.business_id, employee_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")


@router.get("/{employee_id}/schedule", response_model=list[WeeklySchedulePublic])
async def employee_schedule(
    employee_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_schedules),
) -> list[WeeklySchedulePublic]:
    employee = await _employee_or_404(session, current_user, employee_id)
    return [schedule_to_public(row) for row in await list_schedule(session, employee.id)]


@router.put("/{employee_id}/schedule/{weekday}", response_model=WeeklySchedulePublic)
async def set_schedule_day(
    employee_id: int,
    body: ScheduleDayRequest,
    weekday: int = Path(..., ge=1, le=7, description="1=Monday .. 7=Sunday"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(manage_schedules),
) -> WeeklySchedulePublic:
    employee = await _employee_or_404(session, current_user, employee_id)
    if not body.is_day_off and parse_hhmm(body.open_time) >= parse_hhmm(body.close_time):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Open time must be earlier than close time",
        )
    row = await upsert_schedule_day(
        session,
        employee,
        weekday,
        open_time=body.open_time,
        close_time=body.close_time,
        is_day_off=body.is_day_off,
    )
    return schedule_to_public(row)
