from pydantic import BaseModel, EmailStr, Field

from miturno.api.schemas.booking import HHMM_PATTERN
from miturno.core.config import settings
from miturno.models.appointment import AppointmentStatus
from miturno.models.schedule import DAY_OFF_TIME


class EmployeeCreateRequest(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=settings.min_password_length)
    phone: str | None = None


class EmployeeUpdateRequest(BaseModel):
    full_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    photo_url: str | None = None


class ProfileUpdateRequest(BaseModel):
    full_name: str | None = None
    phone: str | None = None


class ScheduleDayRequest(BaseModel):
    open_time: str = Field(default=DAY_OFF_TIME, pattern=HHMM_PATTERN)
    close_time: str = Field(default=DAY_OFF_TIME, pattern=HHMM_PATTERN)
    is_day_off: bool = False


class AppointmentStatusRequest(BaseModel):
    status: AppointmentStatus


class DashboardResponse(BaseModel):
    total_appointments: int
    confirmed_appointments: int
    cancelled_appointments: int
    total_revenue: float
    revenue_this_month: float
    most_popular_service: str | None = None
    top_employee: str | None = None
