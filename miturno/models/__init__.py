from miturno.models.business import Business, BusinessPublic, BusinessUpdate
from miturno.models.user import Role, User, UserCreate, UserPublic, UserUpdate
from miturno.models.refresh_token import RefreshToken
from miturno.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate
from miturno.models.schedule import WeeklySchedule, WeeklySchedulePublic
from miturno.models.client import Client, ClientPublic
from miturno.models.appointment import (
    Appointment,
    AppointmentAdminPublic,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
)

__all__ = [
    "Business",
    "BusinessPublic",
    "BusinessUpdate",
    "Role",
    "User",
    "UserCreate",
    "UserPublic",
    "UserUpdate",
    "RefreshToken",
    "Service",
    "ServiceCreate",
    "ServicePublic",
    "ServiceUpdate",
    "WeeklySchedule",
    "WeeklySchedulePublic",
    "Client",
    "ClientPublic",
    "Appointment",
    "AppointmentAdminPublic",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentStatus",
]
