from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from miturno.utils import utc_naive_now


class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    business_id: int = Field(foreign_key="businesses.id", index=True)
    employee_id: int = Field(foreign_key="users.id", index=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    service_id: int = Field(foreign_key="services.id", index=True)
    # wall-clock time of the business, no timezone conversion
    starts_at: datetime = Field(index=True)
    ends_at: datetime
    status: str = Field(default=AppointmentStatus.CONFIRMED.value, index=True)
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class AppointmentCreate(SQLModel):
    employee_id: int
    client_id: int
    service_id: int
    starts_at: datetime
    duration_minutes: int
    notes: str | None = None


class AppointmentPublic(SQLModel):
    id: int
    business_id: int
    employee_id: int
    client_id: int
    service_id: int
    starts_at: datetime
    ends_at: datetime
    status: str
    notes: str | None = None
    created_at: datetime


class AppointmentAdminPublic(AppointmentPublic):
    client_full_name: str
    client_email: str
    client_phone: str
    employee_full_name: str
    service_name: str
    service_price: float
