from datetime import date as date_type
from datetime import datetime, time as time_type

from pydantic import BaseModel, EmailStr, Field, field_validator

from miturno.models.business import BusinessPublic
from miturno.models.service import ServicePublic
from miturno.utils import digits_only, is_valid_phone

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class EmployeeCard(BaseModel):
    id: int
    full_name: str
    photo_url: str | None = None


class BusinessPage(BaseModel):
    business: BusinessPublic
    services: list[ServicePublic]
    employees: list[EmployeeCard]


class AvailabilityResponse(BaseModel):
    date: str  # YYYY-MM-DD
    employee_id: int
    service_id: int
    duration_minutes: int
    slots: list[str]
    day_off: bool = False
    message: str | None = None


class ClientData(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    phone: str

    @field_validator("phone")
    @classmethod
    def phone_has_ten_digits(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Phone must have 10 digits")
        return digits_only(v)


class BookAppointmentRequest(BaseModel):
    service_id: int
    employee_id: int
    date: date_type
    time: str = Field(pattern=HHMM_PATTERN)
    client: ClientData
    notes: str | None = None

    def starts_at(self) -> datetime:
        hour, minute = (int(part) for part in self.time.split(":"))
        return datetime.combine(self.date, time_type(hour, minute))
