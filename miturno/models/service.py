from datetime import datetime

from sqlmodel import Field, SQLModel

from miturno.core.config import settings
from miturno.utils import utc_naive_now


class ServiceBase(SQLModel):
    name: str
    description: str | None = None
    price: float = Field(ge=0)
    duration_minutes: int = Field(default=settings.default_service_duration_minutes, gt=0)
    image_url: str | None = None


class Service(ServiceBase, table=True):
    __tablename__ = "services"
    id: int | None = Field(default=None, primary_key=True)
    business_id: int = Field(foreign_key="businesses.id", index=True)
    created_at: datetime = Field(default_factory=utc_naive_now)


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(SQLModel):
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration_minutes: int | None = Field(default=None, gt=0)
    image_url: str | None = None


class ServicePublic(ServiceBase):
    id: int
    business_id: int
