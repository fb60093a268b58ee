from datetime import datetime

from sqlmodel import Field, SQLModel

from miturno.utils import utc_naive_now


class Business(SQLModel, table=True):
    __tablename__ = "businesses"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(unique=True, index=True)
    phone: str | None = None
    address: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class BusinessUpdate(SQLModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None


class BusinessPublic(SQLModel):
    id: int
    name: str
    slug: str
    phone: str | None = None
    address: str | None = None
