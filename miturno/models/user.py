from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from miturno.utils import utc_naive_now


class Role(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    full_name: str
    phone: str | None = None
    photo_url: str | None = None


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    business_id: int = Field(foreign_key="businesses.id", index=True)
    role: str = Field(default=Role.EMPLOYEE.value, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_naive_now)


class UserCreate(SQLModel):
    email: str
    password: str
    full_name: str
    phone: str | None = None


class UserUpdate(SQLModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    photo_url: str | None = None


class UserPublic(SQLModel):
    id: int
    business_id: int
    email: str
    full_name: str
    phone: str | None = None
    photo_url: str | None = None
    role: str
