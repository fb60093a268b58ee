from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Client(SQLModel, table=True):
    """Person who booked through the public page; one row per (business, email)."""

    __tablename__ = "clients"
    __table_args__ = (UniqueConstraint("business_id", "email", name="uq_clients_business_email"),)
    id: int | None = Field(default=None, primary_key=True)
    business_id: int = Field(foreign_key="businesses.id", index=True)
    full_name: str
    email: str = Field(index=True)
    phone: str


class ClientPublic(SQLModel):
    id: int
    full_name: str
    email: str
    phone: str
