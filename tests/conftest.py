"""Shared test fixtures and helpers."""

import asyncio
import os
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite:///./miturno-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("RESEND_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import miturno.models  # noqa: F401
from miturno.core.db import get_session
from miturno.main import app

API = "/api/v1"
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)


async def _create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@pytest.fixture
def client(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(_create_tables(engine))
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_owner(
    client: TestClient,
    email: str = "owner@example.com",
    business_name: str = "Barbería El Elegante",
    password: str = "secret123",
) -> dict:
    """Register a business owner and return the token pair JSON."""
    resp = client.post(
        f"{API}/auth/register",
        json={
            "business_name": business_name,
            "full_name": "Laura Gómez",
            "email": email,
            "password": password,
            "phone": "3001234567",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def admin_headers(client):
    return auth_headers(register_owner(client)["access_token"])


def create_service(client, headers, name="Corte", duration=30, price=25000) -> dict:
    resp = client.post(
        f"{API}/admin/services",
        json={"name": name, "price": price, "duration_minutes": duration},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_employee(client, headers, email="ana@example.com", full_name="Ana Ruiz") -> dict:
    resp = client.post(
        f"{API}/admin/employees",
        json={"full_name": full_name, "email": email, "password": "secret1", "phone": "3109876543"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def set_schedule(client, headers, employee_id, weekday, open_time="09:00", close_time="10:00", day_off=False):
    resp = client.put(
        f"{API}/admin/employees/{employee_id}/schedule/{weekday}",
        json={"open_time": open_time, "close_time": close_time, "is_day_off": day_off},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def business_slug(client, headers) -> str:
    return client.get(f"{API}/admin/business", headers=headers).json()["slug"]


@pytest.fixture
def shop(client, admin_headers):
    """A business with one 30-minute service and one employee working Mondays 09:00-10:00."""
    service = create_service(client, admin_headers)
    employee = create_employee(client, admin_headers)
    set_schedule(client, admin_headers, employee["id"], weekday=1)
    return {
        "slug": business_slug(client, admin_headers),
        "service": service,
        "employee": employee,
        "headers": admin_headers,
    }


def availability(client, shop, day: date, service_id=None) -> dict:
    resp = client.get(
        f"{API}/public/businesses/{shop['slug']}/availability",
        params={
            "service_id": service_id or shop["service"]["id"],
            "employee_id": shop["employee"]["id"],
            "date": day.isoformat(),
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def book(client, shop, day: date, time: str, email="cliente@example.com", service_id=None):
    return client.post(
        f"{API}/public/businesses/{shop['slug']}/appointments",
        json={
            "service_id": service_id or shop["service"]["id"],
            "employee_id": shop["employee"]["id"],
            "date": day.isoformat(),
            "time": time,
            "client": {"full_name": "Carlos Pérez", "email": email, "phone": "300 555 1234"},
        },
    )
