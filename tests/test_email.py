"""Email templates and the disabled-provider path."""

from datetime import datetime

import httpx
import pytest

from miturno.services import email_service
from miturno.services.email_service import (
    AppointmentEmail,
    build_cancellation_html,
    build_confirmation_html,
    send_appointment_confirmation_email,
)


@pytest.fixture
def appointment_email():
    return AppointmentEmail(
        to_email="carlos@example.com",
        client_name="Carlos <Pérez>",
        business_name="Barbería El Elegante",
        business_phone="3001234567",
        service_name="Corte",
        employee_name="Ana Ruiz",
        starts_at=datetime(2030, 1, 7, 9, 30),
        duration_minutes=90,
        price=25000,
    )


def test_confirmation_shows_appointment_details(appointment_email):
    html = build_confirmation_html(appointment_email)
    assert "07/01/2030" in html
    assert "09:30 (1h 30min)" in html
    assert "$25.000" in html
    assert "300 123 4567" in html
    assert "Carlos &lt;Pérez&gt;" in html


def test_cancellation_template(appointment_email):
    html = build_cancellation_html(appointment_email)
    assert "Tu cita fue cancelada" in html
    assert "Ana Ruiz" in html


def test_nothing_is_sent_when_email_is_not_configured(appointment_email, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("email should not be sent")

    monkeypatch.setattr(email_service, "_send_via_smtp", fail)
    monkeypatch.setattr(email_service, "_send_via_resend", fail)
    send_appointment_confirmation_email(appointment_email)


def test_provider_errors_are_logged_not_raised(appointment_email, monkeypatch, caplog):
    monkeypatch.setattr(email_service.settings, "email_provider", "resend")
    monkeypatch.setattr(email_service.settings, "resend_api_key", "re_test")
    monkeypatch.setattr(email_service.settings, "from_email", "turnos@example.com")

    def boom(*args, **kwargs):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(email_service.httpx, "post", boom)
    send_appointment_confirmation_email(appointment_email)
    assert "Failed to send email to carlos@example.com" in caplog.text
