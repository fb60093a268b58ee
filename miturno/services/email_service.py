import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

import httpx

from miturno.core.config import settings
from miturno.models.appointment import Appointment
from miturno.models.business import Business
from miturno.models.client import Client
from miturno.models.service import Service
from miturno.models.user import User
from miturno.utils import format_currency, format_phone, minutes_to_text

logger = logging.getLogger(__name__)


@dataclass
class AppointmentEmail:
    """Everything the client-facing templates show about one appointment."""

    to_email: str
    client_name: str
    business_name: str
    service_name: str
    employee_name: str
    starts_at: datetime
    duration_minutes: int
    price: float
    business_phone: str | None = None


def appointment_email_for(
    row: tuple[Appointment, Client, User, Service], business: Business
) -> AppointmentEmail:
    appointment, client, employee, service = row
    return AppointmentEmail(
        to_email=client.email,
        client_name=client.full_name,
        business_name=business.name,
        business_phone=business.phone,
        service_name=service.name,
        employee_name=employee.full_name,
        starts_at=appointment.starts_at,
        duration_minutes=int((appointment.ends_at - appointment.starts_at).total_seconds() // 60),
        price=service.price,
    )


def _send_via_smtp(to_email: str, subject: str, html_body: str) -> None:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_password)
        server.sendmail(settings.from_email, [to_email], msg.as_string())


def _send_via_resend(to_email: str, subject: str, html_body: str) -> None:
    resp = httpx.post(
        settings.resend_api_url,
        json={
            "from": f"{settings.from_name} <{settings.from_email}>",
            "to": [to_email],
            "subject": subject,
            "html": html_body,
        },
        headers={"Authorization": f"Bearer {settings.resend_api_key}"},
        timeout=10.0,
    )
    resp.raise_for_status()


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email (blocking). Use from background task; failures are logged, not raised."""
    if not settings.email_enabled:
        logger.debug("Email disabled (%s not configured), skipping send", settings.email_provider)
        return
    try:
        if settings.email_provider == "resend":
            _send_via_resend(to_email, subject, html_body)
        else:
            _send_via_smtp(to_email, subject, html_body)
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def _details_table(data: AppointmentEmail) -> str:
    rows = [
        ("Servicio", data.service_name),
        ("Empleado", data.employee_name),
        ("Fecha", data.starts_at.strftime("%d/%m/%Y")),
        ("Hora", f"{data.starts_at.strftime('%H:%M')} ({minutes_to_text(data.duration_minutes)})"),
        ("Precio", format_currency(data.price)),
    ]
    cells = "".join(
        f'<p style="margin:12px 0 0 0;font-size:12px;text-transform:uppercase;color:#6b7280;">{label}</p>'
        f'<p style="margin:0;font-size:16px;font-weight:600;color:#111827;">{escape(value)}</p>'
        for label, value in rows
    )
    return (
        '<table role="presentation" width="100%" cellspacing="0" cellpadding="0" '
        'style="background:#f9fafb;border-radius:8px;margin-bottom:24px;">'
        f'<tr><td style="padding:8px 24px 20px 24px;">{cells}</td></tr></table>'
    )


def _layout(title: str, heading: str, intro: str, body: str, data: AppointmentEmail) -> str:
    contact = escape(format_phone(data.business_phone)) if data.business_phone else escape(settings.site_name)
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin:0;padding:0;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background-color:#f3f4f6;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#f3f4f6;">
    <tr>
      <td align="center" style="padding:40px 16px;">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:560px;background:#ffffff;border-radius:12px;overflow:hidden;">
          <tr>
            <td style="padding:32px 32px 24px 32px;">
              <h1 style="margin:0 0 8px 0;font-size:22px;font-weight:600;color:#111827;">{heading}</h1>
              <p style="margin:0 0 24px 0;font-size:15px;color:#6b7280;">{intro}</p>
              {body}
            </td>
          </tr>
          <tr>
            <td style="padding:24px 32px 32px 32px;background:#f9fafb;border-top:1px solid #e5e7eb;">
              <p style="margin:0;font-size:13px;font-weight:600;color:#111827;">{escape(data.business_name)}</p>
              <p style="margin:0;font-size:13px;color:#6b7280;">{contact}</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def build_confirmation_html(data: AppointmentEmail) -> str:
    return _layout(
        title="Confirmación de Cita",
        heading="¡Cita confirmada!",
        intro=f"Hola {escape(data.client_name) or 'cliente'}, tu cita quedó reservada.",
        body=_details_table(data)
        + '<p style="margin:0;font-size:14px;color:#374151;">Si necesitas cancelar, contáctanos.</p>',
        data=data,
    )


def build_cancellation_html(data: AppointmentEmail) -> str:
    return _layout(
        title="Cita Cancelada",
        heading="Tu cita fue cancelada",
        intro=f"Hola {escape(data.client_name) or 'cliente'}, la siguiente cita ya no está vigente.",
        body=_details_table(data)
        + '<p style="margin:0;font-size:14px;color:#374151;">Puedes reservar un nuevo horario cuando quieras.</p>',
        data=data,
    )


def send_appointment_confirmation_email(data: AppointmentEmail) -> None:
    """Compose and send the booking confirmation (call from background task)."""
    subject = f"{data.business_name} – Confirmación de Cita"
    _send_email_sync(data.to_email, subject, build_confirmation_html(data))


def send_appointment_cancellation_email(data: AppointmentEmail) -> None:
    subject = f"{data.business_name} – Cita Cancelada"
    _send_email_sync(data.to_email, subject, build_cancellation_html(data))
