"""Formatting and validation helpers shared by services and email templates."""

import re
import unicodedata
from datetime import UTC, datetime

from miturno.core.config import settings

_NON_DIGITS = re.compile(r"\D")


def utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_slug(text: str) -> str:
    """URL-friendly slug: "Barbería El Elegante" -> "barberia-el-elegante"."""
    normalized = unicodedata.normalize("NFD", text.lower())
    without_accents = "".join(c for c in normalized if unicodedata.category(c) != "Mn")
    cleaned = re.sub(r"[^a-z0-9\s-]", "", without_accents).strip()
    dashed = re.sub(r"\s+", "-", cleaned)
    return re.sub(r"-+", "-", dashed)


def format_currency(amount: float) -> str:
    """Whole-unit amount with dot thousands separators, e.g. 50000 -> "$50.000"."""
    return f"{settings.currency_symbol}{round(amount):,}".replace(",", ".")


def digits_only(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def is_valid_phone(phone: str) -> bool:
    return len(digits_only(phone)) == 10


def format_phone(phone: str) -> str:
    """"3001234567" -> "300 123 4567"; anything that is not 10 digits is returned as given."""
    digits = digits_only(phone)
    if len(digits) == 10:
        return f"{digits[:3]} {digits[3:6]} {digits[6:]}"
    return phone


def minutes_to_text(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}min"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}min"
