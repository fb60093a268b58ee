"""Tests for formatting/validation helpers."""

from datetime import UTC, datetime, timedelta

from miturno.utils import (
    format_currency,
    format_phone,
    generate_slug,
    is_valid_phone,
    minutes_to_text,
    utc_naive_now,
)


class TestGenerateSlug:
    def test_strips_accents_and_spaces(self):
        assert generate_slug("Barbería El Elegante") == "barberia-el-elegante"

    def test_drops_symbols_and_collapses_dashes(self):
        assert generate_slug("  Spa & Uñas -- Centro  ") == "spa-unas-centro"

    def test_empty_when_nothing_usable(self):
        assert generate_slug("¡¿!?") == ""


class TestMinutesToText:
    def test_minutes_only(self):
        assert minutes_to_text(45) == "45min"

    def test_hours_and_minutes(self):
        assert minutes_to_text(90) == "1h 30min"

    def test_whole_hours(self):
        assert minutes_to_text(120) == "2h"


class TestPhone:
    def test_ten_digits_valid(self):
        assert is_valid_phone("300 123 4567")
        assert is_valid_phone("(300) 123-4567")

    def test_wrong_length_invalid(self):
        assert not is_valid_phone("12345")

    def test_format(self):
        assert format_phone("3001234567") == "300 123 4567"
        assert format_phone("12345") == "12345"


def test_format_currency_uses_dot_thousands():
    assert format_currency(50000) == "$50.000"
    assert format_currency(1234567.4) == "$1.234.567"
    assert format_currency(0) == "$0"


def test_utc_naive_now_is_naive_utc():
    now = utc_naive_now()
    assert now.tzinfo is None
    assert abs(datetime.now(UTC).replace(tzinfo=None) - now) < timedelta(seconds=5)
