"""
Тесты нормализации идентификаторов отправителей.
"""

import pytest

from core.phone import format_phone, normalize_phone


class TestNormalizePhone:
    """Все формы одного номера сводятся к одной строке."""

    @pytest.mark.parametrize("raw", [
        "994501234567",
        "+994501234567",
        "+994 50 123-45-67",
        "(994) 50-123-45-67",
        "00994501234567",
        "0501234567",
        "994501234567@c.us",
        "994501234567:12@s.whatsapp.net",
        994501234567,
    ])
    def test_equivalent_forms(self, raw):
        assert normalize_phone(raw) == "994501234567"

    def test_telegram_user_id(self):
        assert normalize_phone("123456789") == "123456789"

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1234", "1" * 16, True, 3.5, []])
    def test_invalid_returns_none(self, raw):
        assert normalize_phone(raw) is None

    def test_custom_country_code(self):
        assert normalize_phone("0501234567", country_code="7") == "7501234567"

    def test_idempotent(self):
        once = normalize_phone("+994 50 123 45 67")
        assert normalize_phone(once) == once


class TestFormatPhone:
    """Тесты форматирования номера."""

    def test_azerbaijani_number(self):
        assert format_phone("994501234567") == "+994 50 123-45-67"

    def test_national_form(self):
        assert format_phone("0501234567") == "+994 50 123-45-67"

    def test_other_identity_unchanged(self):
        assert format_phone("123456789") == "123456789"

    def test_empty(self):
        assert format_phone(None) == "Nömrə yoxdur"
