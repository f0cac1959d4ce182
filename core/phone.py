"""
Нормализация идентификаторов отправителей.

Отправитель может прийти в разных формах: с суффиксом канала
(994501234567@c.us), с номером устройства (994501234567:12@s.whatsapp.net),
с ведущим "+", пробелами и дефисами, с международным префиксом 00
или в национальном формате 0501234567. Все они сводятся к одной
канонической строке из цифр.
"""

import re
from typing import Optional


DEFAULT_COUNTRY_CODE = "994"

MIN_IDENTITY_DIGITS = 5
MAX_IDENTITY_DIGITS = 15

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(raw: object, country_code: str = DEFAULT_COUNTRY_CODE) -> Optional[str]:
    """
    Привести адрес к канонической форме из цифр.

    Чистая и тотальная функция: никогда не бросает исключений.

    Args:
        raw: Исходный адрес отправителя
        country_code: Код страны для национального формата 0XXXXXXXXX

    Returns:
        Строка цифр или None, если адрес не похож на номер
    """
    if not isinstance(raw, (str, int)) or isinstance(raw, bool):
        return None

    value = str(raw).strip()
    if not value:
        return None

    # Суффикс канала и номер устройства
    value = value.split("@", 1)[0]
    value = value.split(":", 1)[0]

    digits = _NON_DIGITS.sub("", value)
    if not digits:
        return None

    if digits.startswith("00"):
        digits = digits[2:]
    elif len(digits) == 10 and digits.startswith("0"):
        digits = country_code + digits[1:]

    if not MIN_IDENTITY_DIGITS <= len(digits) <= MAX_IDENTITY_DIGITS:
        return None

    return digits


def format_phone(raw: object, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Человекочитаемый номер: +994 50 123-45-67.

    Для идентификаторов другой длины возвращает цифры как есть.
    """
    identity = normalize_phone(raw, country_code)
    if not identity:
        return "Nömrə yoxdur"

    if identity.startswith(country_code) and len(identity) == len(country_code) + 9:
        local = identity[len(country_code):]
        return f"+{country_code} {local[:2]} {local[2:5]}-{local[5:7]}-{local[7:9]}"

    return identity
