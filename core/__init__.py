"""
Модуль бизнес-логики helpdesk-бота.

Содержит:
- phone.py - нормализация идентификаторов отправителей
- validators.py - проверка ответов мастера и аргументов команд
- conversation.py - машина состояний мастера создания тикета
- login.py - вход администратора и сессии
- rate_limiter.py - лимиты создания тикетов
- spam.py - автобан за спам
- exceptions.py - кастомные исключения
"""

from core.exceptions import (
    HelpdeskError,
    ValidationError,
    AuthorizationError,
    TicketNotFoundError,
    ConfigurationError,
)
from core.phone import format_phone, normalize_phone


__all__ = [
    # Exceptions
    "HelpdeskError",
    "ValidationError",
    "AuthorizationError",
    "TicketNotFoundError",
    "ConfigurationError",
    # Identity
    "normalize_phone",
    "format_phone",
]
