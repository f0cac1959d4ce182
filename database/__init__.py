"""
Модуль базы данных helpdesk-бота.

Содержит:
- models.py - SQLAlchemy модели (Ticket, BannedUser, Admin, AdminProfile, Feedback, ...)
- crud.py - операции с тикетами
- admin_crud.py - баны, администраторы, оценки, настройки, аудит
- database.py - подключение к БД, async engine
"""

from database.database import close_db, get_session, init_db
from database.models import (
    Admin,
    AdminAction,
    AdminProfile,
    BannedUser,
    Base,
    BotSettings,
    Feedback,
    Ticket,
    TICKET_STATUS_LONG_TERM,
    TICKET_STATUS_OPEN,
    TICKET_STATUS_SOLVED,
)


__all__ = [
    # Database
    "init_db",
    "close_db",
    "get_session",
    # Models
    "Base",
    "Ticket",
    "BannedUser",
    "Admin",
    "AdminProfile",
    "Feedback",
    "AdminAction",
    "BotSettings",
    # Statuses
    "TICKET_STATUS_OPEN",
    "TICKET_STATUS_LONG_TERM",
    "TICKET_STATUS_SOLVED",
]
