"""
SQLAlchemy модели базы данных.

Модели:
- Ticket: заявка в IT-поддержку
- BannedUser: реестр забаненных отправителей
- Admin: постоянный список администраторов
- AdminProfile: отображаемые имена администраторов (/register)
- Feedback: оценки решённых тикетов (/rate)
- BotSettings: настройки, изменяемые командами (группа дежурных)
- AdminAction: аудит административных действий
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


TICKET_STATUS_OPEN = "open"
TICKET_STATUS_LONG_TERM = "long_term"
TICKET_STATUS_SOLVED = "solved"

TICKET_STATUSES = (TICKET_STATUS_OPEN, TICKET_STATUS_LONG_TERM, TICKET_STATUS_SOLVED)


class Base(DeclarativeBase):
    """Базовый класс для всех моделей."""
    pass


class Ticket(Base):
    """
    Модель тикета IT-поддержки.

    Тикеты никогда не удаляются. Поле solved_at для статуса long_term
    хранит время перевода в долгосрочные.

    Attributes:
        requester: Нормализованный идентификатор автора
        requester_name: Отображаемое имя автора
        requester_chat_id: Чат автора (для уведомления о решении)
        phone: Отформатированный номер/ID автора
        corpus: Корпус ("1" или "2")
        room: Номер комнаты
        problem: Категория или описание проблемы
        status: open, long_term, solved
        assigned_admin: Идентификатор назначенного администратора
        assigned_admin_name: Имя назначенного администратора
        solution: Описание решения
    """

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Автор
    requester: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        index=True,
    )
    requester_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="İstifadəçi",
    )
    requester_chat_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
    )

    # Место и проблема
    corpus: Mapped[str] = mapped_column(
        String(2),
        nullable=False,
    )
    room: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    problem: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Статус тикета
    status: Mapped[str] = mapped_column(
        String(20),
        default=TICKET_STATUS_OPEN,
        nullable=False,
        index=True,
    )  # 'open', 'long_term', 'solved'

    # Назначение
    assigned_admin: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
        index=True,
    )
    assigned_admin_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    solution: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Timestamps (местное время)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        index=True,
    )
    solved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'long_term', 'solved')",
            name="check_ticket_status",
        ),
        Index("idx_tickets_admin_status", "assigned_admin", "status"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, status={self.status}, room=K{self.corpus}-{self.room})>"


class BannedUser(Base):
    """Забаненный отправитель. Его сообщения логируются без ответа."""

    __tablename__ = "banned_users"

    phone: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
    )
    reason: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )  # 'manual', 'spam', 'login_failures'
    banned_by: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<BannedUser(phone={self.phone}, reason={self.reason})>"


class Admin(Base):
    """Постоянный администратор (вход через /login не нужен)."""

    __tablename__ = "admins"

    phone: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
    )
    added_by: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Admin(phone={self.phone})>"


class AdminProfile(Base):
    """Имя администратора для тикетов и уведомлений."""

    __tablename__ = "admin_profiles"

    phone: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AdminProfile(phone={self.phone}, name={self.name})>"


class Feedback(Base):
    """
    Оценка решённого тикета.

    Одна оценка на тикет (уникальный ticket_id).
    """

    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    ticket_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tickets.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    user_phone: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Feedback(ticket={self.ticket_id}, rating={self.rating})>"


class AdminAction(Base):
    """
    Логирование действий администратора.

    Хранит все административные действия для аудита:
    - Бан/разбан отправителей (в том числе автоматический)
    - Добавление/удаление администраторов
    - Изменение настроек

    Attributes:
        admin_phone: Идентификатор администратора ("system" для автобана)
        action_type: Тип действия (ban, unban, auto_ban, admin_add, ...)
        target: Идентификатор цели (если применимо)
        details: Детали действия в JSON формате
    """

    __tablename__ = "admin_actions"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    admin_phone: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        index=True,
    )
    action_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )
    target: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )
    details: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<AdminAction(id={self.id}, type={self.action_type}, admin={self.admin_phone})>"


class BotSettings(Base):
    """
    Настройки бота, изменяемые командами.

    Например, ID группы дежурных, сохранённый через /groupid.
    """

    __tablename__ = "bot_settings"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<BotSettings(key={self.key}, value={self.value})>"
