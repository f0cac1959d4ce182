"""
CRUD операции для администрирования.

Содержит функции для:
- Реестра банов
- Постоянного списка администраторов и их профилей
- Оценок тикетов
- Логирования действий администраторов
- Управления настройками бота
"""

import json
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.database import get_session
from database.models import (
    Admin,
    AdminAction,
    AdminProfile,
    BannedUser,
    BotSettings,
    Feedback,
)


logger = structlog.get_logger()

SYSTEM_ACTOR = "system"

# Ключ настройки с ID группы дежурных
ESCALATION_CHAT_SETTING = "escalation_chat_id"


# ==================== ADMIN ACTIONS LOG ====================

async def log_admin_action(
    admin_phone: str,
    action_type: str,
    target: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    session: Optional[AsyncSession] = None,
) -> AdminAction:
    """
    Логировать административное действие.

    Args:
        admin_phone: Идентификатор администратора ("system" для автоматических)
        action_type: Тип действия (ban, unban, auto_ban, admin_add, ...)
        target: Идентификатор цели
        details: Дополнительные детали
        session: Опциональная существующая сессия (для избежания блокировок)

    Returns:
        Созданный объект AdminAction
    """
    action = AdminAction(
        admin_phone=admin_phone,
        action_type=action_type,
        target=target,
        details=json.dumps(details, ensure_ascii=False) if details else None,
    )

    if session:
        session.add(action)
        await session.flush()
    else:
        async with get_session() as new_session:
            new_session.add(action)
            await new_session.flush()

    logger.info(
        "admin_action_logged",
        admin_phone=admin_phone,
        action_type=action_type,
        target=target,
    )

    return action


async def get_admin_actions(
    limit: int = 50,
    action_type: Optional[str] = None,
) -> List[AdminAction]:
    """История административных действий, новые первыми."""
    async with get_session() as session:
        query = select(AdminAction).order_by(AdminAction.id.desc())
        if action_type:
            query = query.where(AdminAction.action_type == action_type)
        result = await session.execute(query.limit(limit))
        return list(result.scalars().all())


# ==================== BAN REGISTRY ====================

async def is_banned(identity: str) -> bool:
    """Проверить, забанен ли отправитель."""
    async with get_session() as session:
        result = await session.execute(
            select(BannedUser.phone).where(BannedUser.phone == identity)
        )
        return result.scalar_one_or_none() is not None


async def ban_user(
    identity: str,
    reason: str = "manual",
    actor: str = SYSTEM_ACTOR,
    details: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Забанить отправителя. Идемпотентно.

    Args:
        identity: Нормализованный идентификатор
        reason: manual, spam, login_failures
        actor: Кто банит

    Returns:
        True если бан новый, False если уже был
    """
    try:
        async with get_session() as session:
            existing = await session.get(BannedUser, identity)
            if existing is not None:
                return False

            session.add(BannedUser(phone=identity, reason=reason, banned_by=actor))
            await log_admin_action(
                admin_phone=actor,
                action_type="ban" if reason == "manual" else "auto_ban",
                target=identity,
                details={"reason": reason, **(details or {})},
                session=session,
            )
    except IntegrityError:
        # Параллельный бан того же отправителя
        return False

    logger.warning("user_banned", identity=identity, reason=reason, actor=actor)
    return True


async def unban_user(identity: str, actor: str) -> bool:
    """
    Снять бан.

    Returns:
        True если отправитель был в реестре
    """
    async with get_session() as session:
        result = await session.execute(
            delete(BannedUser).where(BannedUser.phone == identity)
        )
        if result.rowcount == 0:
            return False

        await log_admin_action(
            admin_phone=actor,
            action_type="unban",
            target=identity,
            session=session,
        )

    logger.info("user_unbanned", identity=identity, actor=actor)
    return True


async def list_banned() -> List[str]:
    """Все забаненные идентификаторы в порядке добавления."""
    async with get_session() as session:
        result = await session.execute(
            select(BannedUser.phone).order_by(BannedUser.created_at, BannedUser.phone)
        )
        return list(result.scalars().all())


async def count_banned() -> int:
    async with get_session() as session:
        result = await session.execute(select(func.count(BannedUser.phone)))
        return result.scalar() or 0


# ==================== ADMINS ====================

async def is_admin(identity: str) -> bool:
    """Есть ли отправитель в постоянном списке администраторов (БД)."""
    async with get_session() as session:
        result = await session.execute(
            select(Admin.phone).where(Admin.phone == identity)
        )
        return result.scalar_one_or_none() is not None


async def add_admin(identity: str, added_by: str) -> bool:
    """
    Добавить администратора.

    Returns:
        True если добавлен, False если уже был
    """
    async with get_session() as session:
        existing = await session.get(Admin, identity)
        if existing is not None:
            return False

        session.add(Admin(phone=identity, added_by=added_by))
        await log_admin_action(
            admin_phone=added_by,
            action_type="admin_add",
            target=identity,
            session=session,
        )

    logger.info("admin_added", identity=identity, added_by=added_by)
    return True


async def remove_admin(identity: str, removed_by: str) -> bool:
    """Удалить администратора из БД."""
    async with get_session() as session:
        result = await session.execute(delete(Admin).where(Admin.phone == identity))
        if result.rowcount == 0:
            return False

        await log_admin_action(
            admin_phone=removed_by,
            action_type="admin_remove",
            target=identity,
            session=session,
        )

    logger.info("admin_removed", identity=identity, removed_by=removed_by)
    return True


async def list_admins() -> List[str]:
    async with get_session() as session:
        result = await session.execute(select(Admin.phone).order_by(Admin.created_at, Admin.phone))
        return list(result.scalars().all())


# ==================== ADMIN PROFILES ====================

async def get_admin_name(identity: str) -> Optional[str]:
    """Имя из /register или None."""
    async with get_session() as session:
        result = await session.execute(
            select(AdminProfile.name).where(AdminProfile.phone == identity)
        )
        return result.scalar_one_or_none()


async def set_admin_name(identity: str, name: str) -> None:
    """Создать или обновить профиль администратора."""
    async with get_session() as session:
        profile = await session.get(AdminProfile, identity)
        if profile is None:
            session.add(AdminProfile(phone=identity, name=name))
        else:
            profile.name = name

    logger.info("admin_profile_registered", identity=identity, name=name)


# ==================== FEEDBACK ====================

async def get_feedback(ticket_id: int) -> Optional[Feedback]:
    async with get_session() as session:
        result = await session.execute(
            select(Feedback).where(Feedback.ticket_id == ticket_id)
        )
        return result.scalar_one_or_none()


async def create_feedback(ticket_id: int, user_phone: str, rating: int) -> bool:
    """
    Сохранить оценку тикета.

    Returns:
        False если оценка для тикета уже есть
    """
    try:
        async with get_session() as session:
            session.add(Feedback(ticket_id=ticket_id, user_phone=user_phone, rating=rating))
    except IntegrityError:
        return False

    logger.info("feedback_received", ticket_id=ticket_id, rating=rating, user_phone=user_phone)
    return True


# ==================== BOT SETTINGS ====================

async def get_bot_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Получить настройку бота.

    Args:
        key: Ключ настройки
        default: Значение по умолчанию

    Returns:
        Значение настройки или default
    """
    async with get_session() as session:
        result = await session.execute(
            select(BotSettings.value).where(BotSettings.key == key)
        )
        value = result.scalar_one_or_none()
        return value if value is not None else default


async def set_bot_setting(
    key: str,
    value: str,
    admin_phone: Optional[str] = None,
) -> bool:
    """
    Установить настройку бота.

    Args:
        key: Ключ настройки
        value: Новое значение
        admin_phone: Кто меняет (для аудита)

    Returns:
        True если успешно
    """
    async with get_session() as session:
        existing_result = await session.execute(
            select(BotSettings).where(BotSettings.key == key)
        )
        existing = existing_result.scalar_one_or_none()

        if existing:
            old_value = existing.value
            await session.execute(
                update(BotSettings)
                .where(BotSettings.key == key)
                .values(value=value)
            )
        else:
            old_value = None
            session.add(BotSettings(key=key, value=value))

        if admin_phone:
            await log_admin_action(
                admin_phone=admin_phone,
                action_type="setting_change",
                details={"key": key, "old_value": old_value, "new_value": value},
                session=session,
            )

    logger.info("bot_setting_changed", key=key, value=value)
    return True
