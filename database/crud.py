"""
CRUD операции для тикетов.

Содержит функции для:
- Создания и получения тикетов
- Переходов статуса (решён, долгосрочный, переоткрыт)
- Назначения администратора с правилом "один активный тикет на админа"
- Списков, поиска и статистики

Каждый переход выполняется одним условным UPDATE, поэтому проверка
условия и запись не разделены гонкой. Если UPDATE не затронул строк,
причина определяется повторным чтением.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import and_, desc, func, or_, select, update
from sqlalchemy.orm import aliased

from core.exceptions import TicketNotFoundError
from database.database import get_session
from database.models import (
    TICKET_STATUS_LONG_TERM,
    TICKET_STATUS_OPEN,
    TICKET_STATUS_SOLVED,
    Ticket,
)
from utils.formatting import day_bounds, now_local


logger = structlog.get_logger()

# Статусы, при которых назначение больше не считается активным
TERMINAL_STATUSES = (TICKET_STATUS_SOLVED, TICKET_STATUS_LONG_TERM)

FIND_RESULTS_LIMIT = 15


@dataclass
class TransitionResult:
    """
    Результат перехода статуса или назначения.

    Attributes:
        ok: Переход выполнен
        reason: Код отказа (not_found, solved, long_term, status, busy,
            already_yours, assigned_to_other, not_yours, not_solved)
        ticket: Тикет после перехода (или текущий при отказе)
        active_ticket_id: ID активного тикета администратора (для busy)
        assigned_name: Имя того, кто уже держит тикет
    """

    ok: bool
    reason: Optional[str] = None
    ticket: Optional[Ticket] = None
    active_ticket_id: Optional[int] = None
    assigned_name: Optional[str] = None


# ==================== СОЗДАНИЕ И ЧТЕНИЕ ====================

async def create_ticket(
    requester: str,
    requester_name: str,
    corpus: str,
    room: str,
    problem: str,
    requester_chat_id: Optional[int] = None,
    phone: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Ticket:
    """
    Создать новый тикет со статусом open.

    Args:
        requester: Нормализованный идентификатор автора
        requester_name: Имя автора
        corpus: Корпус
        room: Номер комнаты
        problem: Категория или описание проблемы
        requester_chat_id: Чат автора
        phone: Отформатированный номер
        created_at: Время создания (по умолчанию текущее местное)

    Returns:
        Созданный объект Ticket
    """
    async with get_session() as session:
        ticket = Ticket(
            requester=requester,
            requester_name=requester_name,
            requester_chat_id=requester_chat_id,
            phone=phone,
            corpus=corpus,
            room=room,
            problem=problem,
            status=TICKET_STATUS_OPEN,
            created_at=created_at or now_local(),
        )
        session.add(ticket)
        await session.flush()
        await session.refresh(ticket)

    logger.info(
        "ticket_created",
        ticket_id=ticket.id,
        requester=requester,
        corpus=corpus,
        room=room,
        problem=problem,
    )
    return ticket


async def get_ticket(ticket_id: int) -> Optional[Ticket]:
    """Получить тикет по ID."""
    async with get_session() as session:
        result = await session.execute(
            select(Ticket).where(Ticket.id == ticket_id)
        )
        return result.scalar_one_or_none()


async def require_ticket(ticket_id: int) -> Ticket:
    """
    Получить тикет по ID.

    Raises:
        TicketNotFoundError: Тикета нет
    """
    ticket = await get_ticket(ticket_id)
    if ticket is None:
        raise TicketNotFoundError(ticket_id)
    return ticket


async def get_active_assignment(admin: str, exclude_id: Optional[int] = None) -> Optional[Ticket]:
    """
    Активный (не решённый и не долгосрочный) тикет администратора.

    Args:
        admin: Идентификатор администратора
        exclude_id: Не учитывать этот тикет
    """
    async with get_session() as session:
        query = select(Ticket).where(
            Ticket.assigned_admin == admin,
            Ticket.status.not_in(TERMINAL_STATUSES),
        )
        if exclude_id is not None:
            query = query.where(Ticket.id != exclude_id)
        result = await session.execute(query.order_by(Ticket.id).limit(1))
        return result.scalar_one_or_none()


# ==================== ПЕРЕХОДЫ СТАТУСА ====================

async def mark_solved(
    ticket_id: int,
    admin: str,
    admin_name: str,
    solution: str,
    solved_at: Optional[datetime] = None,
) -> TransitionResult:
    """
    Отметить тикет решённым (из open или long_term).

    Returns:
        TransitionResult с reason not_found или solved при отказе
    """
    solved_at = solved_at or now_local()

    async with get_session() as session:
        result = await session.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.status != TICKET_STATUS_SOLVED,
            )
            .values(
                status=TICKET_STATUS_SOLVED,
                assigned_admin=admin,
                assigned_admin_name=admin_name,
                solution=solution,
                solved_at=solved_at,
            )
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount

    ticket = await get_ticket(ticket_id)
    if updated == 0:
        return TransitionResult(
            ok=False,
            reason="not_found" if ticket is None else "solved",
            ticket=ticket,
        )

    logger.info("ticket_solved", ticket_id=ticket_id, admin=admin, admin_name=admin_name)
    return TransitionResult(ok=True, ticket=ticket)


async def mark_long_term(
    ticket_id: int,
    admin: str,
    admin_name: str,
    marked_at: Optional[datetime] = None,
) -> TransitionResult:
    """
    Перевести открытый тикет в долгосрочные.

    Время перевода записывается в solved_at.
    """
    marked_at = marked_at or now_local()

    async with get_session() as session:
        result = await session.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.status == TICKET_STATUS_OPEN,
            )
            .values(
                status=TICKET_STATUS_LONG_TERM,
                assigned_admin=admin,
                assigned_admin_name=admin_name,
                solved_at=marked_at,
            )
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount

    ticket = await get_ticket(ticket_id)
    if updated == 0:
        return TransitionResult(
            ok=False,
            reason="not_found" if ticket is None else "status",
            ticket=ticket,
        )

    logger.info("ticket_marked_long_term", ticket_id=ticket_id, admin=admin)
    return TransitionResult(ok=True, ticket=ticket)


async def reopen_ticket(ticket_id: int) -> TransitionResult:
    """
    Переоткрыть решённый тикет.

    Очищает solved_at, назначенного администратора и решение.
    """
    async with get_session() as session:
        result = await session.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.status == TICKET_STATUS_SOLVED,
            )
            .values(
                status=TICKET_STATUS_OPEN,
                solved_at=None,
                assigned_admin=None,
                assigned_admin_name=None,
                solution=None,
            )
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount

    ticket = await get_ticket(ticket_id)
    if updated == 0:
        return TransitionResult(
            ok=False,
            reason="not_found" if ticket is None else "not_solved",
            ticket=ticket,
        )

    logger.info("ticket_reopened", ticket_id=ticket_id)
    return TransitionResult(ok=True, ticket=ticket)


# ==================== НАЗНАЧЕНИЕ ====================

async def assign_ticket(ticket_id: int, admin: str, admin_name: str) -> TransitionResult:
    """
    Назначить открытый тикет администратору.

    Одно условное обновление: тикет открыт, ни за кем не закреплён,
    и у администратора нет другого активного тикета.

    Returns:
        TransitionResult; при busy в active_ticket_id лежит ID
        тикета, которым администратор уже занят
    """
    other = aliased(Ticket)
    admin_is_busy = (
        select(other.id)
        .where(
            other.assigned_admin == admin,
            other.id != ticket_id,
            other.status.not_in(TERMINAL_STATUSES),
        )
        .exists()
    )

    async with get_session() as session:
        result = await session.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.status == TICKET_STATUS_OPEN,
                Ticket.assigned_admin.is_(None),
                ~admin_is_busy,
            )
            .values(assigned_admin=admin, assigned_admin_name=admin_name)
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount

    ticket = await get_ticket(ticket_id)
    if updated:
        logger.info("ticket_assigned", ticket_id=ticket_id, admin=admin, admin_name=admin_name)
        return TransitionResult(ok=True, ticket=ticket)

    # Диагностика отказа
    active = await get_active_assignment(admin, exclude_id=ticket_id)
    if active is not None:
        return TransitionResult(ok=False, reason="busy", ticket=ticket, active_ticket_id=active.id)
    if ticket is None:
        return TransitionResult(ok=False, reason="not_found")
    if ticket.status == TICKET_STATUS_SOLVED:
        return TransitionResult(ok=False, reason="solved", ticket=ticket)
    if ticket.status == TICKET_STATUS_LONG_TERM:
        return TransitionResult(ok=False, reason="long_term", ticket=ticket)
    if ticket.assigned_admin == admin:
        return TransitionResult(ok=False, reason="already_yours", ticket=ticket)

    return TransitionResult(
        ok=False,
        reason="assigned_to_other",
        ticket=ticket,
        assigned_name=ticket.assigned_admin_name or ticket.assigned_admin,
    )


async def unassign_ticket(ticket_id: int, admin: str) -> TransitionResult:
    """
    Снять назначение. Только сам назначенный администратор,
    и только пока тикет не решён.
    """
    async with get_session() as session:
        result = await session.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.assigned_admin == admin,
                Ticket.status != TICKET_STATUS_SOLVED,
            )
            .values(assigned_admin=None, assigned_admin_name=None)
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount

    ticket = await get_ticket(ticket_id)
    if updated:
        logger.info("ticket_unassigned", ticket_id=ticket_id, admin=admin)
        return TransitionResult(ok=True, ticket=ticket)

    if ticket is None:
        return TransitionResult(ok=False, reason="not_found")
    if ticket.assigned_admin != admin:
        return TransitionResult(ok=False, reason="not_yours", ticket=ticket)
    return TransitionResult(ok=False, reason="solved", ticket=ticket)


# ==================== СПИСКИ И ПОИСК ====================

async def list_tickets_by_status(status: str) -> List[Ticket]:
    """Тикеты с указанным статусом, от старых к новым."""
    async with get_session() as session:
        result = await session.execute(
            select(Ticket).where(Ticket.status == status).order_by(Ticket.id)
        )
        return list(result.scalars().all())


async def list_today_tickets(now: Optional[datetime] = None) -> List[Ticket]:
    """Тикеты, созданные сегодня (по местному времени)."""
    start, end = day_bounds(now or now_local())
    async with get_session() as session:
        result = await session.execute(
            select(Ticket)
            .where(and_(Ticket.created_at >= start, Ticket.created_at < end))
            .order_by(Ticket.id)
        )
        return list(result.scalars().all())


async def find_tickets(term: str, limit: int = FIND_RESULTS_LIMIT) -> List[Ticket]:
    """
    Поиск по проблеме, имени автора, комнате, корпусу, решению и ID.

    Returns:
        Не более limit самых новых совпадений
    """
    pattern = f"%{term.lower()}%"
    conditions = [
        func.lower(Ticket.problem).like(pattern),
        func.lower(Ticket.requester_name).like(pattern),
        func.lower(Ticket.room).like(pattern),
        func.lower(Ticket.corpus).like(pattern),
        func.lower(func.coalesce(Ticket.solution, "")).like(pattern),
    ]
    if term.strip().lstrip("#").isdigit():
        conditions.append(Ticket.id == int(term.strip().lstrip("#")))

    async with get_session() as session:
        result = await session.execute(
            select(Ticket)
            .where(or_(*conditions))
            .order_by(desc(Ticket.id))
            .limit(limit)
        )
        return list(result.scalars().all())


async def count_tickets() -> int:
    async with get_session() as session:
        result = await session.execute(select(func.count(Ticket.id)))
        return result.scalar() or 0


async def get_ticket_stats(now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Статистика для /stats.

    Returns:
        Словарь: total, open, solved, long_term, today,
        avg_solve_minutes (None если решённых нет), by_admin [(имя, количество)]
    """
    now = now or now_local()
    start, end = day_bounds(now)

    async with get_session() as session:
        status_rows = await session.execute(
            select(Ticket.status, func.count(Ticket.id)).group_by(Ticket.status)
        )
        by_status = {status: count for status, count in status_rows.all()}

        today = await session.execute(
            select(func.count(Ticket.id)).where(
                Ticket.created_at >= start,
                Ticket.created_at < end,
            )
        )

        solved_rows = await session.execute(
            select(Ticket.created_at, Ticket.solved_at).where(
                Ticket.status == TICKET_STATUS_SOLVED,
                Ticket.solved_at.is_not(None),
            )
        )
        durations = [
            (solved_at - created_at).total_seconds() / 60
            for created_at, solved_at in solved_rows.all()
        ]

        admin_name = func.coalesce(Ticket.assigned_admin_name, Ticket.assigned_admin)
        admin_rows = await session.execute(
            select(admin_name, func.count(Ticket.id))
            .where(
                Ticket.status.in_(TERMINAL_STATUSES),
                Ticket.assigned_admin.is_not(None),
            )
            .group_by(admin_name)
            .order_by(desc(func.count(Ticket.id)))
        )

        return {
            "total": sum(by_status.values()),
            "open": by_status.get(TICKET_STATUS_OPEN, 0),
            "solved": by_status.get(TICKET_STATUS_SOLVED, 0),
            "long_term": by_status.get(TICKET_STATUS_LONG_TERM, 0),
            "today": today.scalar() or 0,
            "avg_solve_minutes": sum(durations) / len(durations) if durations else None,
            "by_admin": [(name, count) for name, count in admin_rows.all()],
        }
