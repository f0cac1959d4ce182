"""
Справочные команды: /help, /groupid, /list, /long list, /stats,
/today, /find, /ping, /id show, /mylimits, /rate.
"""

import time
from typing import TYPE_CHECKING, List

import structlog

from core.exceptions import TicketNotFoundError, ValidationError
from core.phone import format_phone
from core.validators import parse_rating, parse_ticket_id
from database import admin_crud, crud
from database.database import health_check
from database.models import TICKET_STATUS_LONG_TERM, TICKET_STATUS_OPEN, TICKET_STATUS_SOLVED
from helpdesk_bot.channel import InboundMessage
from helpdesk_bot.config import settings
from templates import message_templates as tpl
from utils.formatting import format_minutes, now_local, open_duration

if TYPE_CHECKING:
    from helpdesk_bot.router import MessageRouter


logger = structlog.get_logger()


async def help_command(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    await router.reply(message, tpl.HELP_TEXT)


async def group_id(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/groupid - сохранить этот чат как группу дежурных."""
    await admin_crud.set_bot_setting(
        admin_crud.ESCALATION_CHAT_SETTING,
        str(message.chat_id),
        admin_phone=identity,
    )
    logger.info("escalation_chat_saved", chat_id=message.chat_id, identity=identity)
    await router.reply(message, tpl.group_saved_message(message.chat_id))


# ==================== СПИСКИ ====================

async def open_list(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    tickets = await crud.list_tickets_by_status(TICKET_STATUS_OPEN)
    if not tickets:
        await router.reply(message, tpl.NO_OPEN_TICKETS)
        return

    now = now_local()
    durations = {t.id: open_duration(t.created_at, now) for t in tickets}
    await router.reply(message, tpl.open_tickets_message(tickets, durations))


async def long_list(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    tickets = await crud.list_tickets_by_status(TICKET_STATUS_LONG_TERM)
    if not tickets:
        await router.reply(message, tpl.NO_LONG_TERM_TICKETS)
        return

    now = now_local()
    durations = {t.id: open_duration(t.created_at, now) for t in tickets}
    await router.reply(message, tpl.long_term_tickets_message(tickets, durations))


async def today(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    now = now_local()
    tickets = await crud.list_today_tickets(now)
    if not tickets:
        await router.reply(message, tpl.no_tickets_today_message(now))
        return

    await router.reply(message, tpl.today_tickets_message(tickets))


async def find(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/find <текст>"""
    term = " ".join(args).strip()
    if not term:
        await router.reply(message, tpl.USAGE["find"])
        return

    tickets = await crud.find_tickets(term)
    if not tickets:
        await router.reply(message, tpl.find_empty_message(term))
        return

    await router.reply(message, tpl.find_results_message(term, tickets))


# ==================== СТАТИСТИКА ====================

async def stats(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    now = now_local()
    data = await crud.get_ticket_stats(now)
    average = data["avg_solve_minutes"]
    average_text = format_minutes(average) if average is not None else "Yoxdur"
    await router.reply(message, tpl.stats_message(data, average_text, now))


async def ping(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/ping - состояние бота и БД."""
    started = time.monotonic()
    health = await health_check()
    latency_ms = (time.monotonic() - started) * 1000

    if health["status"] != "healthy":
        logger.warning("ping_database_unhealthy", error=health["error"])

    await router.reply(
        message,
        tpl.ping_message(
            latency_ms=latency_ms,
            now=now_local(),
            active_wizards=len(router.conversations),
            rate_limited_users=router.rate_limiter.tracked_users,
            banned=await admin_crud.count_banned(),
            total_tickets=await crud.count_tickets(),
        ),
    )


# ==================== ЛИЧНОЕ ====================

async def id_show(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    await router.reply(message, tpl.id_show_message(identity, format_phone(identity, settings.country_code)))


async def my_limits(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    periods = router.rate_limiter.get_user_stats(identity)
    if not periods:
        await router.reply(message, tpl.NO_LIMITS_YET)
        return

    await router.reply(message, tpl.my_limits_message(periods))


async def rate(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/rate <id> <1-5> - одна оценка на решённый тикет."""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None or len(args) < 2:
        await router.reply(message, tpl.USAGE["rate"])
        return

    try:
        rating = parse_rating(args[1])
    except ValidationError as e:
        await router.reply(message, str(e))
        return

    try:
        ticket = await crud.require_ticket(ticket_id)
    except TicketNotFoundError:
        await router.reply(message, tpl.TICKET_NOT_FOUND)
        return

    if ticket.status != TICKET_STATUS_SOLVED:
        await router.reply(message, tpl.RATING_NOT_SOLVED)
        return

    if not await admin_crud.create_feedback(ticket_id, identity, rating):
        await router.reply(message, tpl.RATING_ALREADY)
        return

    await router.reply(message, tpl.rating_saved_message(ticket_id, rating))
