"""
Команды жизненного цикла тикета.

Группа дежурных: /solved, /long, /unsolved.
Личный чат администратора: /assign, /noassign.

Переходы выполняет database.crud, здесь только разбор аргументов,
ответы и уведомления.
"""

from typing import TYPE_CHECKING, List

import structlog

from core.validators import parse_ticket_id
from database import crud
from helpdesk_bot.channel import InboundMessage
from templates import message_templates as tpl
from utils.formatting import format_duration

if TYPE_CHECKING:
    from helpdesk_bot.router import MessageRouter


logger = structlog.get_logger()


async def solved(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/solved <id> <решение>"""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None or len(args) < 2:
        await router.reply(message, tpl.USAGE["solved"])
        return

    admin_name = await router.admin_name(identity, message.display_name)
    result = await crud.mark_solved(ticket_id, identity, admin_name, " ".join(args[1:]))

    if not result.ok:
        await router.reply(
            message,
            tpl.TICKET_NOT_FOUND if result.reason == "not_found" else tpl.ALREADY_SOLVED,
        )
        return

    ticket = result.ticket
    text = tpl.ticket_solved_message(ticket, format_duration(ticket.created_at, ticket.solved_at))
    await router.reply(message, text)
    await router.notify(text, source_chat_id=message.chat_id)

    if ticket.requester_chat_id:
        await router.channel.send_text(ticket.requester_chat_id, tpl.requester_solved_notice(ticket))


async def long_term(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/long <id>"""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None:
        await router.reply(message, tpl.USAGE["long"])
        return

    admin_name = await router.admin_name(identity, message.display_name)
    result = await crud.mark_long_term(ticket_id, identity, admin_name)

    if not result.ok:
        if result.reason == "not_found":
            await router.reply(message, tpl.TICKET_NOT_FOUND)
        else:
            await router.reply(message, tpl.status_already_message(result.ticket.status))
        return

    text = tpl.ticket_long_term_message(result.ticket)
    await router.reply(message, text)
    await router.notify(text, source_chat_id=message.chat_id)


async def unsolved(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/unsolved <id> - вернуть решённый тикет в очередь."""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None:
        await router.reply(message, tpl.USAGE["unsolved"])
        return

    result = await crud.reopen_ticket(ticket_id)
    if not result.ok:
        await router.reply(
            message,
            tpl.TICKET_NOT_FOUND if result.reason == "not_found" else tpl.NOT_SOLVED,
        )
        return

    logger.info("ticket_reopened_by", ticket_id=ticket_id, identity=identity)
    await router.reply(message, tpl.ticket_reopened_message(ticket_id))
    await router.notify(tpl.escalation_reopened(ticket_id), source_chat_id=message.chat_id)


async def assign(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/assign <id> - взять тикет. Не больше одного активного тикета на администратора."""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None:
        await router.reply(message, tpl.USAGE["assign"])
        return

    admin_name = await router.admin_name(identity, message.display_name)
    result = await crud.assign_ticket(ticket_id, identity, admin_name)

    if result.ok:
        await router.reply(message, tpl.assign_success_message(ticket_id))
        await router.notify(tpl.escalation_assigned(ticket_id, admin_name), source_chat_id=message.chat_id)
        return

    if result.reason == "busy":
        text = tpl.assign_busy_message(result.active_ticket_id)
    elif result.reason == "not_found":
        text = tpl.assign_not_found_message(ticket_id)
    elif result.reason == "solved":
        text = tpl.assign_solved_message(ticket_id)
    elif result.reason == "long_term":
        text = tpl.assign_long_term_message(ticket_id)
    elif result.reason == "already_yours":
        text = tpl.ASSIGN_ALREADY_YOURS
    else:
        text = tpl.assign_taken_message(result.assigned_name)

    await router.reply(message, text)


async def unassign(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/noassign <id> - отказаться от тикета."""
    ticket_id = parse_ticket_id(args[0]) if args else None
    if ticket_id is None:
        await router.reply(message, tpl.USAGE["noassign"])
        return

    result = await crud.unassign_ticket(ticket_id, identity)

    if not result.ok:
        if result.reason == "not_found":
            await router.reply(message, tpl.assign_not_found_message(ticket_id))
        elif result.reason == "not_yours":
            await router.reply(message, tpl.UNASSIGN_NOT_YOURS)
        else:
            await router.reply(message, tpl.UNASSIGN_SOLVED)
        return

    admin_name = await router.admin_name(identity, message.display_name)
    await router.reply(message, tpl.unassign_success_message(ticket_id))
    await router.notify(tpl.escalation_unassigned(ticket_id, admin_name), source_chat_id=message.chat_id)
