"""
Мастер создания тикета: ввод-вывод вокруг core.conversation.

Команды: /start (и приветствие), /stop.
Ответы на шаги мастера приходят сюда из роутера.
"""

from typing import TYPE_CHECKING, List

import structlog

from core.conversation import TicketDraft, advance, prompt_for, start_conversation
from core.phone import format_phone
from core.rate_limiter import format_remaining
from database.crud import create_ticket
from helpdesk_bot.channel import InboundMessage
from helpdesk_bot.config import settings
from templates import message_templates as tpl
from utils.formatting import now_local

if TYPE_CHECKING:
    from helpdesk_bot.router import MessageRouter


logger = structlog.get_logger()


async def start_ticket(router: "MessageRouter", message: InboundMessage, identity: str) -> None:
    """
    Начать мастер.

    Если мастер уже идёт, повторяется вопрос текущего шага.
    Лимит частоты проверяется до создания состояния.
    """
    state = router.conversations.get(identity)
    if state is not None:
        await router.reply(message, prompt_for(state))
        return

    decision = router.rate_limiter.can_create(identity)
    if not decision.allowed:
        await router.reply(
            message,
            tpl.rate_limited_message(
                decision.period,
                format_remaining(decision.remaining_seconds),
                decision.current_count,
                decision.max_count,
            ),
        )
        return

    router.conversations[identity] = start_conversation(
        identity=identity,
        chat_id=message.chat_id,
        display_name=message.display_name,
        started_at=now_local(),
    )
    logger.info("wizard_started", identity=identity)
    await router.reply(message, tpl.WELCOME)


async def start_command(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    await start_ticket(router, message, identity)


async def stop_ticket(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/stop - прервать мастер."""
    if router.conversations.pop(identity, None) is None:
        await router.reply(message, tpl.WIZARD_NOT_ACTIVE)
        return

    logger.info("wizard_stopped", identity=identity)
    await router.reply(message, tpl.WIZARD_STOPPED)


async def continue_ticket(router: "MessageRouter", message: InboundMessage, identity: str) -> None:
    """
    Обработать ответ на текущий шаг.

    Ошибки обработки увеличивают failures; после превышения
    лимита мастер прерывается.
    """
    state = router.conversations[identity]

    try:
        transition = advance(state, message.text.strip())
    except Exception as e:
        state.failures += 1
        logger.exception(
            "wizard_step_failed",
            identity=identity,
            step=state.step.value,
            failures=state.failures,
            error=str(e),
        )
        if state.failures > settings.wizard_failure_limit:
            router.conversations.pop(identity, None)
            await router.reply(message, tpl.WIZARD_TOO_MANY_FAILURES)
        else:
            await router.reply(message, tpl.GENERIC_ERROR)
        return

    if transition.completed:
        await complete_ticket(router, message, transition.draft)
        return

    router.conversations[identity] = transition.state
    if transition.rejected:
        logger.debug("wizard_input_rejected", identity=identity, step=transition.state.step.value)
    await router.reply(message, transition.reply)


async def complete_ticket(router: "MessageRouter", message: InboundMessage, draft: TicketDraft) -> None:
    """
    Сохранить тикет, учесть его в лимитах, ответить автору
    и уведомить группу дежурных.
    """
    identity = draft.identity

    try:
        ticket = await create_ticket(
            requester=identity,
            requester_name=draft.display_name,
            corpus=draft.corpus,
            room=draft.room,
            problem=draft.problem,
            requester_chat_id=draft.chat_id,
            phone=format_phone(identity, settings.country_code),
        )
    except Exception as e:
        router.conversations.pop(identity, None)
        logger.error("ticket_create_failed", identity=identity, error=str(e))
        await router.reply(message, tpl.TICKET_CREATE_FAILED)
        return

    router.conversations.pop(identity, None)
    router.rate_limiter.record_creation(identity)

    await router.reply(message, tpl.ticket_created_message(ticket.id, ticket.created_at))
    await router.notify(tpl.escalation_new_ticket(ticket))
