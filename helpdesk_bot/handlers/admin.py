"""
Администрирование: вход, баны, список администраторов, профиль.

Все команды работают только в личном чате; в группе роутер
отбрасывает их без ответа.
"""

from typing import TYPE_CHECKING, List, Optional

import structlog

from core.login import LoginOutcome
from core.phone import format_phone, normalize_phone
from database import admin_crud
from helpdesk_bot.channel import InboundMessage
from helpdesk_bot.config import settings
from templates import message_templates as tpl
from utils.logging_config import log_security_event

if TYPE_CHECKING:
    from helpdesk_bot.router import MessageRouter


logger = structlog.get_logger()


def _target(args: List[str]) -> Optional[str]:
    """Нормализованный номер из первого аргумента."""
    if not args:
        return None
    return normalize_phone(args[0], settings.country_code)


def _pretty(identity: str) -> str:
    return format_phone(identity, settings.country_code)


# ==================== ВХОД ====================

async def login(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/login - начать (или перезапустить) вход."""
    router.sessions.begin_login(identity)
    await router.reply(message, tpl.LOGIN_ASK_USERNAME)


async def logout(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    router.sessions.logout(identity)
    await router.reply(message, tpl.LOGOUT_DONE)


async def login_reply(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    text: str,
) -> None:
    """
    Ответ во время входа: имя пользователя или пароль.

    После max_login_attempts неудач отправитель банится.
    """
    result = router.sessions.handle_reply(identity, text)

    if result.outcome == LoginOutcome.ASK_PASSWORD:
        await router.reply(message, tpl.LOGIN_ASK_PASSWORD)
        return

    if result.outcome == LoginOutcome.SUCCESS:
        log_security_event("admin_login_success", level="info", identity=identity)
        # Успешный вход делает отправителя постоянным администратором
        if identity not in settings.admin_ids:
            await admin_crud.add_admin(identity, added_by=identity)
        await router.reply(message, tpl.LOGIN_SUCCESS)
        return

    log_security_event("admin_login_failed", identity=identity, attempts=result.attempts)

    if result.ban_required:
        await router.apply_ban(identity, "login_failures", {"attempts": result.attempts})
        await router.reply(
            message,
            tpl.login_banned_message(_pretty(identity), router.sessions.max_attempts),
        )
        return

    await router.reply(message, tpl.login_failed_message(result.attempts_left))


# ==================== БАНЫ ====================

async def ban(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/ban <номер>"""
    if not args:
        await router.reply(message, tpl.USAGE["ban"])
        return

    target = _target(args)
    if target is None:
        await router.reply(message, tpl.INVALID_NUMBER)
        return

    created = await admin_crud.ban_user(target, reason="manual", actor=identity)
    if not created:
        await router.reply(message, tpl.already_banned_message(_pretty(target)))
        return

    log_security_event("user_banned_manually", identity=target, actor=identity)
    await router.reply(message, tpl.banned_message(_pretty(target)))


async def unban(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/unban <номер>"""
    if not args:
        await router.reply(message, tpl.USAGE["unban"])
        return

    target = _target(args)
    if target is None:
        await router.reply(message, tpl.INVALID_NUMBER)
        return

    if not await admin_crud.unban_user(target, actor=identity):
        await router.reply(message, tpl.not_in_ban_list_message(_pretty(target)))
        return

    router.spam_guard.reset(target)
    log_security_event("user_unbanned", level="info", identity=target, actor=identity)
    await router.reply(message, tpl.unbanned_message(_pretty(target)))


async def list_bans(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    banned = await admin_crud.list_banned()
    if not banned:
        await router.reply(message, tpl.BAN_LIST_EMPTY)
        return

    await router.reply(message, tpl.ban_list_message(banned, [_pretty(b) for b in banned]))


# ==================== АДМИНИСТРАТОРЫ ====================

async def manage_admins(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/admin add|remove <номер>, /admin list"""
    action = args[0] if args else ""

    if action == "list":
        stored = await admin_crud.list_admins()
        await router.reply(
            message,
            tpl.admin_list_message(
                [_pretty(a) for a in settings.admin_ids],
                [_pretty(a) for a in stored],
            ),
        )
        return

    if action not in ("add", "remove"):
        await router.reply(message, f"{tpl.USAGE['admin_add']}\n\n{tpl.USAGE['admin_remove']}")
        return

    usage = tpl.USAGE["admin_add" if action == "add" else "admin_remove"]
    if len(args) < 2:
        await router.reply(message, usage)
        return

    target = _target(args[1:])
    if target is None:
        await router.reply(message, tpl.INVALID_NUMBER)
        return

    if action == "add":
        if await admin_crud.add_admin(target, added_by=identity):
            await router.reply(message, tpl.admin_added_message(_pretty(target)))
        else:
            await router.reply(message, tpl.admin_exists_message(_pretty(target)))
        return

    if await admin_crud.remove_admin(target, removed_by=identity):
        router.sessions.logout(target)
        await router.reply(message, tpl.admin_removed_message(_pretty(target)))
    else:
        await router.reply(message, tpl.admin_not_found_message(target))


async def register(
    router: "MessageRouter",
    message: InboundMessage,
    identity: str,
    args: List[str],
) -> None:
    """/register <имя> - имя администратора в тикетах."""
    name = " ".join(args).strip()
    if not name:
        await router.reply(message, tpl.USAGE["register"])
        return

    await admin_crud.set_admin_name(identity, name[:255])
    await router.reply(message, tpl.register_success_message(name[:255]))
