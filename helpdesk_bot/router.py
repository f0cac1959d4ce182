"""
Маршрутизация входящих сообщений.

Каждое сообщение проходит защитные слои в фиксированном порядке,
и только потом попадает в бизнес-логику:

1. Собственные сообщения бота отбрасываются
2. Нормализация отправителя, проверка бана (без ответа)
3. Аудит-лог
4. Антиспам (личные чаты)
5. Размер медиа, пустые сообщения
6. Повторная проверка бана
7. Приветствие запускает мастер
8. Перехват ответов во время входа администратора
9. Таблица команд
10. Продолжение мастера

Обработка одного отправителя сериализуется через KeyedLock.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

import structlog

from core.conversation import ConversationState
from core.exceptions import AuthorizationError
from core.login import AdminSessionManager
from core.phone import normalize_phone
from core.rate_limiter import RateLimitConfig, RateLimiter
from core.spam import SpamGuard
from core.validators import split_command
from database import admin_crud
from helpdesk_bot.channel import Channel, InboundMessage
from helpdesk_bot.config import settings
from helpdesk_bot.handlers import admin, common, lifecycle, tickets
from helpdesk_bot.notifier import EscalationNotifier
from templates import message_templates as tpl
from utils.logging_config import log_banned_message, log_security_event


logger = structlog.get_logger()


class PolicyDecision(str, Enum):
    DROP = "drop"          # отброшено политикой, без ответа
    HANDLED = "handled"    # обработано, ответ отправлен
    IGNORED = "ignored"    # не относится ни к одной ветке


@dataclass(frozen=True)
class RouteResult:
    decision: PolicyDecision
    reason: str = ""


# Где работает команда
SCOPE_ANY = "any"
SCOPE_GROUP = "group"
SCOPE_PRIVATE = "private"

# В группе эти команды отбрасываются без ответа
GROUP_DROPPED_PREFIXES = ("/ban", "/unban", "/listban", "/admin", "/login", "/logout")

CommandHandler = Callable[["MessageRouter", InboundMessage, str, List[str]], Awaitable[None]]


@dataclass(frozen=True)
class CommandSpec:
    """
    Строка таблицы команд.

    Attributes:
        tokens: Первые слова сообщения, например ("/long", "list")
        handler: Обработчик
        scope: any, group или private
        admin_only: Требуется сессия или постоянный администратор
    """

    tokens: Tuple[str, ...]
    handler: CommandHandler
    scope: str = SCOPE_ANY
    admin_only: bool = False

    def matches(self, words: List[str]) -> bool:
        return tuple(words[:len(self.tokens)]) == self.tokens


# Порядок важен: первое совпадение выигрывает
COMMANDS: Tuple[CommandSpec, ...] = (
    CommandSpec(("/help",), common.help_command),
    CommandSpec(("/groupid",), common.group_id, SCOPE_GROUP),
    CommandSpec(("/solved",), lifecycle.solved, SCOPE_GROUP),
    CommandSpec(("/long", "list"), common.long_list, SCOPE_GROUP),
    CommandSpec(("/long",), lifecycle.long_term, SCOPE_GROUP),
    CommandSpec(("/unsolved",), lifecycle.unsolved, SCOPE_GROUP),
    CommandSpec(("/list",), common.open_list, SCOPE_GROUP),
    CommandSpec(("/ping",), common.ping, SCOPE_GROUP),
    CommandSpec(("/stats",), common.stats),
    CommandSpec(("/today",), common.today),
    CommandSpec(("/find",), common.find),
    CommandSpec(("/mylimits",), common.my_limits),
    CommandSpec(("/rate",), common.rate),
    CommandSpec(("/start",), tickets.start_command, SCOPE_PRIVATE),
    CommandSpec(("/stop",), tickets.stop_ticket, SCOPE_PRIVATE),
    CommandSpec(("/id", "show"), common.id_show, SCOPE_PRIVATE),
    CommandSpec(("/login",), admin.login, SCOPE_PRIVATE),
    CommandSpec(("/logout",), admin.logout, SCOPE_PRIVATE),
    CommandSpec(("/assign",), lifecycle.assign, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/noassign",), lifecycle.unassign, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/register",), admin.register, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/listban",), admin.list_bans, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/ban",), admin.ban, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/unban",), admin.unban, SCOPE_PRIVATE, admin_only=True),
    CommandSpec(("/admin",), admin.manage_admins, SCOPE_PRIVATE, admin_only=True),
)


def command_words(text: str) -> List[str]:
    """
    Слова команды; суффикс "@BotName" у первого слова отбрасывается.
    """
    words = split_command(text)
    if words and words[0].startswith("/") and "@" in words[0]:
        words[0] = words[0].split("@", 1)[0]
    return words


def find_command(words: List[str]) -> Optional[CommandSpec]:
    if not words or not words[0].startswith("/"):
        return None
    for command in COMMANDS:
        if command.matches(words):
            return command
    return None


class KeyedLock:
    """Отдельный asyncio.Lock на каждый ключ."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def __call__(self, key: str) -> asyncio.Lock:
        return self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class MessageRouter:
    """
    Точка входа бизнес-логики.

    Владеет всем состоянием в памяти: мастерами, лимитами,
    антиспамом и сессиями администраторов.
    """

    def __init__(
        self,
        channel: Channel,
        notifier: Optional[EscalationNotifier] = None,
        rate_limiter: Optional[RateLimiter] = None,
        spam_guard: Optional[SpamGuard] = None,
        sessions: Optional[AdminSessionManager] = None,
    ):
        self.channel = channel
        self.notifier = notifier or EscalationNotifier(channel)
        self.rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(
                per_minute=settings.rate_limit_per_minute,
                per_hour=settings.rate_limit_per_hour,
                per_day=settings.rate_limit_per_day,
            )
        )
        self.spam_guard = spam_guard or SpamGuard(
            max_messages=settings.spam_max_messages,
            window_seconds=settings.spam_window_seconds,
        )
        self.sessions = sessions or AdminSessionManager(
            username=settings.admin_username,
            password=settings.admin_password,
            max_attempts=settings.max_login_attempts,
        )
        self.conversations: Dict[str, ConversationState] = {}
        self.locks = KeyedLock()

    # ==================== ОТВЕТЫ ====================

    async def reply(self, message: InboundMessage, text: str) -> bool:
        return await self.channel.send_text(message.chat_id, text)

    async def notify(self, text: str, source_chat_id: Optional[int] = None) -> bool:
        return await self.notifier.notify(text, source_chat_id=source_chat_id)

    # ==================== ПРАВА ====================

    async def is_authorized(self, identity: str) -> bool:
        """Сессия /login или постоянный администратор (БД или конфиг)."""
        if self.sessions.has_session(identity):
            return True
        if identity in settings.admin_ids:
            return True
        return await admin_crud.is_admin(identity)

    async def require_admin(self, identity: str, command: str) -> None:
        """
        Raises:
            AuthorizationError: Отправитель не администратор
        """
        if not await self.is_authorized(identity):
            raise AuthorizationError(f"{command} requires admin")

    async def admin_name(self, identity: str, fallback: str) -> str:
        """Имя из /register или отображаемое имя."""
        return await admin_crud.get_admin_name(identity) or fallback

    async def apply_ban(self, identity: str, reason: str, details: Optional[dict] = None) -> bool:
        """
        Автоматический бан (спам, вход) и очистка состояния отправителя.
        """
        created = await admin_crud.ban_user(identity, reason=reason, details=details)
        self.conversations.pop(identity, None)
        self.sessions.clear(identity)
        log_security_event(
            "user_auto_banned",
            identity=identity,
            reason=reason,
            new_ban=created,
            **(details or {}),
        )
        return created

    def cleanup(self) -> None:
        """Очистка устаревших окон лимитов и антиспама."""
        removed_limits = self.rate_limiter.cleanup()
        removed_spam = self.spam_guard.cleanup()
        if removed_limits or removed_spam:
            logger.debug(
                "router_cache_cleanup",
                rate_limits=removed_limits,
                spam_windows=removed_spam,
            )

    # ==================== МАРШРУТИЗАЦИЯ ====================

    async def handle(self, message: InboundMessage) -> RouteResult:
        """
        Обработать входящее сообщение. Никогда не пробрасывает исключения.
        """
        try:
            return await self._route(message)
        except Exception as e:
            logger.exception(
                "message_handling_failed",
                sender=message.sender,
                text=message.text,
                error=str(e),
            )
            try:
                await self.reply(message, tpl.GENERIC_ERROR)
            except Exception as send_error:
                logger.error("error_reply_failed", error=str(send_error))
            return RouteResult(PolicyDecision.HANDLED, "error")

    async def _route(self, message: InboundMessage) -> RouteResult:
        if message.from_me:
            return RouteResult(PolicyDecision.DROP, "from_me")

        identity = normalize_phone(message.sender, settings.country_code)
        if identity is None:
            logger.warning("unparseable_sender", sender=message.sender)
            return RouteResult(PolicyDecision.DROP, "unparseable_sender")

        text = (message.text or "").strip()

        if await admin_crud.is_banned(identity):
            log_banned_message(identity, message.display_name, text, message.is_group)
            log_security_event(
                "banned_sender_dropped",
                level="info",
                identity=identity,
                is_group=message.is_group,
            )
            return RouteResult(PolicyDecision.DROP, "banned")

        logger.info(
            "inbound_message",
            identity=identity,
            display_name=message.display_name,
            text="***" if self.sessions.in_login(identity) else text,
            is_group=message.is_group,
            has_media=message.has_media,
        )

        async with self.locks(identity):
            return await self._route_locked(message, identity, text)

    async def _route_locked(
        self,
        message: InboundMessage,
        identity: str,
        text: str,
    ) -> RouteResult:
        # Антиспам
        if not message.is_group:
            verdict = self.spam_guard.register(identity)
            if verdict.triggered:
                if not verdict.should_warn:
                    return RouteResult(PolicyDecision.DROP, "spam")
                await self.apply_ban(identity, "spam", {"count": verdict.count})
                await self.reply(message, tpl.SPAM_BANNED)
                return RouteResult(PolicyDecision.HANDLED, "spam_banned")

        # Медиа и пустые сообщения
        if message.has_media and message.media_size > settings.max_media_bytes:
            await self.reply(message, tpl.media_too_large_message(settings.max_media_mb))
            return RouteResult(PolicyDecision.HANDLED, "media_too_large")
        if not text:
            if message.has_media:
                return RouteResult(PolicyDecision.IGNORED, "media_without_text")
            return RouteResult(PolicyDecision.DROP, "empty")

        if await admin_crud.is_banned(identity):
            return RouteResult(PolicyDecision.DROP, "banned")

        # Приветствие
        if not message.is_group and not text.startswith("/") and text.lower() in settings.greetings:
            await tickets.start_ticket(self, message, identity)
            return RouteResult(PolicyDecision.HANDLED, "greeting")

        words = command_words(text)

        # Вход администратора
        if (
            not message.is_group
            and self.sessions.in_login(identity)
            and (not words or words[0] != "/login")
        ):
            await admin.login_reply(self, message, identity, text)
            return RouteResult(PolicyDecision.HANDLED, "login")

        command = find_command(words)
        if command is not None:
            return await self._dispatch(command, message, identity, words)

        if message.is_group and words and words[0].startswith(GROUP_DROPPED_PREFIXES):
            return RouteResult(PolicyDecision.DROP, "admin_command_in_group")

        # Продолжение мастера
        if not message.is_group and identity in self.conversations:
            await tickets.continue_ticket(self, message, identity)
            return RouteResult(PolicyDecision.HANDLED, "wizard")

        return RouteResult(PolicyDecision.IGNORED, "no_route")

    async def _dispatch(
        self,
        command: CommandSpec,
        message: InboundMessage,
        identity: str,
        words: List[str],
    ) -> RouteResult:
        name = " ".join(command.tokens)

        if message.is_group:
            if words[0] in GROUP_DROPPED_PREFIXES:
                return RouteResult(PolicyDecision.DROP, "admin_command_in_group")
            if command.scope == SCOPE_PRIVATE:
                return RouteResult(PolicyDecision.IGNORED, "private_command_in_group")
        elif command.scope == SCOPE_GROUP:
            return RouteResult(PolicyDecision.IGNORED, "group_command_in_private")

        if command.admin_only:
            try:
                await self.require_admin(identity, name)
            except AuthorizationError:
                log_security_event(
                    "admin_command_rejected",
                    level="info",
                    identity=identity,
                    command=name,
                )
                await self.reply(message, tpl.ADMIN_REQUIRED)
                return RouteResult(PolicyDecision.HANDLED, "admin_required")

        args = words[len(command.tokens):]
        logger.info("command_received", identity=identity, command=name, args=args)
        await command.handler(self, message, identity, args)
        return RouteResult(PolicyDecision.HANDLED, name)
