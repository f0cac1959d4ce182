"""
Handlers Package.

Модули с обработчиками команд (tickets, lifecycle, admin, common)
вызываются из MessageRouter. Здесь только aiogram-роутер, который
превращает Message в InboundMessage и передаёт его в MessageRouter.
"""

from typing import TYPE_CHECKING, Optional

import structlog
from aiogram import Bot, Router
from aiogram.enums import ChatType
from aiogram.types import Message

from helpdesk_bot.channel import InboundMessage

if TYPE_CHECKING:
    from helpdesk_bot.router import MessageRouter


logger = structlog.get_logger()

GROUP_CHAT_TYPES = (ChatType.GROUP, ChatType.SUPERGROUP)


def media_size(message: Message) -> Optional[int]:
    """
    Размер вложения в байтах.

    Returns:
        None если вложения нет, 0 если размер неизвестен
    """
    if message.photo:
        return message.photo[-1].file_size or 0

    for attachment in (
        message.document,
        message.video,
        message.audio,
        message.voice,
        message.video_note,
        message.animation,
    ):
        if attachment is not None:
            return attachment.file_size or 0

    return None


def to_inbound(message: Message, bot_id: Optional[int] = None) -> Optional[InboundMessage]:
    """Message -> InboundMessage. Сообщения без отправителя пропускаются."""
    user = message.from_user
    if user is None:
        return None

    size = media_size(message)
    return InboundMessage(
        sender=str(user.id),
        chat_id=message.chat.id,
        text=message.text or message.caption or "",
        display_name=user.full_name or "İstifadəçi",
        is_group=message.chat.type in GROUP_CHAT_TYPES,
        from_me=bot_id is not None and user.id == bot_id,
        has_media=size is not None,
        media_size=size or 0,
    )


def get_main_router() -> Router:
    """
    Создать роутер, передающий все сообщения в MessageRouter.

    MessageRouter берётся из данных диспетчера (dp["message_router"]).
    """
    router = Router(name="helpdesk")

    @router.message()
    async def on_message(message: Message, bot: Bot, message_router: "MessageRouter") -> None:
        inbound = to_inbound(message, bot_id=bot.id)
        if inbound is None:
            logger.debug("message_without_sender_skipped", chat_id=message.chat.id)
            return

        result = await message_router.handle(inbound)
        logger.debug(
            "message_routed",
            chat_id=inbound.chat_id,
            decision=result.decision.value,
            reason=result.reason,
        )

    return router


__all__ = [
    "get_main_router",
    "to_inbound",
    "media_size",
]
