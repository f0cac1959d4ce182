"""
Граница с транспортом сообщений.

- InboundMessage - входящее сообщение в независимом от транспорта виде
- Channel - протокол исходящей отправки
- AiogramChannel - реализация через Telegram Bot API
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

import structlog
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import FSInputFile

from templates.message_templates import split_long_message


logger = structlog.get_logger()


@dataclass(frozen=True)
class InboundMessage:
    """
    Входящее сообщение.

    Attributes:
        sender: Сырой идентификатор отправителя (нормализуется роутером)
        chat_id: Чат, куда отвечать
        text: Текст или подпись к медиа
        display_name: Имя отправителя
        is_group: Сообщение из группы
        from_me: Сообщение отправлено самим ботом
        has_media: К сообщению приложен файл
        media_size: Размер файла в байтах (0, если неизвестен)
    """

    sender: str
    chat_id: int
    text: str = ""
    display_name: str = "İstifadəçi"
    is_group: bool = False
    from_me: bool = False
    has_media: bool = False
    media_size: int = 0


class Channel(Protocol):
    """Исходящая отправка. Ошибки логируются, а не пробрасываются."""

    async def send_text(self, target: int, text: str) -> bool:
        ...

    async def send_media(self, target: int, path: Union[str, Path], caption: str = "") -> bool:
        ...


class AiogramChannel:
    """Отправка через aiogram Bot."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, target: int, text: str) -> bool:
        """
        Отправить текст, разбивая длинные сообщения на части.

        Returns:
            True если все части доставлены
        """
        try:
            for part in split_long_message(text):
                await self.bot.send_message(chat_id=target, text=part)
            return True
        except TelegramAPIError as e:
            logger.error("send_text_failed", target=target, error=str(e))
            return False

    async def send_media(self, target: int, path: Union[str, Path], caption: str = "") -> bool:
        try:
            await self.bot.send_document(
                chat_id=target,
                document=FSInputFile(str(path)),
                caption=caption or None,
            )
            return True
        except (TelegramAPIError, OSError) as e:
            logger.error("send_media_failed", target=target, path=str(path), error=str(e))
            return False
