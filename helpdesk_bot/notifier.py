"""
Уведомления группы дежурных.

ID группы берётся из bot_settings (команда /groupid) или из
ESCALATION_CHAT_ID. Если группа не настроена, уведомление не
отправляется, пишется предупреждение.
"""

from typing import Optional

import structlog

from database.admin_crud import ESCALATION_CHAT_SETTING, get_bot_setting
from helpdesk_bot.channel import Channel
from helpdesk_bot.config import settings


logger = structlog.get_logger()


class EscalationNotifier:
    """Отправка сообщений в группу дежурных."""

    def __init__(self, channel: Channel):
        self.channel = channel

    async def resolve_target(self) -> Optional[int]:
        """ID группы дежурных или None."""
        stored = await get_bot_setting(ESCALATION_CHAT_SETTING)
        if stored:
            try:
                return int(stored)
            except ValueError:
                logger.warning("invalid_escalation_chat_setting", value=stored)
        return settings.escalation_chat_id

    async def notify(self, text: str, source_chat_id: Optional[int] = None) -> bool:
        """
        Отправить текст в группу дежурных.

        Args:
            text: Текст уведомления
            source_chat_id: Чат, из которого пришла команда; если это и есть
                группа дежурных, повтор не отправляется

        Returns:
            True если сообщение отправлено
        """
        target = await self.resolve_target()
        if target is None:
            logger.warning("escalation_chat_not_configured")
            return False

        if source_chat_id is not None and source_chat_id == target:
            return False

        try:
            return await self.channel.send_text(target, text)
        except Exception as e:
            logger.error("escalation_notify_failed", target=target, error=str(e))
            return False
