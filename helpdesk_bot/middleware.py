"""
Middleware бота.

LoggingMiddleware привязывает к логам тип события, чат и отправителя.
Защитные слои (баны, антиспам, лимиты) работают в MessageRouter,
а не в middleware.
"""

from typing import Any, Awaitable, Callable, Dict

import structlog
from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject


logger = structlog.get_logger()


class LoggingMiddleware(BaseMiddleware):
    """
    Middleware для логирования запросов.

    Логирует все входящие обновления для отладки.
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """Логирует обновление и вызывает обработчик."""
        user_id = None
        chat_id = None
        if isinstance(event, Message):
            chat_id = event.chat.id
            if event.from_user:
                user_id = event.from_user.id

        log = logger.bind(
            event_type=type(event).__name__,
            user_id=user_id,
            chat_id=chat_id,
        )

        log.debug("incoming_update")

        try:
            result = await handler(event, data)
            log.debug("update_handled")
            return result
        except Exception as e:
            log.error("handler_failed", error=str(e))
            raise
