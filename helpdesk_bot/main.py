"""
Точка входа helpdesk-бота ADNSU IT.

Этот модуль инициализирует и запускает бота:
- Настраивает расширенное логирование
- Инициализирует бота и диспетчер aiogram
- Собирает MessageRouter (баны, антиспам, лимиты, сессии, мастер)
- Запускает планировщик напоминаний
- Запускает polling
"""

import asyncio
import sys

import structlog
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from core.exceptions import ConfigurationError
from database import close_db, init_db
from helpdesk_bot.channel import AiogramChannel
from helpdesk_bot.config import settings
from helpdesk_bot.notifier import EscalationNotifier
from helpdesk_bot.router import MessageRouter
from utils.logging_config import setup_advanced_logging
from utils.reminders import ReminderScheduler


logger = structlog.get_logger()


async def on_startup(bot: Bot, reminder_scheduler: ReminderScheduler) -> None:
    """
    Callback при старте бота.

    Выполняется один раз при запуске:
    - Регистрирует команды бота
    - Запускает планировщик напоминаний
    - Логирует информацию о боте

    Args:
        bot: Экземпляр бота
        reminder_scheduler: Планировщик из данных диспетчера
    """
    from aiogram.types import BotCommand, BotCommandScopeDefault

    user_commands = [
        BotCommand(command="start", description="Ticket yarat"),
        BotCommand(command="stop", description="Prosesi dayandır"),
        BotCommand(command="mylimits", description="Ticket limitlərim"),
        BotCommand(command="help", description="Kömək"),
    ]

    try:
        await bot.set_my_commands(user_commands, scope=BotCommandScopeDefault())
        logger.info("bot_commands_registered")
    except Exception as e:
        logger.warning("failed_to_register_commands", error=str(e))

    try:
        await reminder_scheduler.start()
    except Exception as e:
        logger.warning("failed_to_start_reminder_scheduler", error=str(e))

    bot_info = await bot.get_me()

    logger.info(
        "bot_started",
        bot_username=bot_info.username,
        bot_id=bot_info.id,
        debug_mode=settings.debug,
        escalation_chat_id=settings.escalation_chat_id,
    )


async def on_shutdown(bot: Bot, reminder_scheduler: ReminderScheduler) -> None:
    """
    Callback при остановке бота.

    Выполняется при graceful shutdown:
    - Останавливает планировщик напоминаний
    - Закрывает соединение с БД и сессию бота

    Args:
        bot: Экземпляр бота
        reminder_scheduler: Планировщик из данных диспетчера
    """
    logger.info("bot_stopping")

    try:
        await reminder_scheduler.stop()
    except Exception as e:
        logger.warning("failed_to_stop_reminder_scheduler", error=str(e))

    await close_db()

    await bot.session.close()
    logger.info("bot_stopped")


async def main() -> None:
    """
    Главная функция запуска бота.

    Последовательность запуска:
    1. Настройка логирования
    2. Проверка конфигурации
    3. Инициализация бота, БД и MessageRouter
    4. Регистрация middleware и handlers
    5. Запуск polling
    """
    # 1. Настройка логирования
    setup_advanced_logging(debug=settings.debug, log_to_file=settings.log_to_file, log_dir=settings.logs_dir)

    logger.info(
        "starting_bot",
        debug=settings.debug,
        configured_admins=len(settings.admin_ids),
    )

    # 2. Проверка конфигурации
    if not settings.telegram_bot_token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is not set")
    if not settings.admin_password:
        logger.warning("admin_password_not_set", hint="/login is disabled")
    if settings.escalation_chat_id is None:
        logger.warning("escalation_chat_id_not_set", hint="use /groupid in the duty group")

    # 3. Инициализация бота с настройками по умолчанию
    bot = Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(
            parse_mode=ParseMode.HTML,
            link_preview_is_disabled=True,
        ),
    )

    await init_db()
    logger.info("database_ready")

    channel = AiogramChannel(bot)
    notifier = EscalationNotifier(channel)
    message_router = MessageRouter(channel, notifier)
    reminder_scheduler = ReminderScheduler(
        send=notifier.notify,
        housekeeping=message_router.cleanup,
    )

    # 4. Инициализация диспетчера
    dp = Dispatcher()
    dp["message_router"] = message_router
    dp["reminder_scheduler"] = reminder_scheduler

    # Регистрация lifecycle callbacks
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    from helpdesk_bot.middleware import LoggingMiddleware

    dp.message.middleware(LoggingMiddleware())
    logger.info("middleware_registered")

    from helpdesk_bot.handlers import get_main_router

    dp.include_router(get_main_router())
    logger.info("routers_registered")

    # 5. Запуск polling
    try:
        # Удаляем webhook на случай если был установлен ранее
        await bot.delete_webhook(drop_pending_updates=True)

        logger.info("polling_started")

        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
        )

    except Exception as e:
        logger.error("bot_error", error=str(e), exc_info=True)
        raise


def run() -> None:
    """Консольная точка входа (helpdesk-bot)."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n⛔ Bot istifadəçi tərəfindən dayandırıldı")
    except Exception as e:
        print(f"\n❌ Xəta: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
