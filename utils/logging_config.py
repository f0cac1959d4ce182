"""
Расширенная конфигурация логирования.

Модуль обеспечивает:
- Структурированное логирование через structlog
- Ротацию файлов логов
- Раздельные логи для ошибок, общих событий и событий безопасности
- Аудит сообщений от забаненных отправителей
- Фильтрацию чувствительных данных
"""

import logging
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.processors import CallsiteParameter


# ============================================================
# КОНСТАНТЫ
# ============================================================

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Размеры файлов логов
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

SECURITY_LOGGER_NAME = "security"
BANNED_LOGGER_NAME = "banned_messages"

# Чувствительные поля для фильтрации
SENSITIVE_FIELDS = {
    "token",
    "password",
    "secret",
    "authorization",
    "telegram_bot_token",
    "admin_password",
}


# ============================================================
# ПРОЦЕССОРЫ ДЛЯ STRUCTLOG
# ============================================================

def filter_sensitive_data(
    logger: Any,
    method_name: str,
    event_dict: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Процессор для фильтрации чувствительных данных из логов.

    Заменяет значения полей с токенами/паролями на [REDACTED].
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()

        if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
            event_dict[key] = "[REDACTED]"

        elif isinstance(event_dict[key], dict):
            for nested_key in list(event_dict[key].keys()):
                if any(sensitive in nested_key.lower() for sensitive in SENSITIVE_FIELDS):
                    event_dict[key][nested_key] = "[REDACTED]"

    return event_dict


def add_app_context(
    logger: Any,
    method_name: str,
    event_dict: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Процессор для добавления контекста приложения.
    """
    event_dict["app"] = "adnsu_helpdesk"
    event_dict["version"] = "1.0"
    return event_dict


# ============================================================
# НАСТРОЙКА ЛОГГЕРОВ
# ============================================================

def _rotating_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_file_handlers(
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
) -> list[logging.Handler]:
    """
    Создание файловых обработчиков с ротацией.

    Returns:
        Список обработчиков логов
    """
    directory = log_dir or LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    handlers = [
        _rotating_handler(directory / "bot.log", log_level),
        _rotating_handler(directory / "errors.log", logging.ERROR),
    ]

    # Дневной лог с ротацией по времени
    daily_handler = TimedRotatingFileHandler(
        directory / "daily.log",
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8",
    )
    daily_handler.setLevel(log_level)
    daily_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handlers.append(daily_handler)

    return handlers


def setup_audit_handlers(log_dir: Optional[Path] = None) -> None:
    """
    Отдельные файлы для событий безопасности и сообщений забаненных.

    Логгеры security и banned_messages пишут и в свои файлы,
    и в общий вывод через root.
    """
    directory = log_dir or LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    security = logging.getLogger(SECURITY_LOGGER_NAME)
    security.handlers.clear()
    security.addHandler(_rotating_handler(directory / "security.log", logging.INFO))

    banned = logging.getLogger(BANNED_LOGGER_NAME)
    banned.handlers.clear()
    banned.addHandler(_rotating_handler(directory / "banned_messages.log", logging.INFO))


def setup_advanced_logging(
    debug: bool = False,
    log_to_file: bool = True,
    log_dir: Optional[Path] = None,
) -> structlog.BoundLogger:
    """
    Настройка расширенного логирования.

    Args:
        debug: Режим отладки (verbose вывод)
        log_to_file: Записывать логи в файл
        log_dir: Директория логов (по умолчанию logs/ в корне проекта)

    Returns:
        Настроенный логгер
    """
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_to_file:
        for handler in setup_file_handlers(log_level, log_dir):
            root_logger.addHandler(handler)
        setup_audit_handlers(log_dir)

    # Уровни для сторонних библиотек
    logging.getLogger("aiogram").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if debug else logging.WARNING
    )

    if debug:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            [
                CallsiteParameter.FILENAME,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ]
        ),
        add_app_context,
        filter_sensitive_data,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()


# ============================================================
# КОНТЕКСТНОЕ ЛОГИРОВАНИЕ
# ============================================================

def log_security_event(event: str, level: str = "warning", **fields: Any) -> None:
    """
    Событие безопасности: бан, автобан, неудачный вход.

    Args:
        event: Имя события (snake_case)
        level: Уровень лога (info, warning, error)
        **fields: Детали события
    """
    logger = structlog.get_logger(SECURITY_LOGGER_NAME)
    log_func = getattr(logger, level, logger.warning)
    log_func(event, **fields)


def log_banned_message(identity: str, display_name: str, text: str, is_group: bool) -> None:
    """Аудит сообщения от забаненного отправителя (без ответа ему)."""
    logger = structlog.get_logger(BANNED_LOGGER_NAME)
    logger.info(
        "banned_sender_message",
        identity=identity,
        display_name=display_name,
        text=text,
        is_group=is_group,
    )
