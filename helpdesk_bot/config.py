"""
Конфигурация приложения.

Загружает настройки из .env файла с использованием Pydantic Settings.
Все секреты (токен бота, пароль администратора) должны храниться в .env файле.
"""

from pathlib import Path
from typing import List, Optional, Set

from pydantic_settings import BaseSettings, SettingsConfigDict


# Корневая директория проекта
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Настройки helpdesk-бота.

    Загружает конфигурацию из переменных окружения и .env файла.
    Все настройки типизированы и валидируются при запуске.
    """

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # ========== Telegram ==========
    telegram_bot_token: str = ""
    escalation_chat_id: Optional[int] = None  # Группа дежурных (можно переопределить /groupid)

    # ========== Администраторы ==========
    admin_username: str = "admin"
    admin_password: str = ""
    admin_ids_str: str = ""  # Постоянные админы через запятую: "994501234567,123456789"
    max_login_attempts: int = 3

    # ========== Database ==========
    @property
    def database_url(self) -> str:
        """
        Формирует URL базы данных.
        Если в окружении задан DATABASE_URL, проверяет его на относительность для SQLite.
        """
        import os
        url = os.getenv("DATABASE_URL")
        if url:
            # Относительный путь SQLite превращаем в абсолютный
            if url.startswith("sqlite+aiosqlite:///") and ":memory:" not in url:
                path_part = url.replace("sqlite+aiosqlite:///", "")
                if not path_part.startswith("/"):
                    return f"sqlite+aiosqlite:///{BASE_DIR / path_part}"
            return url

        return f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'helpdesk.sqlite'}"

    # ========== Application Settings ==========
    debug: bool = False
    log_to_file: bool = True
    country_code: str = "994"
    utc_offset_hours: int = 4  # Баку, UTC+4
    greeting_words: str = "salam"
    max_media_mb: int = 5
    wizard_failure_limit: int = 3

    # ========== Rate limiting ==========
    rate_limit_per_minute: int = 1
    rate_limit_per_hour: int = 5
    rate_limit_per_day: int = 20

    # ========== Антиспам ==========
    spam_max_messages: int = 10
    spam_window_seconds: int = 60

    # ========== Напоминания ==========
    reminder_interval_minutes: int = 60
    active_weekdays: str = "0,1,2,3,4"  # Пн-Пт (datetime.weekday)
    active_hour_start: int = 8
    active_hour_end: int = 22

    # ========== Computed Properties ==========
    @property
    def data_dir(self) -> Path:
        """Путь к директории с данными."""
        return BASE_DIR / "data"

    @property
    def logs_dir(self) -> Path:
        """Путь к директории логов."""
        return BASE_DIR / "logs"

    @property
    def max_media_bytes(self) -> int:
        return self.max_media_mb * 1024 * 1024

    @property
    def greetings(self) -> Set[str]:
        """Слова-приветствия, запускающие мастер (в нижнем регистре)."""
        return {w.strip().lower() for w in self.greeting_words.split(",") if w.strip()}

    @property
    def weekdays(self) -> Set[int]:
        days = set()
        for part in self.active_weekdays.split(","):
            part = part.strip()
            if part.isdigit():
                days.add(int(part))
        return days

    @property
    def admin_ids(self) -> List[str]:
        """
        Постоянные администраторы из конфигурации.

        admin_ids_str должен быть в формате: "994501234567,123456789".
        Значения нормализуются так же, как отправители сообщений.
        """
        from core.phone import normalize_phone

        admins = []
        for raw in self.admin_ids_str.split(","):
            identity = normalize_phone(raw, self.country_code)
            if identity and identity not in admins:
                admins.append(identity)
        return admins


# Глобальный объект настроек (singleton)
settings = Settings()
