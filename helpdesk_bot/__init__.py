"""
Модуль helpdesk-бота ADNSU IT.

Содержит:
- handlers/ - обработчики команд и мастера
- router.py - маршрутизация входящих сообщений
- channel.py - граница с Telegram
- notifier.py - уведомления группы дежурных
- config.py - конфигурация из .env
- main.py - точка входа
"""

from helpdesk_bot.config import settings

__all__ = ["settings"]
