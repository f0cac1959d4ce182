"""
Вспомогательные модули.

Содержит:
- logging_config.py - настройка structlog
- formatting.py - время по Баку и длительности
- reminders.py - периодические напоминания об открытых тикетах
"""
