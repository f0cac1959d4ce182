"""Шаблоны сообщений бота."""
