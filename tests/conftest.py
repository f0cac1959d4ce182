"""
Общие фикстуры тестов.

База данных - SQLite в памяти через тот же async engine,
что и в продакшене. Переменные окружения выставляются до
импорта модулей проекта.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ESCALATION_CHAT_ID"] = "-1001"
os.environ["ADMIN_IDS_STR"] = ""
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "secret"

from typing import List, Tuple

import pytest

from database.database import drop_db, engine, init_db


class FakeClock:
    """Управляемое время для лимитов и антиспама."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChannel:
    """Канал, который запоминает отправленные сообщения."""

    def __init__(self):
        self.sent: List[Tuple[int, str]] = []

    async def send_text(self, target: int, text: str) -> bool:
        self.sent.append((target, text))
        return True

    async def send_media(self, target: int, path, caption: str = "") -> bool:
        self.sent.append((target, f"<media {path}>"))
        return True

    def texts_to(self, target: int) -> List[str]:
        return [text for chat_id, text in self.sent if chat_id == target]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture(autouse=True)
async def database():
    """Чистая БД для каждого теста."""
    await init_db()
    yield
    await drop_db()
    await engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def channel():
    return FakeChannel()
