"""
Тесты напоминаний об открытых тикетах.
"""

from datetime import datetime, timedelta

import pytest

from database import crud
from utils.reminders import ReminderScheduler, build_reminder, is_active_hours


# Понедельник
MONDAY_NOON = datetime(2024, 3, 4, 12, 0)


class TestActiveHours:

    @pytest.mark.parametrize("moment, expected", [
        (MONDAY_NOON, True),
        (datetime(2024, 3, 4, 8, 0), True),
        (datetime(2024, 3, 4, 7, 59), False),
        (datetime(2024, 3, 4, 22, 0), False),
        (datetime(2024, 3, 9, 12, 0), False),   # суббота
        (datetime(2024, 3, 10, 12, 0), False),  # воскресенье
    ])
    def test_default_window(self, moment, expected):
        assert is_active_hours(moment) is expected

    def test_custom_window(self):
        saturday = datetime(2024, 3, 9, 10, 0)
        assert is_active_hours(saturday, weekdays=[5], hour_start=9, hour_end=11)
        assert not is_active_hours(saturday, weekdays=[0], hour_start=9, hour_end=11)


class TestReminderScheduler:
    """Одна итерация планировщика."""

    @pytest.fixture
    def sent(self):
        return []

    def _scheduler(self, sent, moment, housekeeping=None):
        async def send(text):
            sent.append(text)
            return True

        return ReminderScheduler(
            send=send,
            interval_minutes=60,
            clock=lambda: moment,
            housekeeping=housekeeping,
        )

    async def test_no_open_tickets(self, sent):
        assert await build_reminder(MONDAY_NOON) is None
        assert await self._scheduler(sent, MONDAY_NOON).tick() is False
        assert sent == []

    async def test_sends_open_tickets(self, sent):
        await crud.create_ticket(
            "994501234567", "Aysel", "1", "205", "🧾 Printer işləmir",
            created_at=MONDAY_NOON - timedelta(minutes=90),
        )
        solved = await crud.create_ticket("994501234567", "Aysel", "2", "1101", "📡 İnternet problemi")
        await crud.mark_solved(solved.id, "994551112233", "Orxan", "done")

        assert await self._scheduler(sent, MONDAY_NOON).tick() is True

        assert len(sent) == 1
        assert "#1 - K1-205" in sent[0]
        assert "1 saat 30 dəqiqə" in sent[0]
        assert "#2" not in sent[0]
        assert "Ümumi: 1 açıq ticket" in sent[0]

    async def test_skips_outside_active_hours(self, sent):
        await crud.create_ticket("994501234567", "Aysel", "1", "205", "x")
        sunday = datetime(2024, 3, 10, 12, 0)

        assert await self._scheduler(sent, sunday).tick() is False
        assert sent == []

    async def test_housekeeping_runs_every_tick(self, sent):
        calls = []
        sunday = datetime(2024, 3, 10, 12, 0)
        scheduler = self._scheduler(sent, sunday, housekeeping=lambda: calls.append(1))

        await scheduler.tick()
        await scheduler.tick()

        assert len(calls) == 2

    async def test_start_stop(self, sent):
        scheduler = self._scheduler(sent, MONDAY_NOON)
        await scheduler.start()
        await scheduler.stop()
        assert sent == []
