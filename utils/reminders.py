"""
Периодические напоминания об открытых тикетах.

Модуль обеспечивает:
- Проверку рабочего окна (дни недели и часы по местному времени)
- Планировщик, который раз в интервал отправляет сводку открытых
  тикетов в группу дежурных
"""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Iterable, Optional

import structlog

from database.crud import list_tickets_by_status
from database.models import TICKET_STATUS_OPEN
from helpdesk_bot.config import settings
from templates import message_templates as tpl
from utils.formatting import now_local, open_duration


logger = structlog.get_logger()

ReminderSender = Callable[[str], Awaitable[bool]]


def is_active_hours(
    now: datetime,
    weekdays: Optional[Iterable[int]] = None,
    hour_start: Optional[int] = None,
    hour_end: Optional[int] = None,
) -> bool:
    """
    Попадает ли момент в рабочее окно.

    Args:
        now: Местное время
        weekdays: Рабочие дни (0 - понедельник)
        hour_start: Начало окна (включительно)
        hour_end: Конец окна (не включительно)
    """
    days = set(settings.weekdays if weekdays is None else weekdays)
    start = settings.active_hour_start if hour_start is None else hour_start
    end = settings.active_hour_end if hour_end is None else hour_end

    return now.weekday() in days and start <= now.hour < end


async def build_reminder(now: Optional[datetime] = None) -> Optional[str]:
    """
    Текст сводки открытых тикетов.

    Returns:
        None, если открытых тикетов нет
    """
    now = now or now_local()
    tickets = await list_tickets_by_status(TICKET_STATUS_OPEN)
    if not tickets:
        return None

    durations = {ticket.id: open_duration(ticket.created_at, now) for ticket in tickets}
    return tpl.reminder_message(tickets, durations, now)


class ReminderScheduler:
    """Планировщик напоминаний об открытых тикетах."""

    def __init__(
        self,
        send: ReminderSender,
        interval_minutes: Optional[int] = None,
        clock: Callable[[], datetime] = now_local,
        housekeeping: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            send: Корутина отправки текста в группу дежурных
            interval_minutes: Интервал между напоминаниями
            clock: Источник местного времени
            housekeeping: Вызывается на каждой итерации (очистка кэшей)
        """
        self._send = send
        self._housekeeping = housekeeping
        self.interval_seconds = (interval_minutes or settings.reminder_interval_minutes) * 60
        self._clock = clock
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self):
        """Запустить планировщик."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_scheduler())
        logger.info("reminder_scheduler_started", interval_seconds=self.interval_seconds)

    async def stop(self):
        """Остановить планировщик."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("reminder_scheduler_stopped")

    async def tick(self) -> bool:
        """
        Одна итерация: отправить сводку, если сейчас рабочее время
        и есть открытые тикеты.

        Returns:
            True если сводка отправлена
        """
        if self._housekeeping is not None:
            self._housekeeping()

        now = self._clock()
        if not is_active_hours(now):
            logger.debug("reminder_skipped_outside_hours", now=now.isoformat())
            return False

        text = await build_reminder(now)
        if text is None:
            return False

        sent = await self._send(text)
        if sent:
            logger.info("reminder_sent", now=now.isoformat())
        return sent

    async def _run_scheduler(self):
        """Основной цикл планировщика."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
                await self.tick()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("reminder_scheduler_error", error=str(e))
                await asyncio.sleep(60)
