"""
Время и длительности.

Все отметки времени тикетов хранятся в местном времени (Баку, UTC+4)
без tzinfo, как их видят пользователи и дежурные.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from helpdesk_bot.config import settings


def local_timezone(offset_hours: Optional[int] = None) -> timezone:
    hours = settings.utc_offset_hours if offset_hours is None else offset_hours
    return timezone(timedelta(hours=hours))


def now_local(offset_hours: Optional[int] = None) -> datetime:
    """Текущее местное время без tzinfo."""
    return datetime.now(local_timezone(offset_hours)).replace(tzinfo=None, microsecond=0)


def format_duration(start: Optional[datetime], end: Optional[datetime]) -> str:
    """
    Длительность между двумя отметками: "2 saat 15 dəqiqə" или "7 dəqiqə".
    """
    if not start or not end:
        return "Hesablanır..."

    total_minutes = max(int((end - start).total_seconds() // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours} saat {minutes} dəqiqə"
    return f"{minutes} dəqiqə"


def format_minutes(total_minutes: float) -> str:
    """Средняя длительность в минутах для /stats."""
    minutes = int(round(total_minutes))
    if minutes < 60:
        return f"{minutes} dəqiqə"
    return f"{minutes // 60} saat {minutes % 60} dəqiqə"


def open_duration(created_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Сколько тикет уже открыт."""
    return format_duration(created_at, now or now_local())


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Начало и конец суток, в которые попадает moment."""
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
