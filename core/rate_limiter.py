"""
Rate limiting создания тикетов.

Модуль ограничивает количество тикетов от одного отправителя:
- Три независимых окна (минута, час, сутки) с настраиваемыми лимитами
- Окно сбрасывается, когда с его начала прошло больше длины периода
- Точное время ожидания для сообщения пользователю
- Периодическая очистка неактивных записей

Счётчики хранятся только в памяти: перезапуск бота их обнуляет.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import structlog


logger = structlog.get_logger()


# ============================================================
# КОНФИГУРАЦИЯ ЛИМИТОВ
# ============================================================

PERIODS = ("minute", "hour", "day")

PERIOD_SECONDS = {
    "minute": 60.0,
    "hour": 3600.0,
    "day": 86400.0,
}


@dataclass
class RateLimitConfig:
    """Максимум тикетов на окно."""

    per_minute: int = 1
    per_hour: int = 5
    per_day: int = 20

    def max_for(self, period: str) -> int:
        return {
            "minute": self.per_minute,
            "hour": self.per_hour,
            "day": self.per_day,
        }[period]


@dataclass
class WindowCounter:
    """Счётчик одного окна."""

    count: int = 0
    window_start: float = 0.0


@dataclass
class UserRateState:
    """Состояние rate limiting для отправителя."""

    windows: Dict[str, WindowCounter] = field(
        default_factory=lambda: {period: WindowCounter() for period in PERIODS}
    )


@dataclass
class RateLimitDecision:
    """
    Результат проверки can_create.

    Attributes:
        allowed: Можно ли создать тикет
        period: Нарушенный период (при отказе)
        remaining_seconds: Сколько ждать до сброса окна
        current_count: Текущее количество в проверенном окне
        max_count: Лимит проверенного окна
    """

    allowed: bool
    period: Optional[str] = None
    remaining_seconds: float = 0.0
    current_count: int = 0
    max_count: int = 0


# ============================================================
# RATE LIMITER
# ============================================================

class RateLimiter:
    """
    Ограничитель частоты создания тикетов.

    Ключ состояния - нормализованный идентификатор отправителя.
    """

    def __init__(
        self,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Конфигурация лимитов (по умолчанию 1/5/20)
            clock: Источник времени (подменяется в тестах)
        """
        self.config = config or RateLimitConfig()
        self._clock = clock
        self.user_states: Dict[str, UserRateState] = defaultdict(UserRateState)

    def _is_elapsed(self, counter: WindowCounter, period: str, now: float) -> bool:
        return now - counter.window_start > PERIOD_SECONDS[period]

    def can_create(self, identity: str) -> RateLimitDecision:
        """
        Проверить, может ли отправитель создать тикет.

        Окна проверяются от самого короткого к самому длинному,
        первое нарушенное окно попадает в ответ.
        """
        now = self._clock()
        state = self.user_states.get(identity)
        if state is None:
            return RateLimitDecision(
                allowed=True,
                current_count=0,
                max_count=self.config.max_for("minute"),
            )

        for period in PERIODS:
            counter = state.windows[period]
            maximum = self.config.max_for(period)
            if self._is_elapsed(counter, period, now):
                continue
            if counter.count >= maximum:
                remaining = counter.window_start + PERIOD_SECONDS[period] - now
                logger.info(
                    "ticket_rate_limited",
                    identity=identity,
                    period=period,
                    count=counter.count,
                    max_count=maximum,
                )
                return RateLimitDecision(
                    allowed=False,
                    period=period,
                    remaining_seconds=max(remaining, 1.0),
                    current_count=counter.count,
                    max_count=maximum,
                )

        minute = state.windows["minute"]
        current = 0 if self._is_elapsed(minute, "minute", now) else minute.count
        return RateLimitDecision(
            allowed=True,
            current_count=current,
            max_count=self.config.max_for("minute"),
        )

    def record_creation(self, identity: str) -> None:
        """Учесть успешно созданный тикет во всех трёх окнах."""
        now = self._clock()
        state = self.user_states[identity]

        for period in PERIODS:
            counter = state.windows[period]
            if counter.count == 0 or self._is_elapsed(counter, period, now):
                counter.count = 1
                counter.window_start = now
            else:
                counter.count += 1

    def get_user_stats(self, identity: str) -> List[Dict[str, Any]]:
        """
        Статистика окон для /mylimits.

        Returns:
            Пустой список, если отправитель ещё не создавал тикеты
        """
        state = self.user_states.get(identity)
        if not state:
            return []

        now = self._clock()
        stats = []
        for period in PERIODS:
            counter = state.windows[period]
            elapsed = self._is_elapsed(counter, period, now)
            remaining = 0.0 if elapsed else counter.window_start + PERIOD_SECONDS[period] - now
            stats.append({
                "period": period,
                "count": 0 if elapsed else counter.count,
                "max": self.config.max_for(period),
                "remaining_seconds": remaining,
                "remaining": format_remaining(remaining),
            })
        return stats

    def reset_user(self, identity: str) -> None:
        """
        Сбросить состояние отправителя.

        Args:
            identity: Нормализованный идентификатор
        """
        if identity in self.user_states:
            del self.user_states[identity]

    def cleanup(self) -> int:
        """
        Удалить записи, у которых истекло суточное окно.

        Returns:
            Количество удалённых записей
        """
        now = self._clock()
        expired = [
            identity
            for identity, state in self.user_states.items()
            if self._is_elapsed(state.windows["day"], "day", now)
        ]
        for identity in expired:
            del self.user_states[identity]

        if expired:
            logger.debug("rate_limit_cache_cleanup", removed_count=len(expired))
        return len(expired)

    @property
    def tracked_users(self) -> int:
        return len(self.user_states)


def format_remaining(seconds: float) -> str:
    """
    Время ожидания на азербайджанском: "1 saat 5 dəqiqə", "40 saniyə".
    """
    total = int(round(max(seconds, 0)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    if hours > 0:
        return f"{hours} saat {minutes} dəqiqə"
    if minutes > 0:
        return f"{minutes} dəqiqə {secs} saniyə"
    return f"{secs} saniyə"
