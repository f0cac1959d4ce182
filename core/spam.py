"""
Детектор спама в личных сообщениях.

Считает все входящие сообщения отправителя (не только попытки создать
тикет) в окне 60 секунд. Превышение порога означает автоматический бан,
само решение о бане принимает маршрутизатор.
"""

import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict

import structlog


logger = structlog.get_logger()


@dataclass
class SpamState:
    """Окно подсчёта сообщений отправителя."""

    count: int = 0
    window_start: float = 0.0
    warned: bool = False


@dataclass
class SpamVerdict:
    """
    Результат регистрации сообщения.

    Attributes:
        triggered: Порог превышен в текущем окне
        should_warn: Предупреждение ещё не отправлялось в этом окне
        count: Количество сообщений в окне
    """

    triggered: bool
    should_warn: bool
    count: int


class SpamGuard:
    """Скользящее окно по количеству входящих сообщений."""

    def __init__(
        self,
        max_messages: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        self.max_messages = max_messages
        self.window_seconds = window_seconds
        self._clock = clock
        self.states: Dict[str, SpamState] = defaultdict(SpamState)

    def register(self, identity: str) -> SpamVerdict:
        """
        Учесть входящее сообщение.

        Окно сбрасывается, если с его начала прошло больше window_seconds.
        Флаг warned выставляется при первом срабатывании, поэтому
        предупреждение уходит один раз за эпизод.
        """
        now = self._clock()
        state = self.states[identity]

        if now - state.window_start > self.window_seconds:
            state.count = 0
            state.window_start = now
            state.warned = False

        state.count += 1

        if state.count <= self.max_messages:
            return SpamVerdict(triggered=False, should_warn=False, count=state.count)

        should_warn = not state.warned
        state.warned = True

        if should_warn:
            logger.warning(
                "spam_threshold_exceeded",
                identity=identity,
                count=state.count,
                window_seconds=self.window_seconds,
            )

        return SpamVerdict(triggered=True, should_warn=should_warn, count=state.count)

    def reset(self, identity: str) -> None:
        self.states.pop(identity, None)

    def cleanup(self) -> int:
        """Удалить окна, которые давно истекли."""
        now = self._clock()
        expired = [
            identity
            for identity, state in self.states.items()
            if now - state.window_start > self.window_seconds
        ]
        for identity in expired:
            del self.states[identity]
        return len(expired)
