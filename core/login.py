"""
Сессии администраторов.

Два независимых источника прав:
- Сессия после успешного входа /login (имя пользователя, затем пароль)
- Постоянный список администраторов (проверяется снаружи, в БД и конфиге)

Переходы входа описаны чистой функцией advance_login, а
AdminSessionManager хранит состояния, сессии и счётчики неудачных попыток.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set, Tuple, Union

import structlog


logger = structlog.get_logger()


# ============================================================
# СОСТОЯНИЯ ВХОДА
# ============================================================

@dataclass(frozen=True)
class AwaitingUsername:
    """Ждём имя пользователя."""


@dataclass(frozen=True)
class AwaitingPassword:
    """Имя получено, ждём пароль."""

    username: str


LoginState = Union[AwaitingUsername, AwaitingPassword]


class LoginOutcome(str, Enum):
    ASK_PASSWORD = "ask_password"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class LoginStep:
    """Результат перехода: следующее состояние (None - вход завершён) и исход."""

    next_state: Optional[LoginState]
    outcome: LoginOutcome


def advance_login(
    state: LoginState,
    text: str,
    credentials: Tuple[str, str],
) -> LoginStep:
    """
    Переход машины входа.

    Args:
        state: Текущее состояние
        text: Ответ пользователя
        credentials: Пара (username, password) из конфигурации
    """
    value = (text or "").strip()

    if isinstance(state, AwaitingUsername):
        return LoginStep(AwaitingPassword(username=value), LoginOutcome.ASK_PASSWORD)

    username, password = credentials
    # Пустой пароль в конфигурации означает, что вход отключён
    if password and state.username == username and value == password:
        return LoginStep(None, LoginOutcome.SUCCESS)
    return LoginStep(None, LoginOutcome.FAILURE)


@dataclass
class LoginResult:
    """
    Итог обработки ответа во время входа.

    Attributes:
        outcome: Исход перехода
        attempts: Число неудачных попыток после этого ответа
        attempts_left: Сколько попыток осталось до бана
        ban_required: Достигнут лимит, отправителя нужно забанить
    """

    outcome: LoginOutcome
    attempts: int = 0
    attempts_left: int = 0
    ban_required: bool = False


# ============================================================
# МЕНЕДЖЕР СЕССИЙ
# ============================================================

class AdminSessionManager:
    """
    Состояния входа, активные сессии и счётчики неудачных попыток.

    Все ключи - нормализованные идентификаторы отправителей.
    """

    def __init__(self, username: str, password: str, max_attempts: int = 3):
        self._credentials = (username, password)
        self.max_attempts = max_attempts
        self.login_states: Dict[str, LoginState] = {}
        self.sessions: Set[str] = set()
        self.failed_attempts: Dict[str, int] = {}

    def begin_login(self, identity: str) -> None:
        """Начать (или перезапустить) вход."""
        self.login_states[identity] = AwaitingUsername()

    def in_login(self, identity: str) -> bool:
        return identity in self.login_states

    def handle_reply(self, identity: str, text: str) -> LoginResult:
        """
        Обработать ответ отправителя, у которого идёт вход.

        При успехе создаётся сессия и обнуляется счётчик.
        При ошибке состояние входа сбрасывается, счётчик растёт;
        на max_attempts счётчик обнуляется и возвращается ban_required.
        """
        state = self.login_states[identity]
        step = advance_login(state, text, self._credentials)

        if step.outcome == LoginOutcome.ASK_PASSWORD:
            self.login_states[identity] = step.next_state
            return LoginResult(outcome=step.outcome)

        self.login_states.pop(identity, None)

        if step.outcome == LoginOutcome.SUCCESS:
            self.sessions.add(identity)
            self.failed_attempts.pop(identity, None)
            logger.info("admin_login_success", identity=identity)
            return LoginResult(outcome=step.outcome)

        attempts = self.failed_attempts.get(identity, 0) + 1
        logger.warning(
            "admin_login_failed",
            identity=identity,
            attempts=attempts,
            entered_username=getattr(state, "username", None),
        )

        if attempts >= self.max_attempts:
            self.failed_attempts.pop(identity, None)
            return LoginResult(
                outcome=step.outcome,
                attempts=attempts,
                attempts_left=0,
                ban_required=True,
            )

        self.failed_attempts[identity] = attempts
        return LoginResult(
            outcome=step.outcome,
            attempts=attempts,
            attempts_left=self.max_attempts - attempts,
        )

    def has_session(self, identity: str) -> bool:
        return identity in self.sessions

    def logout(self, identity: str) -> bool:
        """Завершить сессию. Возвращает True, если сессия была."""
        self.login_states.pop(identity, None)
        if identity in self.sessions:
            self.sessions.discard(identity)
            logger.info("admin_logout", identity=identity)
            return True
        return False

    def clear(self, identity: str) -> None:
        """Убрать все следы отправителя (например, после бана)."""
        self.login_states.pop(identity, None)
        self.sessions.discard(identity)
        self.failed_attempts.pop(identity, None)

    def failed_count(self, identity: str) -> int:
        return self.failed_attempts.get(identity, 0)
