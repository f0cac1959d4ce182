"""
Мастер создания тикета.

Чистая машина состояний без ввода-вывода:
- WizardStep - шаги мастера
- ConversationState - состояние одного отправителя
- advance(state, text) - переход, возвращает новое состояние,
  ответ пользователю и, на последнем шаге, черновик тикета

Сохранение тикета и отправка сообщений выполняются в
helpdesk_bot.handlers.tickets.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from config.problems import get_problem_type
from core.exceptions import ValidationError
from core.validators import validate_corpus, validate_custom_problem, validate_room
from templates import message_templates as tpl


class WizardStep(str, Enum):
    """Шаги мастера."""

    AWAIT_CORPUS = "await_corpus"
    AWAIT_ROOM = "await_room"
    AWAIT_PROBLEM_CHOICE = "await_problem_choice"
    AWAIT_CUSTOM_PROBLEM = "await_custom_problem"


@dataclass
class ConversationState:
    """
    Состояние мастера для одного отправителя.

    Attributes:
        identity: Нормализованный идентификатор
        chat_id: Чат, куда отвечать
        display_name: Имя отправителя для тикета
        step: Текущий шаг
        corpus: Выбранный корпус
        room: Номер комнаты
        problem: Описание проблемы
        started_at: Время начала мастера
        attempts: Количество полученных ответов
        failures: Количество ошибок обработки
    """

    identity: str
    chat_id: int
    display_name: str
    step: WizardStep = WizardStep.AWAIT_CORPUS
    corpus: Optional[str] = None
    room: Optional[str] = None
    problem: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)
    attempts: int = 0
    failures: int = 0


@dataclass(frozen=True)
class TicketDraft:
    """Данные для создания тикета после последнего шага."""

    identity: str
    chat_id: int
    display_name: str
    corpus: str
    room: str
    problem: str


@dataclass
class WizardTransition:
    """
    Результат перехода.

    Attributes:
        state: Новое состояние (None, если мастер завершён)
        reply: Ответ пользователю (None при завершении, ответ формирует обработчик)
        draft: Черновик тикета при завершении
        rejected: Ввод отклонён валидацией, шаг не изменился
    """

    state: Optional[ConversationState]
    reply: Optional[str] = None
    draft: Optional[TicketDraft] = None
    rejected: bool = False

    @property
    def completed(self) -> bool:
        return self.draft is not None


def start_conversation(
    identity: str,
    chat_id: int,
    display_name: str,
    started_at: Optional[datetime] = None,
) -> ConversationState:
    """Новое состояние на шаге выбора корпуса."""
    return ConversationState(
        identity=identity,
        chat_id=chat_id,
        display_name=display_name,
        started_at=started_at or datetime.now(),
    )


def prompt_for(state: ConversationState) -> str:
    """Вопрос текущего шага (повтор при /start во время мастера)."""
    if state.step == WizardStep.AWAIT_CORPUS:
        return tpl.WELCOME
    if state.step == WizardStep.AWAIT_ROOM:
        return tpl.ROOM_PROMPT
    if state.step == WizardStep.AWAIT_PROBLEM_CHOICE:
        return tpl.problem_list_message()
    return tpl.CUSTOM_PROBLEM_PROMPT


def _complete(state: ConversationState, problem: str) -> WizardTransition:
    draft = TicketDraft(
        identity=state.identity,
        chat_id=state.chat_id,
        display_name=state.display_name,
        corpus=state.corpus,
        room=state.room,
        problem=problem,
    )
    return WizardTransition(state=None, draft=draft)


def advance(state: ConversationState, text: str) -> WizardTransition:
    """
    Обработать ответ пользователя.

    Невалидный ввод не меняет шаг: возвращается то же состояние
    (с увеличенным attempts) и текст ошибки.
    """
    state = replace(state, attempts=state.attempts + 1)
    text = text or ""

    try:
        if state.step == WizardStep.AWAIT_CORPUS:
            corpus = validate_corpus(text)
            return WizardTransition(
                state=replace(state, corpus=corpus, step=WizardStep.AWAIT_ROOM),
                reply=tpl.ROOM_PROMPT,
            )

        if state.step == WizardStep.AWAIT_ROOM:
            room = validate_room(state.corpus, text)
            return WizardTransition(
                state=replace(state, room=room, step=WizardStep.AWAIT_PROBLEM_CHOICE),
                reply=tpl.problem_list_message(),
            )

        if state.step == WizardStep.AWAIT_PROBLEM_CHOICE:
            problem = get_problem_type(text)
            if problem is None:
                raise ValidationError(tpl.PROBLEM_CHOICE_INVALID, field="problem")
            if problem.is_custom:
                return WizardTransition(
                    state=replace(state, step=WizardStep.AWAIT_CUSTOM_PROBLEM),
                    reply=tpl.CUSTOM_PROBLEM_PROMPT,
                )
            return _complete(replace(state, problem=problem.label), problem.label)

        custom = validate_custom_problem(text)
        return _complete(replace(state, problem=custom), custom)

    except ValidationError as e:
        return WizardTransition(state=state, reply=str(e), rejected=True)
