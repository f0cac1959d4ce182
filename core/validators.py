"""
Валидация пользовательского ввода.

Модуль проверяет ответы мастера создания тикета и аргументы команд:
- Номер корпуса
- Номер комнаты с учётом диапазона корпуса
- Описание проблемы, введённое вручную
- ID тикета и оценка в командах

Ошибки выбрасываются как ValidationError с готовым текстом для пользователя.
"""

import re
from typing import Dict, List, Optional, Tuple

from core.exceptions import ValidationError
from templates import message_templates as tpl


# ============================================================
# КОНСТАНТЫ
# ============================================================

MAX_ROOM_LENGTH = 10
MAX_CUSTOM_PROBLEM_LENGTH = tpl.MAX_CUSTOM_PROBLEM_LENGTH

# Диапазоны основных номеров комнат по корпусам
ROOM_RANGES: Dict[str, Tuple[int, int]] = {
    "1": (101, 543),
    "2": (1101, 1644),
}

# Номера кабинетов внутри комнаты (101A 3)
CABINET_RANGE = (1, 13)

_LEADING_NUMBER = re.compile(r"^(\d+)")
_FORBIDDEN_SUFFIX_CHARS = re.compile(r"[^A-E0-9\s]")
_DIGIT_RUNS = re.compile(r"\d+")


# ============================================================
# МАСТЕР ТИКЕТА
# ============================================================

def validate_corpus(text: str) -> str:
    """Корпус: ровно "1" или "2"."""
    value = (text or "").strip()
    if value not in ROOM_RANGES:
        raise ValidationError(tpl.CORPUS_INVALID, field="corpus")
    return value


def validate_room(corpus: str, text: str) -> str:
    """
    Проверка номера комнаты.

    Правила:
    - Не длиннее 10 символов (после trim и приведения к верхнему регистру)
    - Начинается с цифр, основной номер в диапазоне корпуса
    - После основного номера только A-E, цифры и пробелы
    - Каждое число после основного номера в диапазоне 1-13

    Args:
        corpus: Выбранный корпус ("1" или "2")
        text: Ввод пользователя

    Returns:
        Нормализованный номер комнаты (верхний регистр)
    """
    room = (text or "").strip().upper()

    if len(room) > MAX_ROOM_LENGTH:
        raise ValidationError(tpl.ROOM_TOO_LONG, field="room")

    match = _LEADING_NUMBER.match(room)
    if not match:
        raise ValidationError(tpl.ROOM_MUST_START_WITH_DIGIT, field="room")

    main_number = int(match.group(1))
    low, high = ROOM_RANGES[corpus]
    if not low <= main_number <= high:
        raise ValidationError(tpl.ROOM_OUT_OF_RANGE[corpus], field="room")

    rest = room[match.end():].strip()
    if _FORBIDDEN_SUFFIX_CHARS.search(rest):
        raise ValidationError(tpl.ROOM_BAD_SUFFIX, field="room")

    for number in _DIGIT_RUNS.findall(rest):
        if not CABINET_RANGE[0] <= int(number) <= CABINET_RANGE[1]:
            raise ValidationError(tpl.ROOM_BAD_CABINET, field="room")

    return room


def validate_custom_problem(text: str) -> str:
    """Описание проблемы: 1-100 символов после trim."""
    problem = (text or "").strip()
    if not problem:
        raise ValidationError(tpl.CUSTOM_PROBLEM_EMPTY, field="problem")
    if len(problem) > MAX_CUSTOM_PROBLEM_LENGTH:
        raise ValidationError(tpl.CUSTOM_PROBLEM_TOO_LONG, field="problem")
    return problem


# ============================================================
# АРГУМЕНТЫ КОМАНД
# ============================================================

def split_command(text: str) -> List[str]:
    """Разбить команду по пробелам (пустые части отбрасываются)."""
    return (text or "").split()


def parse_ticket_id(value: Optional[str]) -> Optional[int]:
    """
    Разобрать ID тикета из аргумента команды.

    Returns:
        Положительное число или None
    """
    if value is None:
        return None
    value = value.strip().lstrip("#")
    if not value.isdigit():
        return None
    ticket_id = int(value)
    return ticket_id if ticket_id > 0 else None


def parse_rating(value: Optional[str]) -> int:
    """Оценка 1-5 для /rate."""
    if value is None or not value.strip().isdigit():
        raise ValidationError(tpl.RATING_OUT_OF_RANGE, field="rating")
    rating = int(value.strip())
    if not 1 <= rating <= 5:
        raise ValidationError(tpl.RATING_OUT_OF_RANGE, field="rating")
    return rating
