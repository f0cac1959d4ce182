"""
Каталог типов проблем.

Пользователь выбирает проблему по номеру на третьем шаге мастера.
Последний пункт означает, что описание пользователь напишет сам.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class ProblemType:
    """
    Категория проблемы.

    Attributes:
        key: Номер пункта в меню ("1".."16")
        label: Текст для тикета и меню
        is_custom: Пользователь вводит описание сам
    """
    key: str
    label: str
    is_custom: bool = False


PROBLEM_CATALOG = [
    ProblemType("1", "💻 Kompüter işləmir"),
    ProblemType("2", "🖥️ Monitor yanmır"),
    ProblemType("3", "🧾 Printer işləmir"),
    ProblemType("4", "📡 İnternet problemi"),
    ProblemType("5", "💡 Projectorun lampası yanıb"),
    ProblemType("6", "Kompyuter və ya Sistem bloku yoxdur"),
    ProblemType("7", "⌨️ Klaviatura/Siçan işləmir"),
    ProblemType("8", "🔒 Proqram işləmir"),
    ProblemType("9", "📶 Wi-Fi problemi"),
    ProblemType("10", "💾 Format lazımdı"),
    ProblemType("11", "⚡ Enerji problemi"),
    ProblemType("12", "🌐 Veb səhifə açılmır"),
    ProblemType("13", "🔊 Səs sistemi işləmir"),
    ProblemType("14", "Projektor yoxdu"),
    ProblemType("15", "⚙️ Digər"),
    ProblemType("16", "✍️ Özüm yazacağam", is_custom=True),
]

# Быстрый доступ по номеру
PROBLEM_TYPES: Dict[str, str] = {p.key: p.label for p in PROBLEM_CATALOG}

CUSTOM_PROBLEM_KEY = next(p.key for p in PROBLEM_CATALOG if p.is_custom)


def get_problem_type(key: str) -> Optional[ProblemType]:
    """
    Получить категорию по номеру.

    Args:
        key: Номер, введённый пользователем

    Returns:
        ProblemType или None
    """
    key = (key or "").strip()
    for problem in PROBLEM_CATALOG:
        if problem.key == key:
            return problem
    return None
