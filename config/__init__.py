"""Статические справочники бота."""

from config.problems import (
    CUSTOM_PROBLEM_KEY,
    PROBLEM_CATALOG,
    PROBLEM_TYPES,
    ProblemType,
    get_problem_type,
)

__all__ = [
    "CUSTOM_PROBLEM_KEY",
    "PROBLEM_CATALOG",
    "PROBLEM_TYPES",
    "ProblemType",
    "get_problem_type",
]
