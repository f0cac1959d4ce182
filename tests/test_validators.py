"""
Тесты для модуля валидации.

Проверка ответов мастера и аргументов команд.
"""

import pytest

from core.exceptions import ValidationError
from core.validators import (
    parse_rating,
    parse_ticket_id,
    split_command,
    validate_corpus,
    validate_custom_problem,
    validate_room,
)
from templates import message_templates as tpl


class TestValidateCorpus:
    """Тесты выбора корпуса."""

    @pytest.mark.parametrize("text", ["1", "2", " 2 "])
    def test_valid(self, text):
        assert validate_corpus(text) == text.strip()

    @pytest.mark.parametrize("text", ["", "3", "0", "12", "bir"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError) as exc:
            validate_corpus(text)
        assert str(exc.value) == tpl.CORPUS_INVALID
        assert exc.value.field == "corpus"


class TestValidateRoom:
    """Тесты номера комнаты."""

    @pytest.mark.parametrize("corpus, text, expected", [
        ("1", "205", "205"),
        ("1", "101", "101"),
        ("1", "543", "543"),
        ("1", "205a", "205A"),
        ("1", "205 e", "205 E"),
        ("1", "205A 3", "205A 3"),
        ("2", "1101", "1101"),
        ("2", "1644B 13", "1644B 13"),
    ])
    def test_valid(self, corpus, text, expected):
        assert validate_room(corpus, text) == expected

    def test_out_of_range_for_corpus_one(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("1", "1400")
        assert str(exc.value) == tpl.ROOM_OUT_OF_RANGE["1"]

    def test_out_of_range_for_corpus_two(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("2", "205")
        assert str(exc.value) == tpl.ROOM_OUT_OF_RANGE["2"]

    def test_too_long(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("1", "205 A B C D")
        assert str(exc.value) == tpl.ROOM_TOO_LONG

    def test_must_start_with_digit(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("1", "A205")
        assert str(exc.value) == tpl.ROOM_MUST_START_WITH_DIGIT

    def test_forbidden_suffix(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("1", "205F")
        assert str(exc.value) == tpl.ROOM_BAD_SUFFIX

    def test_cabinet_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            validate_room("1", "205A 14")
        assert str(exc.value) == tpl.ROOM_BAD_CABINET


class TestValidateCustomProblem:
    """Тесты описания проблемы."""

    def test_trimmed(self):
        assert validate_custom_problem("  Kondisioner  ") == "Kondisioner"

    def test_empty(self):
        with pytest.raises(ValidationError) as exc:
            validate_custom_problem("   ")
        assert str(exc.value) == tpl.CUSTOM_PROBLEM_EMPTY

    def test_max_length(self):
        assert len(validate_custom_problem("x" * 100)) == 100
        with pytest.raises(ValidationError):
            validate_custom_problem("x" * 101)


class TestCommandArguments:
    """Тесты разбора аргументов команд."""

    def test_split_command(self):
        assert split_command("/solved  5   printer fixed ") == ["/solved", "5", "printer", "fixed"]

    @pytest.mark.parametrize("value, expected", [
        ("5", 5),
        ("#12", 12),
        ("0", None),
        ("-3", None),
        ("abc", None),
        (None, None),
    ])
    def test_parse_ticket_id(self, value, expected):
        assert parse_ticket_id(value) == expected

    @pytest.mark.parametrize("value", ["1", "5"])
    def test_parse_rating_valid(self, value):
        assert parse_rating(value) == int(value)

    @pytest.mark.parametrize("value", ["0", "6", "x", None])
    def test_parse_rating_invalid(self, value):
        with pytest.raises(ValidationError) as exc:
            parse_rating(value)
        assert str(exc.value) == tpl.RATING_OUT_OF_RANGE
