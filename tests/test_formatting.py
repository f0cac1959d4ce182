"""
Тесты форматирования сообщений и длительностей.
"""

from datetime import datetime, timedelta

import pytest

from templates import message_templates as tpl
from utils.formatting import day_bounds, format_duration, format_minutes


class TestTemplates:

    def test_escape_html(self):
        assert tpl.escape_html("<b>K1 & K2</b>") == "&lt;b&gt;K1 &amp; K2&lt;/b&gt;"

    def test_format_datetime_empty(self):
        assert tpl.format_datetime(None) == "Yoxdur"

    def test_split_long_message_on_lines(self):
        text = "\n".join(["x" * 30] * 10)
        parts = tpl.split_long_message(text, max_length=100)

        assert all(len(part) <= 100 for part in parts)
        assert sum(part.count("x") for part in parts) == 300

    def test_short_message_is_single_part(self):
        assert tpl.split_long_message("salam") == ["salam"]

    def test_problem_list_has_all_options(self):
        text = tpl.problem_list_message()
        assert "3. 🧾 Printer işləmir" in text
        assert "16." in text

    def test_escalation_escapes_user_input(self):
        class Ticket:
            id = 7
            requester_name = "<script>"
            corpus = "1"
            room = "205"
            problem = "a & b"
            created_at = datetime(2024, 3, 4, 9, 30)

        text = tpl.escalation_new_ticket(Ticket())
        assert "&lt;script&gt;" in text
        assert "a &amp; b" in text
        assert "/solved 7" in text


class TestDurations:

    @pytest.mark.parametrize("minutes, expected", [
        (0, "0 dəqiqə"),
        (7, "7 dəqiqə"),
        (135, "2 saat 15 dəqiqə"),
    ])
    def test_format_duration(self, minutes, expected):
        start = datetime(2024, 3, 4, 9, 0)
        assert format_duration(start, start + timedelta(minutes=minutes)) == expected

    def test_format_duration_unknown(self):
        assert format_duration(None, datetime(2024, 3, 4)) == "Hesablanır..."

    def test_format_minutes(self):
        assert format_minutes(42.4) == "42 dəqiqə"
        assert format_minutes(90) == "1 saat 30 dəqiqə"

    def test_day_bounds(self):
        start, end = day_bounds(datetime(2024, 3, 4, 15, 45, 12))
        assert start == datetime(2024, 3, 4)
        assert end == datetime(2024, 3, 5)
