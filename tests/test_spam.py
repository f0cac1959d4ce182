"""
Тесты автобана за спам.
"""

import pytest

from core.spam import SpamGuard


class TestSpamGuard:
    """Скользящее окно входящих сообщений."""

    @pytest.fixture
    def guard(self, clock):
        return SpamGuard(max_messages=10, window_seconds=60, clock=clock)

    def test_below_threshold(self, guard):
        for _ in range(10):
            verdict = guard.register("111111")
        assert not verdict.triggered
        assert verdict.count == 10

    def test_eleventh_message_triggers_with_single_warning(self, guard):
        for _ in range(10):
            guard.register("111111")

        first = guard.register("111111")
        second = guard.register("111111")

        assert first.triggered and first.should_warn
        assert second.triggered and not second.should_warn

    def test_window_reset(self, guard, clock):
        for _ in range(10):
            guard.register("111111")
        clock.advance(61)

        verdict = guard.register("111111")
        assert not verdict.triggered
        assert verdict.count == 1

    def test_identities_are_independent(self, guard):
        for _ in range(11):
            guard.register("111111")
        assert not guard.register("222222").triggered

    def test_reset_and_cleanup(self, guard, clock):
        guard.register("111111")
        guard.register("222222")
        guard.reset("111111")
        assert "111111" not in guard.states

        clock.advance(61)
        assert guard.cleanup() == 1
        assert guard.states == {}
