"""
Тесты ограничителя частоты создания тикетов.
"""

import pytest

from core.rate_limiter import (
    RateLimitConfig,
    RateLimiter,
    UserRateState,
    format_remaining,
)


class TestRateLimitConfig:
    """Тесты конфигурации лимитов."""

    def test_default_config(self):
        config = RateLimitConfig()
        assert config.max_for("minute") == 1
        assert config.max_for("hour") == 5
        assert config.max_for("day") == 20

    def test_initial_state(self):
        state = UserRateState()
        assert set(state.windows) == {"minute", "hour", "day"}
        assert all(w.count == 0 for w in state.windows.values())


class TestRateLimiter:
    """Тесты окон минута/час/сутки."""

    @pytest.fixture
    def limiter(self, clock):
        return RateLimiter(RateLimitConfig(), clock=clock)

    def test_unknown_user_allowed(self, limiter):
        decision = limiter.can_create("111111")
        assert decision.allowed
        assert decision.current_count == 0

    def test_second_creation_in_minute_denied(self, limiter, clock):
        limiter.record_creation("111111")
        clock.advance(10)

        decision = limiter.can_create("111111")
        assert not decision.allowed
        assert decision.period == "minute"
        assert decision.remaining_seconds > 0
        assert decision.current_count == 1
        assert decision.max_count == 1

    def test_allowed_after_minute_window(self, limiter, clock):
        limiter.record_creation("111111")
        clock.advance(61)
        assert limiter.can_create("111111").allowed

    def test_hour_limit(self, limiter, clock):
        for _ in range(5):
            limiter.record_creation("111111")
            clock.advance(61)

        decision = limiter.can_create("111111")
        assert not decision.allowed
        assert decision.period == "hour"
        assert decision.max_count == 5

    def test_day_limit(self, clock):
        limiter = RateLimiter(RateLimitConfig(per_minute=100, per_hour=100, per_day=2), clock=clock)
        limiter.record_creation("111111")
        limiter.record_creation("111111")

        decision = limiter.can_create("111111")
        assert not decision.allowed
        assert decision.period == "day"

    def test_remaining_never_below_one_second(self, limiter, clock):
        limiter.record_creation("111111")
        clock.advance(59.9)
        decision = limiter.can_create("111111")
        assert not decision.allowed
        assert decision.remaining_seconds >= 1.0

    def test_users_are_independent(self, limiter):
        limiter.record_creation("111111")
        assert limiter.can_create("222222").allowed

    def test_get_user_stats(self, limiter, clock):
        assert limiter.get_user_stats("111111") == []

        limiter.record_creation("111111")
        clock.advance(30)
        stats = {item["period"]: item for item in limiter.get_user_stats("111111")}

        assert stats["minute"]["count"] == 1
        assert stats["minute"]["max"] == 1
        assert stats["minute"]["remaining"] == "30 saniyə"
        assert stats["day"]["count"] == 1

    def test_reset_user(self, limiter):
        limiter.record_creation("111111")
        limiter.reset_user("111111")
        assert limiter.tracked_users == 0

    def test_cleanup_removes_expired_day_windows(self, limiter, clock):
        limiter.record_creation("111111")
        clock.advance(86401)
        limiter.record_creation("222222")

        assert limiter.cleanup() == 1
        assert "111111" not in limiter.user_states
        assert "222222" in limiter.user_states


class TestFormatRemaining:
    """Тесты форматирования времени ожидания."""

    @pytest.mark.parametrize("seconds, expected", [
        (40, "40 saniyə"),
        (125, "2 dəqiqə 5 saniyə"),
        (3900, "1 saat 5 dəqiqə"),
        (-5, "0 saniyə"),
    ])
    def test_format(self, seconds, expected):
        assert format_remaining(seconds) == expected
