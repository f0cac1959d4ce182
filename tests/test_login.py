"""
Тесты входа администратора.
"""

import pytest

from core.login import (
    AdminSessionManager,
    AwaitingPassword,
    AwaitingUsername,
    LoginOutcome,
    advance_login,
)


CREDENTIALS = ("admin", "secret")


class TestAdvanceLogin:
    """Чистые переходы машины входа."""

    def test_username_then_password(self):
        step = advance_login(AwaitingUsername(), " admin ", CREDENTIALS)
        assert step.outcome == LoginOutcome.ASK_PASSWORD
        assert step.next_state == AwaitingPassword(username="admin")

    def test_success(self):
        step = advance_login(AwaitingPassword("admin"), "secret", CREDENTIALS)
        assert step.outcome == LoginOutcome.SUCCESS
        assert step.next_state is None

    @pytest.mark.parametrize("username, password", [
        ("admin", "wrong"),
        ("root", "secret"),
    ])
    def test_failure(self, username, password):
        step = advance_login(AwaitingPassword(username), password, CREDENTIALS)
        assert step.outcome == LoginOutcome.FAILURE
        assert step.next_state is None

    def test_empty_configured_password_always_fails(self):
        step = advance_login(AwaitingPassword("admin"), "", ("admin", ""))
        assert step.outcome == LoginOutcome.FAILURE


class TestAdminSessionManager:
    """Тесты менеджера сессий."""

    @pytest.fixture
    def manager(self):
        return AdminSessionManager("admin", "secret", max_attempts=3)

    def _fail(self, manager, identity):
        manager.begin_login(identity)
        manager.handle_reply(identity, "admin")
        return manager.handle_reply(identity, "wrong")

    def test_successful_login_creates_session(self, manager):
        manager.begin_login("111111")
        assert manager.in_login("111111")
        assert manager.handle_reply("111111", "admin").outcome == LoginOutcome.ASK_PASSWORD
        result = manager.handle_reply("111111", "secret")

        assert result.outcome == LoginOutcome.SUCCESS
        assert manager.has_session("111111")
        assert not manager.in_login("111111")

    def test_failure_counts_down(self, manager):
        first = self._fail(manager, "111111")
        assert first.attempts == 1
        assert first.attempts_left == 2
        assert not first.ban_required
        assert not manager.in_login("111111")

        second = self._fail(manager, "111111")
        assert second.attempts_left == 1

    def test_third_failure_requires_ban_and_resets_counter(self, manager):
        self._fail(manager, "111111")
        self._fail(manager, "111111")
        third = self._fail(manager, "111111")

        assert third.ban_required
        assert third.attempts == 3
        assert manager.failed_count("111111") == 0
        assert not manager.has_session("111111")

    def test_success_clears_failures(self, manager):
        self._fail(manager, "111111")
        manager.begin_login("111111")
        manager.handle_reply("111111", "admin")
        manager.handle_reply("111111", "secret")
        assert manager.failed_count("111111") == 0

    def test_restart_login(self, manager):
        manager.begin_login("111111")
        manager.handle_reply("111111", "admin")
        manager.begin_login("111111")
        assert manager.login_states["111111"] == AwaitingUsername()

    def test_logout(self, manager):
        manager.sessions.add("111111")
        assert manager.logout("111111") is True
        assert manager.logout("111111") is False
        assert not manager.has_session("111111")

    def test_clear(self, manager):
        manager.sessions.add("111111")
        self._fail(manager, "111111")
        manager.begin_login("111111")
        manager.clear("111111")
        assert not manager.has_session("111111")
        assert not manager.in_login("111111")
        assert manager.failed_count("111111") == 0
