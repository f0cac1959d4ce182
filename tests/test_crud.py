"""
Тесты операций с тикетами и администрированием (SQLite в памяти).
"""

from datetime import datetime, timedelta

import pytest

from core.exceptions import TicketNotFoundError
from database import admin_crud, crud
from database.models import TICKET_STATUS_LONG_TERM, TICKET_STATUS_OPEN, TICKET_STATUS_SOLVED


ADMIN = "994551112233"
OTHER_ADMIN = "994552223344"


async def _tickets(count: int):
    created = []
    for index in range(count):
        created.append(await crud.create_ticket(
            requester=f"99450000000{index}",
            requester_name=f"User {index}",
            corpus="1",
            room=str(201 + index),
            problem="🧾 Printer işləmir",
        ))
    return created


class TestCreateTicket:
    """Создание и чтение тикетов."""

    async def test_create_open_ticket(self):
        ticket = await crud.create_ticket(
            requester="994501234567",
            requester_name="Aysel",
            corpus="1",
            room="205",
            problem="📡 İnternet problemi",
            requester_chat_id=994501234567,
            phone="+994 50 123-45-67",
        )

        assert ticket.id == 1
        assert ticket.status == TICKET_STATUS_OPEN
        assert ticket.created_at is not None
        assert ticket.solved_at is None
        assert ticket.assigned_admin is None

        stored = await crud.get_ticket(ticket.id)
        assert stored.problem == "📡 İnternet problemi"
        assert stored.requester_chat_id == 994501234567

    async def test_require_ticket(self):
        await _tickets(1)
        assert (await crud.require_ticket(1)).id == 1
        with pytest.raises(TicketNotFoundError):
            await crud.require_ticket(99)


class TestStatusTransitions:
    """Переходы статуса."""

    async def test_mark_solved(self):
        await _tickets(1)
        result = await crud.mark_solved(1, ADMIN, "Orxan", "toner dəyişdirildi")

        assert result.ok
        assert result.ticket.status == TICKET_STATUS_SOLVED
        assert result.ticket.solution == "toner dəyişdirildi"
        assert result.ticket.assigned_admin_name == "Orxan"
        assert result.ticket.solved_at is not None

    async def test_mark_solved_twice_is_rejected_without_mutation(self):
        await _tickets(1)
        await crud.mark_solved(1, ADMIN, "Orxan", "first")
        before = await crud.get_ticket(1)

        result = await crud.mark_solved(1, OTHER_ADMIN, "Nigar", "fixed")

        assert not result.ok
        assert result.reason == "solved"
        after = await crud.get_ticket(1)
        assert after.solution == "first"
        assert after.assigned_admin == ADMIN
        assert after.solved_at == before.solved_at

    async def test_mark_solved_not_found(self):
        result = await crud.mark_solved(42, ADMIN, "Orxan", "x")
        assert not result.ok
        assert result.reason == "not_found"

    async def test_long_term_can_be_solved(self):
        await _tickets(1)
        assert (await crud.mark_long_term(1, ADMIN, "Orxan")).ok
        result = await crud.mark_solved(1, ADMIN, "Orxan", "hissə gəldi")
        assert result.ok
        assert result.ticket.status == TICKET_STATUS_SOLVED

    async def test_mark_long_term_only_from_open(self):
        await _tickets(1)
        first = await crud.mark_long_term(1, ADMIN, "Orxan")
        assert first.ok
        assert first.ticket.status == TICKET_STATUS_LONG_TERM
        assert first.ticket.solved_at is not None

        second = await crud.mark_long_term(1, ADMIN, "Orxan")
        assert not second.ok
        assert second.reason == "status"

    async def test_reopen_clears_resolution(self):
        await _tickets(1)
        await crud.mark_solved(1, ADMIN, "Orxan", "fixed")

        result = await crud.reopen_ticket(1)

        assert result.ok
        ticket = result.ticket
        assert ticket.status == TICKET_STATUS_OPEN
        assert ticket.solved_at is None
        assert ticket.assigned_admin is None
        assert ticket.assigned_admin_name is None
        assert ticket.solution is None

    async def test_reopen_requires_solved(self):
        await _tickets(1)
        result = await crud.reopen_ticket(1)
        assert not result.ok
        assert result.reason == "not_solved"


class TestAssignment:
    """Один активный тикет на администратора."""

    async def test_assign_and_busy(self):
        await _tickets(7)
        assert (await crud.assign_ticket(5, ADMIN, "Orxan")).ok

        result = await crud.assign_ticket(7, ADMIN, "Orxan")

        assert not result.ok
        assert result.reason == "busy"
        assert result.active_ticket_id == 5
        assert (await crud.get_ticket(7)).assigned_admin is None

    async def test_assign_after_solving_previous(self):
        await _tickets(2)
        await crud.assign_ticket(1, ADMIN, "Orxan")
        await crud.mark_solved(1, ADMIN, "Orxan", "done")

        assert (await crud.assign_ticket(2, ADMIN, "Orxan")).ok

    async def test_long_term_ticket_does_not_block(self):
        await _tickets(2)
        await crud.assign_ticket(1, ADMIN, "Orxan")
        await crud.mark_long_term(1, ADMIN, "Orxan")

        assert (await crud.assign_ticket(2, ADMIN, "Orxan")).ok

    @pytest.mark.parametrize("prepare, reason", [
        ("solved", "solved"),
        ("long_term", "long_term"),
    ])
    async def test_assign_rejected_by_status(self, prepare, reason):
        await _tickets(1)
        if prepare == "solved":
            await crud.mark_solved(1, OTHER_ADMIN, "Nigar", "done")
        else:
            await crud.mark_long_term(1, OTHER_ADMIN, "Nigar")

        result = await crud.assign_ticket(1, ADMIN, "Orxan")
        assert not result.ok
        assert result.reason == reason

    async def test_assign_not_found(self):
        result = await crud.assign_ticket(99, ADMIN, "Orxan")
        assert result.reason == "not_found"

    async def test_already_yours_and_taken(self):
        await _tickets(1)
        await crud.assign_ticket(1, ADMIN, "Orxan")

        mine = await crud.assign_ticket(1, ADMIN, "Orxan")
        assert mine.reason == "already_yours"

        taken = await crud.assign_ticket(1, OTHER_ADMIN, "Nigar")
        assert taken.reason == "assigned_to_other"
        assert taken.assigned_name == "Orxan"

    async def test_unassign(self):
        await _tickets(1)
        await crud.assign_ticket(1, ADMIN, "Orxan")

        not_yours = await crud.unassign_ticket(1, OTHER_ADMIN)
        assert not_yours.reason == "not_yours"

        result = await crud.unassign_ticket(1, ADMIN)
        assert result.ok
        assert result.ticket.assigned_admin is None

    async def test_unassign_solved(self):
        await _tickets(1)
        await crud.assign_ticket(1, ADMIN, "Orxan")
        await crud.mark_solved(1, ADMIN, "Orxan", "done")

        result = await crud.unassign_ticket(1, ADMIN)
        assert result.reason == "solved"


class TestListsAndStats:
    """Списки, поиск, статистика."""

    async def test_list_by_status(self):
        await _tickets(3)
        await crud.mark_solved(2, ADMIN, "Orxan", "done")

        open_ids = [t.id for t in await crud.list_tickets_by_status(TICKET_STATUS_OPEN)]
        assert open_ids == [1, 3]

    async def test_today(self):
        now = datetime(2024, 3, 4, 12, 0)
        await crud.create_ticket("111111", "A", "1", "201", "x", created_at=now - timedelta(hours=2))
        await crud.create_ticket("111111", "A", "1", "202", "y", created_at=now - timedelta(days=1))

        today = await crud.list_today_tickets(now)
        assert [t.room for t in today] == ["201"]

    async def test_find(self):
        await crud.create_ticket("111111", "Aysel", "1", "205", "📡 İnternet problemi")
        await crud.create_ticket("222222", "Orxan", "2", "1101", "🧾 Printer işləmir")

        assert [t.requester_name for t in await crud.find_tickets("printer")] == ["Orxan"]
        assert [t.id for t in await crud.find_tickets("#1")] == [1]
        assert await crud.find_tickets("kondisioner") == []

    async def test_find_limit_newest_first(self):
        await _tickets(5)
        found = await crud.find_tickets("printer", limit=2)
        assert [t.id for t in found] == [5, 4]

    async def test_stats(self):
        now = datetime(2024, 3, 4, 12, 0)
        for hours in (3, 2, 1):
            await crud.create_ticket("111111", "A", "1", "201", "x", created_at=now - timedelta(hours=hours))
        await crud.mark_solved(1, ADMIN, "Orxan", "done", solved_at=now - timedelta(hours=2))
        await crud.mark_long_term(2, OTHER_ADMIN, "Nigar", marked_at=now)

        stats = await crud.get_ticket_stats(now)

        assert stats["total"] == 3
        assert stats["open"] == 1
        assert stats["solved"] == 1
        assert stats["long_term"] == 1
        assert stats["today"] == 3
        assert stats["avg_solve_minutes"] == pytest.approx(60)
        assert sorted(stats["by_admin"]) == [("Nigar", 1), ("Orxan", 1)]
        assert await crud.count_tickets() == 3


class TestBanRegistry:
    """Реестр банов."""

    async def test_ban_is_idempotent(self):
        assert await admin_crud.ban_user("994501234567", reason="manual", actor=ADMIN) is True
        assert await admin_crud.ban_user("994501234567", reason="manual", actor=ADMIN) is False
        assert await admin_crud.is_banned("994501234567")
        assert await admin_crud.list_banned() == ["994501234567"]
        assert await admin_crud.count_banned() == 1

    async def test_unban(self):
        await admin_crud.ban_user("994501234567", reason="spam")
        assert await admin_crud.unban_user("994501234567", actor=ADMIN) is True
        assert await admin_crud.unban_user("994501234567", actor=ADMIN) is False
        assert not await admin_crud.is_banned("994501234567")

    async def test_ban_writes_audit_row(self):
        await admin_crud.ban_user("994501234567", reason="spam")
        actions = await admin_crud.get_admin_actions()

        assert len(actions) == 1
        assert actions[0].action_type == "auto_ban"
        assert actions[0].admin_phone == admin_crud.SYSTEM_ACTOR
        assert actions[0].target == "994501234567"


class TestAdminsAndSettings:
    """Администраторы, профили, оценки, настройки."""

    async def test_add_remove_admin(self):
        assert await admin_crud.add_admin(ADMIN, added_by="system") is True
        assert await admin_crud.add_admin(ADMIN, added_by="system") is False
        assert await admin_crud.is_admin(ADMIN)
        assert await admin_crud.list_admins() == [ADMIN]

        assert await admin_crud.remove_admin(ADMIN, removed_by="system") is True
        assert await admin_crud.remove_admin(ADMIN, removed_by="system") is False
        assert not await admin_crud.is_admin(ADMIN)

    async def test_admin_profile(self):
        assert await admin_crud.get_admin_name(ADMIN) is None
        await admin_crud.set_admin_name(ADMIN, "Orxan")
        await admin_crud.set_admin_name(ADMIN, "Orxan M.")
        assert await admin_crud.get_admin_name(ADMIN) == "Orxan M."

    async def test_feedback_once_per_ticket(self):
        await _tickets(1)
        assert await admin_crud.create_feedback(1, "994500000000", 5) is True
        assert await admin_crud.create_feedback(1, "994500000000", 3) is False
        assert (await admin_crud.get_feedback(1)).rating == 5

    async def test_bot_settings(self):
        key = admin_crud.ESCALATION_CHAT_SETTING
        assert await admin_crud.get_bot_setting(key) is None
        assert await admin_crud.get_bot_setting(key, default="x") == "x"

        await admin_crud.set_bot_setting(key, "-100")
        await admin_crud.set_bot_setting(key, "-200", admin_phone=ADMIN)
        assert await admin_crud.get_bot_setting(key) == "-200"
