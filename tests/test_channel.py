"""
Тесты адаптера aiogram и уведомлений группы дежурных.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.enums import ChatType
from aiogram.exceptions import TelegramAPIError

from database import admin_crud
from helpdesk_bot.channel import AiogramChannel
from helpdesk_bot.config import settings
from helpdesk_bot.handlers import to_inbound
from helpdesk_bot.notifier import EscalationNotifier


class TestAiogramChannel:

    @pytest.fixture
    def bot(self):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        bot.send_document = AsyncMock()
        return bot

    async def test_long_text_is_split(self, bot):
        channel = AiogramChannel(bot)
        text = "\n".join(["x" * 1000] * 6)

        assert await channel.send_text(42, text) is True
        assert bot.send_message.await_count == 2
        for call in bot.send_message.await_args_list:
            assert call.kwargs["chat_id"] == 42
            assert len(call.kwargs["text"]) <= 4096

    async def test_send_failure_is_logged_not_raised(self, bot):
        bot.send_message.side_effect = TelegramAPIError(method=MagicMock(), message="chat not found")
        channel = AiogramChannel(bot)

        assert await channel.send_text(42, "salam") is False

    async def test_send_media(self, bot, tmp_path):
        path = tmp_path / "report.txt"
        path.write_text("ok")

        assert await AiogramChannel(bot).send_media(42, path, caption="hesabat") is True
        assert bot.send_document.await_args.kwargs["caption"] == "hesabat"


class TestToInbound:

    def _message(self, chat_type=ChatType.PRIVATE, user_id=123456789, text="salam"):
        msg = MagicMock()
        msg.from_user = MagicMock()
        msg.from_user.id = user_id
        msg.from_user.full_name = "Aysel"
        msg.chat = MagicMock()
        msg.chat.id = user_id if chat_type == ChatType.PRIVATE else -1001
        msg.chat.type = chat_type
        msg.text = text
        msg.caption = None
        msg.photo = None
        for attr in ("document", "video", "audio", "voice", "video_note", "animation"):
            setattr(msg, attr, None)
        return msg

    def test_private_text(self):
        inbound = to_inbound(self._message(), bot_id=1)

        assert inbound.sender == "123456789"
        assert inbound.chat_id == 123456789
        assert inbound.text == "salam"
        assert inbound.display_name == "Aysel"
        assert not inbound.is_group
        assert not inbound.from_me
        assert not inbound.has_media

    def test_group_and_own_message(self):
        inbound = to_inbound(self._message(chat_type=ChatType.SUPERGROUP, user_id=1), bot_id=1)
        assert inbound.is_group
        assert inbound.from_me

    def test_document_with_caption(self):
        msg = self._message(text=None)
        msg.caption = "/solved 5 fixed"
        msg.document = MagicMock()
        msg.document.file_size = 2048

        inbound = to_inbound(msg)
        assert inbound.text == "/solved 5 fixed"
        assert inbound.has_media
        assert inbound.media_size == 2048

    def test_without_sender(self):
        msg = self._message()
        msg.from_user = None
        assert to_inbound(msg) is None


class TestEscalationNotifier:

    async def test_configured_target(self, channel):
        notifier = EscalationNotifier(channel)
        assert await notifier.notify("yeni ticket") is True
        assert channel.sent == [(-1001, "yeni ticket")]

    async def test_stored_setting_wins(self, channel):
        await admin_crud.set_bot_setting(admin_crud.ESCALATION_CHAT_SETTING, "-2002")
        await EscalationNotifier(channel).notify("yeni ticket")
        assert channel.sent == [(-2002, "yeni ticket")]

    async def test_same_chat_is_skipped(self, channel):
        assert await EscalationNotifier(channel).notify("x", source_chat_id=-1001) is False
        assert channel.sent == []

    async def test_not_configured(self, channel, monkeypatch):
        monkeypatch.setattr(settings, "escalation_chat_id", None)
        assert await EscalationNotifier(channel).notify("x") is False
        assert channel.sent == []

    async def test_channel_error_is_swallowed(self):
        broken = MagicMock()
        broken.send_text = AsyncMock(side_effect=RuntimeError("network"))
        assert await EscalationNotifier(broken).notify("x") is False
