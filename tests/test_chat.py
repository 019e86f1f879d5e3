"""Tests for the chat service and the TalkToMe session."""

from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from interactive_learning.chat.service import (
    SYSTEM_PROMPT,
    OpenAIChatService,
    to_openai_content,
)
from interactive_learning.chat.talk_to_me import TalkToMeSession
from interactive_learning.models.chat import ChatMessage, ChatTab, MessageKind

MODEL_ID = "Gemma3n-E2B-IT"


def _completion(text: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=text))]
    return response


@pytest.fixture
def service():
    svc = OpenAIChatService(api_key="test-key")
    svc.client = MagicMock()
    svc.client.chat.completions.create = AsyncMock(return_value=_completion("Sunlight!"))
    return svc


class TestContentParts:
    def test_text_only(self):
        parts = to_openai_content(ChatMessage(role="user", text="hi"))
        assert parts == [{"type": "text", "text": "hi"}]

    def test_image_as_data_url(self):
        message = ChatMessage(
            role="user", text="what?", image_base64="AAAA", image_mime_type="image/jpeg"
        )
        parts = to_openai_content(message)
        assert parts[1]["image_url"]["url"] == "data:image/jpeg;base64,AAAA"

    def test_audio_as_wav_input(self):
        parts = to_openai_content(ChatMessage(role="user", audio_base64="UklG"))
        assert parts == [{"type": "input_audio", "input_audio": {"data": "UklG", "format": "wav"}}]


class TestOpenAIChatService:
    def test_not_ready_without_key(self):
        assert OpenAIChatService(api_key=None).is_ready(MODEL_ID) is False

    async def test_send_without_key_is_noop(self):
        svc = OpenAIChatService(api_key=None)
        handler = AsyncMock()
        svc.on_message(handler)
        await svc.send_message(MODEL_ID, [ChatMessage(role="user", text="hi")])
        handler.assert_not_awaited()

    async def test_reply_emitted_to_handlers(self, service):
        handler = AsyncMock()
        service.on_message(handler)
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="hi")])

        reply = handler.await_args.args[0]
        assert reply.role == "assistant"
        assert reply.text == "Sunlight!"
        kwargs = service.client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == service.model
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}

    async def test_history_kept_per_model(self, service):
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="one")])
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="two")])
        messages = service.client.chat.completions.create.await_args.kwargs["messages"]
        # system, user, assistant, user, and the reply appended after the call
        assert [m["role"] for m in messages][:4] == ["system", "user", "assistant", "user"]

        await service.reset_session(MODEL_ID)
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="three")])
        messages = service.client.chat.completions.create.await_args.kwargs["messages"]
        assert messages[1]["content"] == [{"type": "text", "text": "three"}]

    async def test_audio_uses_audio_model(self, service):
        await service.send_message(
            MODEL_ID, [ChatMessage(role="user", kind=MessageKind.AUDIO, audio_base64="UklG")]
        )
        kwargs = service.client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == service.audio_model

    async def test_failure_becomes_error_message(self, service):
        service.client.chat.completions.create = AsyncMock(side_effect=RuntimeError("down"))
        handler = AsyncMock()
        service.on_message(handler)
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="hi")])
        assert handler.await_args.args[0].kind is MessageKind.ERROR

    async def test_removed_handler_not_called(self, service):
        handler = AsyncMock()
        service.on_message(handler)
        service.remove_handler(handler)
        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="hi")])
        handler.assert_not_awaited()


class TestTalkToMeSession:
    async def test_text_round_trip(self, service):
        listener = AsyncMock()
        session = TalkToMeSession(service, MODEL_ID, listener=listener)
        assert await session.send_text("  Why is the sky blue? ") is True
        assert [m.role for m in session.transcript] == ["user", "assistant"]
        assert session.transcript[0].text == "Why is the sky blue?"
        assert listener.await_count == 2

    async def test_blank_text_rejected(self, service):
        session = TalkToMeSession(service, MODEL_ID)
        assert await session.send_text("   ") is False
        service.client.chat.completions.create.assert_not_awaited()

    async def test_input_blocked_until_ready(self):
        svc = MagicMock()
        svc.is_ready.return_value = False
        svc.send_message = AsyncMock()
        session = TalkToMeSession(svc, MODEL_ID)
        assert await session.send_text("hello") is False
        svc.send_message.assert_not_awaited()
        assert session.transcript == []

    async def test_image_gets_default_prompt(self, service):
        session = TalkToMeSession(service, MODEL_ID)
        await session.send_image("AAAA")
        first = session.transcript[0]
        assert first.kind is MessageKind.IMAGE
        assert first.text == "What is in this picture?"

    async def test_audio_encoded_as_wav(self, service):
        session = TalkToMeSession(service, MODEL_ID)
        await session.send_audio(np.zeros(160, dtype=np.float32), sample_rate=16000)
        first = session.transcript[0]
        assert first.kind is MessageKind.AUDIO
        assert first.audio_base64.startswith("UklGR")

    async def test_tab_selection(self, service):
        session = TalkToMeSession(service, MODEL_ID)
        assert session.tab is ChatTab.CHAT
        session.select_tab(ChatTab.IMAGE)
        assert session.tab is ChatTab.IMAGE

    async def test_close_detaches_and_resets(self, service):
        session = TalkToMeSession(service, MODEL_ID)
        await session.send_text("hi")
        await session.close()
        assert session.transcript == []
        assert service._history == {}

        await service.send_message(MODEL_ID, [ChatMessage(role="user", text="late")])
        assert session.transcript == []
