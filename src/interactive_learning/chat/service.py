"""Chat collaborator interface and an OpenAI-backed implementation."""

from collections.abc import Callable, Coroutine, Sequence
from typing import Any, Protocol

import structlog
from openai import AsyncOpenAI

from interactive_learning.models.chat import ChatMessage, MessageKind

logger = structlog.get_logger()

# Type alias for response handler callbacks
MessageHandler = Callable[[ChatMessage], Coroutine[Any, Any, None]]

SYSTEM_PROMPT = (
    "You are a friendly science tutor for young learners exploring renewable "
    "energy through hands-on projects. Keep answers short, concrete and "
    "encouraging. Reply in the learner's language when you can tell it."
)


class ChatService(Protocol):
    """Multimodal chat engine consumed by the TalkToMe surface."""

    def is_ready(self, model_id: str) -> bool: ...

    def on_message(self, handler: MessageHandler) -> None: ...

    def remove_handler(self, handler: MessageHandler) -> None: ...

    async def send_message(self, model_id: str, messages: Sequence[ChatMessage]) -> None: ...

    async def reset_session(self, model_id: str) -> None: ...


def to_openai_content(message: ChatMessage) -> list[dict[str, Any]]:
    """Build chat-completions content parts for one message."""
    parts: list[dict[str, Any]] = []
    if message.text:
        parts.append({"type": "text", "text": message.text})
    if message.image_base64:
        parts.append({
            "type": "image_url",
            "image_url": {
                "url": f"data:{message.image_mime_type};base64,{message.image_base64}",
            },
        })
    if message.audio_base64:
        parts.append({
            "type": "input_audio",
            "input_audio": {"data": message.audio_base64, "format": "wav"},
        })
    return parts


class OpenAIChatService:
    """Chat service backed by the OpenAI chat completions API.

    History is kept per model identifier so each host model has its own
    conversation. Without an API key the service never reports ready.

    Args:
        api_key: OpenAI API key, or None to disable the service.
        model: Model for text and image turns.
        audio_model: Model for turns carrying audio input.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        audio_model: str = "gpt-4o-audio-preview",
    ):
        self.client = AsyncOpenAI(api_key=api_key) if api_key else None
        self.model = model
        self.audio_model = audio_model
        self._history: dict[str, list[dict[str, Any]]] = {}
        self._handlers: list[MessageHandler] = []

    def is_ready(self, model_id: str) -> bool:
        return self.client is not None

    def on_message(self, handler: MessageHandler) -> None:
        """Register an async callback for assistant messages."""
        self._handlers.append(handler)

    def remove_handler(self, handler: MessageHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def send_message(self, model_id: str, messages: Sequence[ChatMessage]) -> None:
        """Send user messages and emit the assistant reply to handlers."""
        if self.client is None:
            logger.warning("chat_not_ready", model_id=model_id)
            return

        history = self._history.setdefault(
            model_id, [{"role": "system", "content": SYSTEM_PROMPT}]
        )
        for message in messages:
            history.append({"role": message.role, "content": to_openai_content(message)})
        has_audio = any(m.audio_base64 for m in messages)

        try:
            response = await self.client.chat.completions.create(
                model=self.audio_model if has_audio else self.model,
                messages=history,
                temperature=0.7,
            )
            text = response.choices[0].message.content or ""
            history.append({"role": "assistant", "content": text})
            reply = ChatMessage(role="assistant", text=text)
            logger.info("chat_reply_received", model_id=model_id, chars=len(text))
        except Exception:
            logger.exception("chat_request_failed", model_id=model_id)
            reply = ChatMessage(
                role="assistant",
                kind=MessageKind.ERROR,
                text="Sorry, I couldn't answer that. Please try again.",
            )

        await self._emit(reply)

    async def reset_session(self, model_id: str) -> None:
        self._history.pop(model_id, None)
        logger.info("chat_session_reset", model_id=model_id)

    async def _emit(self, message: ChatMessage) -> None:
        for handler in self._handlers:
            try:
                await handler(message)
            except Exception:
                logger.exception("chat_handler_error")
