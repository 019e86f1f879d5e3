"""TalkToMe surface: chat, ask-image and ask-audio tabs over a ChatService."""

import numpy as np
import structlog

from interactive_learning.audio.encoder import wav_base64
from interactive_learning.chat.service import ChatService, MessageHandler
from interactive_learning.models.chat import ChatMessage, ChatTab, MessageKind

logger = structlog.get_logger()


class TalkToMeSession:
    """Keeps the transcript of one TalkToMe visit and gates input on readiness.

    Args:
        service: Chat engine to delegate to.
        model_id: Host model identifier.
        listener: Optional async callback for every transcript entry.
    """

    def __init__(
        self,
        service: ChatService,
        model_id: str,
        listener: MessageHandler | None = None,
    ):
        self.service = service
        self.model_id = model_id
        self.tab = ChatTab.CHAT
        self.transcript: list[ChatMessage] = []
        self._listener = listener
        service.on_message(self._on_reply)

    @property
    def ready(self) -> bool:
        return self.service.is_ready(self.model_id)

    def select_tab(self, tab: ChatTab) -> None:
        self.tab = tab

    async def send_text(self, text: str) -> bool:
        if not text.strip():
            return False
        return await self._send(ChatMessage(role="user", text=text.strip()))

    async def send_image(
        self, image_base64: str, prompt: str = "", mime_type: str = "image/png"
    ) -> bool:
        message = ChatMessage(
            role="user",
            kind=MessageKind.IMAGE,
            text=prompt.strip() or "What is in this picture?",
            image_base64=image_base64,
            image_mime_type=mime_type,
        )
        return await self._send(message)

    async def send_audio(
        self, samples: np.ndarray, sample_rate: int = 16000, prompt: str = ""
    ) -> bool:
        message = ChatMessage(
            role="user",
            kind=MessageKind.AUDIO,
            text=prompt.strip(),
            audio_base64=wav_base64(samples, sample_rate),
        )
        return await self._send(message)

    async def reset(self) -> None:
        self.transcript.clear()
        await self.service.reset_session(self.model_id)

    async def close(self) -> None:
        """Forget the conversation and stop listening for replies."""
        self.service.remove_handler(self._on_reply)
        await self.reset()

    async def _send(self, message: ChatMessage) -> bool:
        if not self.ready:
            logger.info("talk_to_me_input_blocked", model_id=self.model_id)
            return False
        await self._record(message)
        await self.service.send_message(self.model_id, [message])
        return True

    async def _on_reply(self, message: ChatMessage) -> None:
        await self._record(message)

    async def _record(self, message: ChatMessage) -> None:
        self.transcript.append(message)
        if self._listener:
            await self._listener(message)
