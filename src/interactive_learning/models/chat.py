"""Chat message models for the TalkToMe surface."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class ChatTab(StrEnum):
    """Tabs of the TalkToMe surface."""

    CHAT = "chat"
    IMAGE = "image"
    AUDIO = "audio"


class MessageKind(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    ERROR = "error"


class ChatMessage(BaseModel):
    """A single chat turn, optionally carrying an image or audio payload."""

    role: str  # "user" or "assistant"
    kind: MessageKind = MessageKind.TEXT
    text: str = ""
    image_base64: str | None = None
    image_mime_type: str = "image/png"
    audio_base64: str | None = None  # WAV
    timestamp: datetime = Field(default_factory=datetime.now)
