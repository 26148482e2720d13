"""Models representing chat messages."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .enums import MessageRole


class ChatMessage(BaseModel):
    """Represents a single message in a conversation.

    In addition to the role and content, each message is timestamped in
    UTC when it is created.  The timestamp is informational only; ordering
    is given by the position of the message in the conversation.
    """

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
