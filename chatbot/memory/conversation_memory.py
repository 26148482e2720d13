"""In-memory conversation history for a single chatbot session.

The history is an ordered list of :class:`ChatMessage` objects.  It holds
at most one system message, and when present that message is always the
first element.  Nothing is persisted and nothing is trimmed; the history
grows until it is cleared.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..models.chat_message import ChatMessage
from ..models.enums import MessageRole


class ConversationMemory:
    """Ordered message history with an optional leading preamble.

    Parameters
    ----------
    preamble: str, optional
        System instruction that seeds the conversation.  Empty or
        whitespace-only text is treated as no preamble.
    """

    def __init__(self, preamble: Optional[str] = None) -> None:
        self._messages: list[ChatMessage] = []
        self._preamble: Optional[str] = preamble if preamble and preamble.strip() else None
        if self._preamble is not None:
            self._messages.append(ChatMessage(role=MessageRole.SYSTEM, content=self._preamble))

    @property
    def preamble(self) -> Optional[str]:
        """The active preamble text, if any."""
        return self._preamble

    def append_user(self, text: str) -> ChatMessage:
        """Record a user message at the end of the history."""
        return self._append(MessageRole.USER, text)

    def append_assistant(self, text: str) -> ChatMessage:
        """Record an assistant reply at the end of the history."""
        return self._append(MessageRole.ASSISTANT, text)

    def set_preamble(self, text: str) -> None:
        """Replace any system message with a single one at position 0.

        Calling this again with the same text leaves the history unchanged,
        including the original system message's timestamp.
        """
        if not text or not text.strip():
            raise ValueError("Preamble text must not be empty")

        current = self._messages[0] if self._messages else None
        others = [m for m in self._messages if m.role != MessageRole.SYSTEM]
        if (
            current is not None
            and current.role == MessageRole.SYSTEM
            and current.content == text
            and len(others) == len(self._messages) - 1
        ):
            system_message = current
        else:
            system_message = ChatMessage(role=MessageRole.SYSTEM, content=text)

        self._messages = [system_message, *others]
        self._preamble = text
        logger.debug("Preamble set ({} characters)", len(text))

    def remove_preamble(self) -> None:
        """Drop the system message and forget the preamble."""
        self._messages = [m for m in self._messages if m.role != MessageRole.SYSTEM]
        self._preamble = None

    def clear(self) -> None:
        """Empty the history, re-seeding the preamble if one is active."""
        self._messages = []
        if self._preamble is not None:
            self._messages.append(ChatMessage(role=MessageRole.SYSTEM, content=self._preamble))
        logger.debug("Conversation history cleared")

    def snapshot(self) -> list[ChatMessage]:
        """Return independent copies of every message, in order."""
        return [message.model_copy() for message in self._messages]

    def for_outbound_request(self) -> list[ChatMessage]:
        """Return the user and assistant messages sent to the chat API."""
        return [
            message.model_copy()
            for message in self._messages
            if message.role in (MessageRole.USER, MessageRole.ASSISTANT)
        ]

    def _append(self, role: MessageRole, text: str) -> ChatMessage:
        message = ChatMessage(role=role, content=text)
        self._messages.append(message)
        return message.model_copy()

    def __len__(self) -> int:
        return len(self._messages)
