"""Memory package holding per-session conversation history."""

from .conversation_memory import ConversationMemory  # noqa: F401
