"""Enumerations used across models."""

from enum import Enum


class MessageRole(str, Enum):
    """Enum for message roles in a conversation.

    The role field distinguishes between the sender of each message in the
    conversation.  ``USER`` denotes a human message, ``ASSISTANT`` denotes
    a reply from the AI model, and ``SYSTEM`` carries the preamble that
    sets the assistant's behaviour for the whole conversation.
    """

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatbotPreset(str, Enum):
    """Named configuration bundles shipped with the chatbot.

    ``PRECISE`` suits Q&A and documentation, ``BALANCED`` general
    conversation and ``CREATIVE`` brainstorming or storytelling.
    """

    PRECISE = "precise"
    BALANCED = "balanced"
    CREATIVE = "creative"
