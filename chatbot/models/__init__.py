"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from chatbot.models import ChatMessage, ChatbotConfig, MessageRole

These names refer to the underlying Pydantic models defined in their
respective modules.
"""

from .enums import ChatbotPreset, MessageRole  # noqa: F401
from .chat_message import ChatMessage  # noqa: F401
from .prompt_template import USER_INPUT_MARKER, PromptTemplate  # noqa: F401
from .chatbot_config import ChatbotConfig, EffectiveConfig  # noqa: F401
