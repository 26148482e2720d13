"""Conversational wrapper around the Cohere chat API.

The package keeps an in-memory conversation, merges preset and caller
configuration, renders prompt templates and sends each turn to the chat
service, either in one call or as a stream of fragments.
"""

from .models import ChatbotConfig, ChatbotPreset, ChatMessage, EffectiveConfig, MessageRole  # noqa: F401
from .services.chat_service import Chatbot  # noqa: F401
from .services.llm_service import ChatClient, LLMService  # noqa: F401
from .utils.error_handler import ChatError, ConfigurationError, TemplateNotFoundError  # noqa: F401

__version__ = "0.1.0"
