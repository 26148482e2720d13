"""Service encapsulating interactions with the chat-completion API.

Uses LangChain's ChatOpenAI integration pointed at Cohere's
OpenAI-compatible endpoint.  The service exposes the two operations the
chatbot needs, a single-shot completion and a streamed completion, and
knows nothing about conversation state.
"""

from __future__ import annotations

from typing import Iterator, Protocol, Sequence

from loguru import logger
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI

from ..config.llm_config import LlmConfig
from ..models.chat_message import ChatMessage
from ..models.enums import MessageRole


class ChatClient(Protocol):
    """The external chat service as seen by :class:`~chatbot.services.chat_service.Chatbot`."""

    def complete_once(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> str:
        ...

    def complete_streaming(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> Iterator[str]:
        ...


class LLMService:
    """Chat client backed by :class:`~langchain_openai.ChatOpenAI`.

    The model name, temperature and output limit are supplied per call so a
    single underlying client serves every configuration change made during
    a session.  Automatic client retries are disabled; a failed call
    surfaces immediately to the caller.
    """

    def __init__(self, llm_config: LlmConfig) -> None:
        self.llm_config = llm_config
        self.llm = ChatOpenAI(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            timeout=llm_config.timeout,
            max_retries=0,
        )

    def complete_once(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the full reply text for ``messages`` in one blocking call."""
        logger.debug("Requesting completion: model={} messages={}", model, len(messages))
        response = self.llm.invoke(
            self._to_langchain(messages),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return self._text_of(response)

    def complete_streaming(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> Iterator[str]:
        """Yield reply fragments in the order the service produces them."""
        logger.debug("Requesting streamed completion: model={} messages={}", model, len(messages))
        for chunk in self.llm.stream(
            self._to_langchain(messages),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        ):
            text = self._text_of(chunk)
            if text:
                yield text

    @staticmethod
    def _to_langchain(messages: Sequence[ChatMessage]) -> list[BaseMessage]:
        converted: list[BaseMessage] = []
        for message in messages:
            if message.role == MessageRole.USER:
                converted.append(HumanMessage(content=message.content))
            elif message.role == MessageRole.ASSISTANT:
                converted.append(AIMessage(content=message.content))
            else:
                raise ValueError(f"Unsupported role in outbound request: {message.role.value}")
        return converted

    @staticmethod
    def _text_of(message: object) -> str:
        content = getattr(message, "content", "")
        if isinstance(content, str):
            return content
        # Content blocks: keep the text parts only
        parts = []
        for block in content or []:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
