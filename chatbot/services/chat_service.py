"""Orchestration of a single chatbot session.

The :class:`Chatbot` owns one conversation history and one effective
configuration.  Each turn optionally rewrites the user's text through the
active prompt template, commits it to the history, asks the chat client
for a reply (single-shot or streamed), commits the reply and returns it.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from loguru import logger
from pydantic import ValidationError

from ..config.presets import DEFAULT_CONFIG, describe_preset, merge_config, resolve_preset
from ..memory.conversation_memory import ConversationMemory
from ..models.chat_message import ChatMessage
from ..models.chatbot_config import ChatbotConfig, EffectiveConfig
from ..models.enums import ChatbotPreset
from ..prompts.templates import apply_template, get_template
from ..utils.error_handler import ChatError, ConfigurationError, TemplateNotFoundError
from .llm_service import ChatClient

NO_RESPONSE_PLACEHOLDER = "No response received"

FragmentObserver = Callable[[str], None]


class Chatbot:
    """Conversational session against an external chat service.

    Parameters
    ----------
    client: ChatClient
        The chat-completion client.  Authentication and connection setup
        are its responsibility.
    config: ChatbotConfig, optional
        Explicit overrides.  They win over the preset, which in turn wins
        over the built-in defaults.
    preset: ChatbotPreset, optional
        Named preset applied between the defaults and ``config``.

    Raises
    ------
    ConfigurationError
        If the preset is unknown or the resulting configuration is invalid.

    Examples
    --------
    >>> bot = Chatbot.from_preset(LLMService(get_llm_config()), ChatbotPreset.PRECISE)
    >>> bot.set_template("code")
    True
    >>> bot.send_templated_message("How do I sort an array?")  # doctest: +SKIP
    """

    def __init__(
        self,
        client: ChatClient,
        config: Optional[ChatbotConfig] = None,
        *,
        preset: Union[ChatbotPreset, str, None] = None,
    ) -> None:
        self.client = client
        effective = DEFAULT_CONFIG
        if preset is not None:
            effective = merge_config(effective, resolve_preset(preset))
        if config is not None:
            effective = merge_config(effective, config)
        self._config = effective
        self._memory = ConversationMemory(self._config.preamble)
        logger.info(
            "Chatbot initialised: model={} temperature={} streaming={}",
            self._config.model,
            self._config.temperature,
            self._config.enable_streaming,
        )

    @classmethod
    def from_preset(
        cls,
        client: ChatClient,
        preset: Union[ChatbotPreset, str],
        config: Optional[ChatbotConfig] = None,
    ) -> "Chatbot":
        """Create a chatbot from one of the named presets."""
        return cls(client, config, preset=preset)

    # ------------------------------------------------------------------
    # Turns

    def send_message(self, message: str, on_fragment: Optional[FragmentObserver] = None) -> str:
        """Send ``message`` as one turn and return the assistant's reply.

        The user message is committed before the request is made and is kept
        even when the request fails, so retrying a failed turn records the
        user message twice.

        Parameters
        ----------
        message: str
            The user's text, sent as-is.
        on_fragment: callable, optional
            Called with each streamed fragment as it arrives.  Ignored when
            streaming is disabled.

        Returns
        -------
        str
            The reply text, also committed to the history.

        Raises
        ------
        ChatError
            If the chat service call fails for any reason.
        """
        self._memory.append_user(message)
        config = self._config
        outbound = self._memory.for_outbound_request()
        logger.info(
            "Sending turn: history={} streaming={} model={}",
            len(outbound),
            config.enable_streaming,
            config.model,
        )

        try:
            if config.enable_streaming:
                reply = self._send_streaming(config, outbound, on_fragment)
            else:
                reply = self._send_regular(config, outbound)
        except Exception as exc:
            logger.exception("Error sending message")
            raise ChatError("Failed to get response from chat API") from exc

        self._memory.append_assistant(reply)
        logger.debug("Reply committed ({} characters)", len(reply))
        return reply

    def send_templated_message(
        self, user_input: str, on_fragment: Optional[FragmentObserver] = None
    ) -> str:
        """Send ``user_input`` through the active template, if any.

        Raises
        ------
        TemplateNotFoundError
            If the active template is no longer registered.  Nothing is
            committed to the history in that case.
        ChatError
            If the chat service call fails.
        """
        final_message = user_input
        name = self._config.active_template
        if name is not None:
            template = get_template(name)
            if template is None:
                raise TemplateNotFoundError(name)
            final_message = apply_template(template, user_input)
        return self.send_message(final_message, on_fragment=on_fragment)

    def _send_regular(self, config: EffectiveConfig, outbound: list[ChatMessage]) -> str:
        text = self.client.complete_once(
            model=config.model,
            messages=outbound,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
        return text or NO_RESPONSE_PLACEHOLDER

    def _send_streaming(
        self,
        config: EffectiveConfig,
        outbound: list[ChatMessage],
        on_fragment: Optional[FragmentObserver],
    ) -> str:
        fragments: list[str] = []
        for fragment in self.client.complete_streaming(
            model=config.model,
            messages=outbound,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        ):
            fragments.append(fragment)
            if on_fragment is not None:
                on_fragment(fragment)
        return "".join(fragments)

    # ------------------------------------------------------------------
    # History

    def get_conversation_history(self) -> list[ChatMessage]:
        """Return a copy of every message, system preamble included."""
        return self._memory.snapshot()

    def clear_history(self) -> None:
        """Forget the conversation, keeping the preamble if one is set."""
        self._memory.clear()

    def set_preamble(self, preamble: str) -> None:
        """Replace the system preamble in both configuration and history."""
        self._memory.set_preamble(preamble)
        self._config = merge_config(self._config, ChatbotConfig(preamble=preamble))

    # ------------------------------------------------------------------
    # Templates

    def set_template(self, template_name: str) -> bool:
        """Activate a prompt template.

        Returns ``False`` and leaves the configuration unchanged when no
        template has that name.
        """
        if get_template(template_name) is None:
            logger.info("Template {!r} not found; keeping {!r}", template_name, self._config.active_template)
            return False
        self._config = merge_config(self._config, ChatbotConfig(active_template=template_name))
        return True

    def get_active_template(self) -> Optional[str]:
        return self._config.active_template

    def clear_template(self) -> None:
        self._config = merge_config(self._config, ChatbotConfig(active_template=None))

    # ------------------------------------------------------------------
    # Configuration

    def get_config(self) -> EffectiveConfig:
        """Return the effective configuration (an immutable snapshot)."""
        return self._config

    def update_config(self, config: Optional[ChatbotConfig] = None, **overrides: Any) -> None:
        """Merge new settings into the effective configuration.

        Settings may be given as a :class:`ChatbotConfig` or as keyword
        arguments; keywords win over the same field in ``config``.  A new
        preamble replaces the system message in the history, and a preamble
        set to ``None`` removes it.

        Raises
        ------
        ConfigurationError
            If the override is malformed or produces an invalid
            configuration.  The configuration is left unchanged.
        """
        override = self._build_override(config, overrides)
        updated = merge_config(self._config, override)
        if "preamble" in override.model_fields_set and updated.preamble != self._memory.preamble:
            if updated.preamble is None:
                self._memory.remove_preamble()
            else:
                self._memory.set_preamble(updated.preamble)
        self._config = updated

    def get_preset_info(self) -> str:
        """Return a human-readable description of the current style."""
        return describe_preset(self._config.temperature)

    @staticmethod
    def _build_override(config: Optional[ChatbotConfig], overrides: dict[str, Any]) -> ChatbotConfig:
        data = config.overrides() if config is not None else {}
        data.update(overrides)
        try:
            return ChatbotConfig(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration override: {exc}") from exc
