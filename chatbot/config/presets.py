"""Configuration presets and the layering rules that apply them.

The effective configuration of a chatbot is always built in three
layers: :data:`DEFAULT_CONFIG`, an optional preset from
:data:`CHATBOT_PRESETS`, then explicit caller overrides.  Later layers win
field by field.
"""

from __future__ import annotations

from typing import Union

from loguru import logger
from pydantic import ValidationError

from ..models.chatbot_config import ChatbotConfig, EffectiveConfig
from ..models.enums import ChatbotPreset
from ..prompts.templates import get_template
from ..utils.error_handler import ConfigurationError

DEFAULT_MODEL = "command-r-plus"

DEFAULT_CONFIG = EffectiveConfig(
    model=DEFAULT_MODEL,
    temperature=0.3,
    max_tokens=500,
    enable_streaming=False,
)

CHATBOT_PRESETS: dict[ChatbotPreset, ChatbotConfig] = {
    # Deterministic: same answer for the same question
    ChatbotPreset.PRECISE: ChatbotConfig(
        model=DEFAULT_MODEL,
        temperature=0.0,
        max_tokens=500,
        preamble="You are a helpful and precise assistant. Provide accurate and factual responses.",
        enable_streaming=False,
    ),
    ChatbotPreset.BALANCED: ChatbotConfig(
        model=DEFAULT_MODEL,
        temperature=0.3,
        max_tokens=500,
        preamble="You are a helpful assistant. Be informative and conversational.",
        enable_streaming=False,
    ),
    ChatbotPreset.CREATIVE: ChatbotConfig(
        model=DEFAULT_MODEL,
        temperature=1.0,
        max_tokens=500,
        preamble=(
            "You are a creative and imaginative assistant. Feel free to be expressive "
            "and think outside the box."
        ),
        enable_streaming=False,
    ),
}

PRESET_DESCRIPTIONS = {
    "precise": "focused on accuracy",
    "balanced": "general conversation",
    "creative": "imaginative responses",
}


def resolve_preset(preset: Union[ChatbotPreset, str]) -> ChatbotConfig:
    """Return the configuration fragment for a named preset.

    Raises
    ------
    ConfigurationError
        If ``preset`` does not name one of the three presets.
    """
    try:
        key = ChatbotPreset(preset)
    except ValueError as exc:
        choices = ", ".join(p.value for p in ChatbotPreset)
        raise ConfigurationError(f"Unknown preset {preset!r}; expected one of: {choices}") from exc
    return CHATBOT_PRESETS[key]


def merge_config(base: EffectiveConfig, override: ChatbotConfig) -> EffectiveConfig:
    """Layer ``override`` on top of ``base``.

    Every field set in ``override`` replaces the corresponding value in
    ``base``; unset fields keep ``base``'s value.  The result is validated
    again, including that an active template names a registered template.

    Raises
    ------
    ConfigurationError
        If the merged values are out of range or reference an unknown
        template.
    """
    updates = override.overrides()
    try:
        merged = EffectiveConfig.model_validate({**base.model_dump(), **updates})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid chatbot configuration: {exc}") from exc

    if merged.active_template is not None and get_template(merged.active_template) is None:
        raise ConfigurationError(f"Unknown prompt template {merged.active_template!r}")

    if updates:
        logger.debug("Merged configuration fields: {}", sorted(updates))
    return merged


def classify_temperature(temperature: float) -> str:
    """Return the style label for a temperature.

    This is a display helper only; it never affects request parameters.
    """
    if temperature == 0.0:
        return "precise"
    if 0.0 < temperature <= 0.3:
        return "balanced"
    if temperature >= 1.0:
        return "creative"
    return f"custom (temperature: {temperature})"


def describe_preset(temperature: float) -> str:
    """Return the long human label used by the interactive shell."""
    label = classify_temperature(temperature)
    description = PRESET_DESCRIPTIONS.get(label)
    if description is None:
        return label
    return f"{label} ({description})"
