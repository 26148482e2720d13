"""Configuration models controlling chatbot behaviour.

Two shapes are used.  :class:`ChatbotConfig` is a *fragment* in which
every field is optional; pydantic records which fields were supplied in
``model_fields_set`` so an explicitly supplied ``None``, ``False`` or
``0.0`` is never confused with an absent value.  :class:`EffectiveConfig`
is the fully resolved result of layering defaults, an optional preset and
caller overrides, and is frozen so that copies handed to callers cannot
mutate a chatbot's state.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalise_preamble(value: Optional[str]) -> Optional[str]:
    # An empty preamble means "no preamble"
    if value is None or not value.strip():
        return None
    return value


class ChatbotConfig(BaseModel):
    """Partial configuration supplied by presets and callers."""

    model_config = ConfigDict(extra="forbid")

    model: Optional[str] = Field(default=None, min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    preamble: Optional[str] = None
    enable_streaming: Optional[bool] = None
    active_template: Optional[str] = None

    @field_validator("preamble")
    def validate_preamble(cls, value: Optional[str]) -> Optional[str]:
        return _normalise_preamble(value)

    def overrides(self) -> dict[str, Any]:
        """Return only the fields that were explicitly set."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class EffectiveConfig(BaseModel):
    """Fully resolved configuration used to build outbound requests."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=1.0)
    max_tokens: int = Field(..., gt=0)
    preamble: Optional[str] = None
    enable_streaming: bool = False
    active_template: Optional[str] = None

    @field_validator("preamble")
    def validate_preamble(cls, value: Optional[str]) -> Optional[str]:
        return _normalise_preamble(value)
