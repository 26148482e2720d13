"""Connection settings for the external chat service.

Credentials are read from the environment (or a ``.env`` file) by the
entry point and handed to :class:`~chatbot.services.llm_service.LLMService`.
The conversation core never reads them itself.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

COHERE_COMPATIBILITY_URL = "https://api.cohere.ai/compatibility/v1"


class LlmConfig(BaseSettings):
    """Configuration settings for the chat-completion API."""

    api_key: str = Field(..., alias="COHERE_API_KEY")
    base_url: str = Field(COHERE_COMPATIBILITY_URL, alias="COHERE_BASE_URL")
    timeout: int = Field(30, alias="LLM_TIMEOUT")

    @field_validator("api_key")
    def validate_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("COHERE_API_KEY must not be empty")
        return value

    @field_validator("timeout")
    def validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("LLM_TIMEOUT must be positive")
        return value

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache()
def get_llm_config() -> LlmConfig:
    """Return a cached language model configuration."""

    return LlmConfig()
