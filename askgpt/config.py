"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
The API key is never hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from askgpt.exceptions import ConfigurationError

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class OpenAISettings(BaseSettings):
    """Chat-completion API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Bearer token for the chat-completion API",
    )
    model: str = Field(
        default="gpt-4-turbo",
        description="Model identifier sent with every request",
    )
    endpoint: HttpUrl = Field(
        default=HttpUrl(CHAT_COMPLETIONS_URL),
        description="Chat-completion endpoint URL",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )
    strict_responses: bool = Field(
        default=False,
        description=(
            "Reject responses carrying fields outside the known schema. Off by "
            "default: the live API adds fields (created, logprobs, refusal, ...) "
            "that are kept on the parsed models instead"
        ),
    )

    def require_api_key(self) -> str:
        """Return the API key, failing if it is absent.

        Returns:
            The raw credential string.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is unset or empty.
        """
        if self.api_key is None or not self.api_key.get_secret_value():
            raise ConfigurationError(
                "the OPENAI_API_KEY environment variable is not set",
                details={"variable": "OPENAI_API_KEY"},
            )
        return self.api_key.get_secret_value()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASKGPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )
    spinner: bool = Field(
        default=True,
        description="Show a spinner while waiting for a reply (terminals only)",
    )

    openai: OpenAISettings = Field(default_factory=OpenAISettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
