"""
Configuration constants and settings for the anytra prompt enhancement server.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from anytra.exceptions import ConfigurationError

# Server identity
SERVER_NAME = "anytra"
PROTOCOL_VERSION = "2024-11-05"
TOOL_NAME = "enhance_prompt"

# Backend configuration
OPENROUTER_CHAT_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "openrouter/auto"
DEFAULT_TEMPERATURE = 0.2
REQUEST_TIMEOUT_SECONDS = 60.0
CONNECT_TIMEOUT_SECONDS = 10.0

# Retry and degradation
MAX_ATTEMPTS = 3
BASE_RETRY_DELAY = 0.5  # seconds, doubled per attempt
FALLBACK_CONFIDENCE = 0.3
FALLBACK_RATIONALE = "Fallback due to API failure after retries"

# Validation gate
MIN_PROMPT_BYTES = 10
MAX_PROMPT_BYTES = 5000
MIN_WORD_COUNT = 10
DENYLIST = ("inappropriate", "offensive")
CONFIDENCE_LENGTH_TARGET = 1000
CONFIDENCE_WORD_TARGET = 50

# Sequential thinking
DEFAULT_THOUGHT_COUNT = 3
FEW_SHOT_LIMIT = 2

# Server loop
DEFAULT_SHUTDOWN_TIMEOUT = 5.0
MAX_LINE_BYTES = 16 * 1024 * 1024

# Logging
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

TRUTHY_VALUES = {"true", "1", "yes", "on"}
FALSY_VALUES = {"false", "0", "no", "off"}


def parse_bool_flag(value: Optional[str], default: bool = True) -> bool:
    """
    Interpret an environment flag.

    Recognises true/1/yes/on and false/0/no/off case-insensitively; anything
    else, including an unset variable, yields ``default``.
    """
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in TRUTHY_VALUES:
        return True
    if lowered in FALSY_VALUES:
        return False
    return default


class OpenRouterConfig(BaseModel):
    """Credentials and model selection for the OpenRouter backend."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., description="OpenRouter API key")
    model: str = Field(DEFAULT_MODEL, description="Model identifier")
    referer: Optional[str] = Field(None, description="HTTP-Referer attribution header")
    title: Optional[str] = Field(None, description="X-Title attribution header")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OpenRouterConfig":
        env = os.environ if environ is None else environ
        api_key = env.get("OPENROUTER_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "OPENROUTER_API_KEY", "environment variable is required"
            )
        return cls(
            api_key=api_key,
            model=env.get("OPENROUTER_MODEL") or DEFAULT_MODEL,
            referer=env.get("OPENROUTER_REFERER"),
            title=env.get("OPENROUTER_TITLE"),
        )


class SequentialThinkingConfig(BaseModel):
    """Process-wide defaults for the refinement loop."""

    model_config = ConfigDict(frozen=True)

    default_enabled: bool = True

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "SequentialThinkingConfig":
        env = os.environ if environ is None else environ
        return cls(
            default_enabled=parse_bool_flag(env.get("ENABLE_SEQUENTIAL_THINKING"))
        )


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggingConfig":
        env = os.environ if environ is None else environ
        return cls(level=(env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper())


class Config(BaseModel):
    """Immutable application configuration, loaded once at startup."""

    model_config = ConfigDict(frozen=True)

    openrouter: OpenRouterConfig
    sequential_thinking: SequentialThinkingConfig = Field(
        default_factory=SequentialThinkingConfig
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Load configuration from environment variables.

        Raises:
            ConfigurationError: If OPENROUTER_API_KEY is missing
        """
        return cls(
            openrouter=OpenRouterConfig.from_env(environ),
            sequential_thinking=SequentialThinkingConfig.from_env(environ),
            logging=LoggingConfig.from_env(environ),
        )

    @property
    def sequential_thinking_enabled(self) -> bool:
        return self.sequential_thinking.default_enabled
