import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from dotenv import load_dotenv

DEFAULT_COMPLETION_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL_NAME = "openai/gpt-oss-120b"
DEFAULT_DOCUMENTS_API_URL = (
    "https://api.github.com/repos/ulirdz/egis-test.ia/contents/documents"
)
DEFAULT_BULLET_ICON_SRC = "documents/egis.png"


class ModelType(str, Enum):
    """
    Enumeration of supported completion backends.

    Attributes:
        HTTP: Raw OpenAI-compatible HTTP endpoint (e.g., Groq), called with httpx.
        OPENAI: The same endpoint reached through the OpenAI SDK.
    """

    HTTP = "http"
    OPENAI = "openai"


@dataclass
class ModelConfig:
    """
    Configuration for the chat-completion model.

    Attributes:
        name: Model identifier sent in the request body.
        url: Base URL of the OpenAI-compatible API (without `/chat/completions`).
        model_type: Which backend performs the call.
        temperature: Sampling temperature.
        top_p: Nucleus sampling parameter.
        max_response_tokens: Token budget for generated answers.
        timeout: Request timeout in seconds.
    """

    name: str
    url: str
    model_type: ModelType
    temperature: float = 1.0
    top_p: float = 1.0
    max_response_tokens: int = 8192
    timeout: float = 120.0


@dataclass
class AppConfig:
    """
    Application configuration loaded from environment variables.

    Attributes:
        model: Completion model settings.
        groq_api_key: API key for the completion endpoint, if already known.
        documents_api_url: GitHub contents API URL listing the PDF reports.
        bullet_icon_src: Image used to decorate bullets and numbered items.
        log_level: Logging level (e.g., logging.INFO).
    """

    model: ModelConfig
    groq_api_key: Optional[str]
    documents_api_url: str
    bullet_icon_src: str
    log_level: int

    @staticmethod
    def _get_env_var(key: str, default: str) -> str:
        """
        Retrieve an environment variable, falling back to a default when unset or empty.

        Args:
            key: Environment variable name.
            default: Value used when the variable is missing.

        Returns:
            The configured value.
        """
        value = os.getenv(key)
        if not value:
            return default
        return value

    @staticmethod
    def _parse_log_level(log_level_name: str) -> int:
        """
        Convert log level string to logging constant.

        Args:
            log_level_name: Log level name (e.g., "debug", "info").

        Returns:
            Corresponding `logging` module level.

        Raises:
            ValueError: If the log level name is invalid.
        """
        log_levels = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }
        if log_level_name not in log_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL: '{log_level_name}'. Must be one of: {', '.join(log_levels.keys())}"
            )
        return log_levels[log_level_name]

    @staticmethod
    def _parse_number(key: str, raw: str, cast: Callable[[str], Union[int, float]]) -> Union[int, float]:
        """
        Convert a numeric environment value.

        Args:
            key: Environment variable name, used in the error message.
            raw: The raw string value.
            cast: Conversion to apply (`int` or `float`).

        Returns:
            The converted number.

        Raises:
            ValueError: If the value is not a valid number.
        """
        try:
            return cast(raw)
        except ValueError:
            raise ValueError(f"Invalid {key}: '{raw}' is not a valid number")

    @staticmethod
    def _parse_model(get) -> ModelConfig:
        """
        Build the model configuration from environment variables.

        Args:
            get: Callable returning an environment value or its default.

        Returns:
            A populated `ModelConfig`.

        Raises:
            ValueError: If the model type or a numeric setting is invalid.
        """
        raw_type = get("MODEL_TYPE", ModelType.HTTP.value).lower()
        try:
            model_type = ModelType(raw_type)
        except ValueError:
            raise ValueError(
                f"Invalid MODEL_TYPE: '{raw_type}'. Must be one of: "
                f"{', '.join(t.value for t in ModelType)}"
            )

        number = AppConfig._parse_number
        return ModelConfig(
            name=get("MODEL_NAME", DEFAULT_MODEL_NAME),
            url=get("COMPLETION_BASE_URL", DEFAULT_COMPLETION_BASE_URL).rstrip("/"),
            model_type=model_type,
            temperature=number("TEMPERATURE", get("TEMPERATURE", "1.0"), float),
            top_p=number("TOP_P", get("TOP_P", "1"), float),
            max_response_tokens=number(
                "MAX_RESPONSE_TOKENS", get("MAX_RESPONSE_TOKENS", "8192"), int
            ),
            timeout=number("REQUEST_TIMEOUT", get("REQUEST_TIMEOUT", "120"), float),
        )

    @staticmethod
    def load() -> "AppConfig":
        """
        Load application configuration from environment variables.

        Recognized environment variables (all optional):
            - GROQ_API_KEY
            - COMPLETION_BASE_URL
            - MODEL_NAME
            - MODEL_TYPE ("http" or "openai")
            - TEMPERATURE
            - TOP_P
            - MAX_RESPONSE_TOKENS
            - REQUEST_TIMEOUT
            - DOCUMENTS_API_URL
            - BULLET_ICON_SRC
            - LOG_LEVEL

        Returns:
            Fully initialized `AppConfig` object.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        load_dotenv()
        get = AppConfig._get_env_var

        log_level = AppConfig._parse_log_level(get("LOG_LEVEL", "info").lower())
        logging.basicConfig(level=log_level)
        logger = logging.getLogger(__name__)
        logger.debug("Logging initialized.")

        model = AppConfig._parse_model(get)

        return AppConfig(
            model=model,
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            documents_api_url=get("DOCUMENTS_API_URL", DEFAULT_DOCUMENTS_API_URL),
            bullet_icon_src=get("BULLET_ICON_SRC", DEFAULT_BULLET_ICON_SRC),
            log_level=log_level,
        )


class ApiKeyStore:
    """
    In-memory holder for the completion API key.

    The key can be seeded from the environment and replaced or removed at
    runtime; nothing is written to disk.
    """

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = None
        if api_key:
            self.set_api_key(api_key)

    def is_configured(self) -> bool:
        return self._api_key is not None

    def get_api_key(self) -> Optional[str]:
        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        """
        Store a new API key.

        Raises:
            ValueError: If the key is empty or whitespace only.
        """
        api_key = api_key.strip()
        if not api_key:
            raise ValueError("API key must not be empty.")
        self._api_key = api_key

    def clear_api_key(self) -> None:
        self._api_key = None
