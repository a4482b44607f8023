"""Anthropic Messages API client used for weekly report commentary."""

import logging
import os
import time
from dataclasses import dataclass

import anthropic

from lifelog.config import CommentaryConfig
from lifelog.errors import (
    CommentaryAPIError,
    CommentaryAuthError,
    CommentaryError,
    CommentaryTimeoutError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a lifelog analyst. You read weekly calendar statistics and reply "
    "in plain Japanese prose without markdown, tables or bullet lists."
)


@dataclass
class CommentaryClientConfig:
    """Model parameters plus the API key for one commentary client."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls, settings: CommentaryConfig | None = None) -> "CommentaryClientConfig":
        """Read ANTHROPIC_API_KEY and combine it with the file settings.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is empty or unset.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY is not set; AI commentary needs an API key.")

        config = cls(api_key=api_key)
        if settings is not None:
            config.model = settings.model
            config.max_tokens = settings.max_tokens
            config.temperature = settings.temperature
            config.timeout_seconds = settings.timeout_seconds
        return config


@dataclass
class CommentaryResponse:
    text: str
    tokens_used: int
    model: str
    latency_ms: int


def _translate_error(error: anthropic.APIError, timeout: float) -> CommentaryError:
    # APITimeoutError derives from APIConnectionError, so it is checked first.
    if isinstance(error, anthropic.AuthenticationError):
        return CommentaryAuthError("Anthropic rejected the API key (check ANTHROPIC_API_KEY).")
    if isinstance(error, anthropic.APITimeoutError):
        return CommentaryTimeoutError(f"No reply from Anthropic within {timeout} seconds.")
    if isinstance(error, anthropic.APIConnectionError):
        return CommentaryAPIError(f"Cannot reach Anthropic: {error}")
    if isinstance(error, anthropic.APIStatusError):
        return CommentaryAPIError(
            f"Anthropic returned {error.status_code}: {error.message}",
            status_code=error.status_code,
        )
    return CommentaryAPIError(f"Unexpected Anthropic error: {error}")


class CommentaryClient:
    """Sends a single prompt to Claude and returns the text reply."""

    def __init__(self, config: CommentaryClientConfig) -> None:
        self._config = config
        self._client = anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    def generate(self, prompt: str) -> CommentaryResponse:
        """Ask the model for commentary on ``prompt``.

        Raises:
            CommentaryTimeoutError: The request did not finish in time.
            CommentaryAuthError: The API key was rejected.
            CommentaryAPIError: Any other API or network failure.
        """
        started = time.monotonic()
        try:
            message = self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise _translate_error(e, self._config.timeout_seconds) from e

        elapsed_ms = int((time.monotonic() - started) * 1000)
        text = "".join(getattr(block, "text", "") for block in message.content or [])
        usage = message.usage
        logger.debug(
            f"{message.model} replied in {elapsed_ms}ms "
            f"({usage.input_tokens}+{usage.output_tokens} tokens)"
        )
        return CommentaryResponse(
            text=text,
            tokens_used=usage.input_tokens + usage.output_tokens,
            model=message.model,
            latency_ms=elapsed_ms,
        )


__all__ = [
    "SYSTEM_PROMPT",
    "CommentaryClient",
    "CommentaryClientConfig",
    "CommentaryResponse",
]
