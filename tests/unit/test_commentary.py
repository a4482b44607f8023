"""Unit tests for the commentary client and service."""

import json
import os
from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from lifelog.commentary.client import (
    CommentaryClient,
    CommentaryClientConfig,
    CommentaryResponse,
)
from lifelog.commentary.service import (
    FAILED_TEXT,
    NO_DATA_TEXT,
    NOT_CONFIGURED_TEXT,
    CommentaryService,
    build_prompt,
)
from lifelog.config import CommentaryConfig
from lifelog.core.models import ComparisonRow
from lifelog.errors import (
    CommentaryAPIError,
    CommentaryAuthError,
    CommentaryTimeoutError,
)

ROWS = [ComparisonRow("仕事", 3, 10.5, 2, 8.0, 1, 2.5, ratio=70.0)]


def reply(text: str) -> CommentaryResponse:
    return CommentaryResponse(text=text, tokens_used=42, model="test-model", latency_ms=5)


class TestCommentaryClientConfig:
    """Tests for CommentaryClientConfig.from_env."""

    def test_missing_key(self) -> None:
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": ""}):
            with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
                CommentaryClientConfig.from_env()

    def test_settings_applied(self) -> None:
        settings = CommentaryConfig(model="claude-test", max_tokens=256, timeout_seconds=5.0)
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-test"}):
            config = CommentaryClientConfig.from_env(settings)
        assert config.api_key == "sk-test"
        assert config.model == "claude-test"
        assert config.max_tokens == 256
        assert config.timeout_seconds == 5.0


class TestCommentaryClient:
    """Tests for CommentaryClient error mapping."""

    @pytest.fixture
    def client(self) -> CommentaryClient:
        return CommentaryClient(CommentaryClientConfig(api_key="sk-test"))

    @pytest.fixture
    def request_(self) -> httpx.Request:
        return httpx.Request("POST", "https://api.anthropic.com/v1/messages")

    def test_generate_returns_text(self, client: CommentaryClient) -> None:
        message = MagicMock()
        message.content = [MagicMock(text="良い傾向が見られます。")]
        message.usage.input_tokens = 10
        message.usage.output_tokens = 20
        message.model = "claude-test"

        with patch.object(client._client.messages, "create", return_value=message) as create:
            response = client.generate("prompt")

        assert response.text == "良い傾向が見られます。"
        assert response.tokens_used == 30
        assert create.call_args.kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    def test_timeout(self, client: CommentaryClient, request_: httpx.Request) -> None:
        error = anthropic.APITimeoutError(request=request_)
        with patch.object(client._client.messages, "create", side_effect=error):
            with pytest.raises(CommentaryTimeoutError):
                client.generate("prompt")

    def test_auth(self, client: CommentaryClient, request_: httpx.Request) -> None:
        response = httpx.Response(401, request=request_)
        error = anthropic.AuthenticationError("bad key", response=response, body=None)
        with patch.object(client._client.messages, "create", side_effect=error):
            with pytest.raises(CommentaryAuthError):
                client.generate("prompt")

    def test_status_error(self, client: CommentaryClient, request_: httpx.Request) -> None:
        response = httpx.Response(529, request=request_)
        error = anthropic.InternalServerError("overloaded", response=response, body=None)
        with patch.object(client._client.messages, "create", side_effect=error):
            with pytest.raises(CommentaryAPIError) as exc_info:
                client.generate("prompt")
        assert exc_info.value.status_code == 529


class TestBuildPrompt:
    def test_embeds_rows_as_json(self) -> None:
        prompt = build_prompt(ROWS)
        payload = prompt[prompt.index("[") :].strip()
        assert json.loads(payload) == [ROWS[0].to_dict()]
        assert "仕事" in prompt


class TestCommentaryService:
    """Tests for CommentaryService fallbacks and retries."""

    def test_not_configured(self) -> None:
        assert CommentaryService(None).get_commentary(ROWS) == NOT_CONFIGURED_TEXT

    def test_no_rows(self) -> None:
        client = MagicMock()
        assert CommentaryService(client).get_commentary([]) == NO_DATA_TEXT
        client.generate.assert_not_called()

    def test_success(self) -> None:
        client = MagicMock()
        client.generate.return_value = reply("  寸評です。  ")
        assert CommentaryService(client).get_commentary(ROWS) == "寸評です。"

    def test_retries_then_succeeds(self) -> None:
        client = MagicMock()
        client.generate.side_effect = [CommentaryTimeoutError("slow"), reply("二回目")]
        service = CommentaryService(client, max_retries=2, retry_delay=0)

        assert service.get_commentary(ROWS) == "二回目"
        assert client.generate.call_count == 2

    def test_gives_up_after_retries(self) -> None:
        client = MagicMock()
        client.generate.side_effect = CommentaryAPIError("boom", status_code=500)
        service = CommentaryService(client, max_retries=2, retry_delay=0)

        assert service.get_commentary(ROWS) == FAILED_TEXT
        assert client.generate.call_count == 3

    def test_auth_error_not_retried(self) -> None:
        client = MagicMock()
        client.generate.side_effect = CommentaryAuthError("bad key")
        service = CommentaryService(client, max_retries=2, retry_delay=0)

        assert service.get_commentary(ROWS) == FAILED_TEXT
        assert client.generate.call_count == 1

    def test_empty_reply_is_failure(self) -> None:
        client = MagicMock()
        client.generate.return_value = reply("   ")
        service = CommentaryService(client, max_retries=1, retry_delay=0)

        assert service.get_commentary(ROWS) == FAILED_TEXT
        assert client.generate.call_count == 2

    def test_unexpected_error_never_raises(self) -> None:
        client = MagicMock()
        client.generate.side_effect = RuntimeError("surprise")
        service = CommentaryService(client, max_retries=0)

        assert service.get_commentary(ROWS) == FAILED_TEXT

    def test_from_config_without_key(self) -> None:
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": ""}):
            service = CommentaryService.from_config(CommentaryConfig())
        assert service.is_available is False

    def test_from_config_with_key(self) -> None:
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-test"}):
            service = CommentaryService.from_config(CommentaryConfig())
        assert service.is_available is True
