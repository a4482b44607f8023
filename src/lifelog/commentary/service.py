"""Natural-language commentary for comparison tables.

Commentary is supplementary: every failure is turned into a short
placeholder text so the report can still be delivered.
"""

import json
import logging
import time
from collections.abc import Sequence
from typing import Protocol

from lifelog.config import CommentaryConfig
from lifelog.core.models import ComparisonRow
from lifelog.errors import CommentaryAuthError, CommentaryError

from .client import CommentaryClient, CommentaryClientConfig, CommentaryResponse

logger = logging.getLogger(__name__)

NOT_CONFIGURED_TEXT = "※AI寸評はAPIキー未設定のためスキップされました。"
FAILED_TEXT = "寸評の取得に失敗しました。"
NO_DATA_TEXT = "集計対象のデータがないため、寸評はありません。"

PROMPT_TEMPLATE = """あなたは生活習慣の分析をサポートするライフログ専門のAIです。
以下のカレンダー集計データを見て、傾向と今後の示唆を【300文字〜400文字程度】で、詳しく日本語で述べてください。

ポイント：
- 活動件数と、特に「時間（h）」の増減に着目してください。
- 各カテゴリーのバランス（仕事、休憩、自己研鑽など）から、現在のライフスタイルの質を分析してください。
- 改善点や、継続すべき良い傾向があれば優しくアドバイスしてください。
- 「〜の傾向が見られます」「〜が示唆されます」といった丁寧なトーンで記述してください。

集計データ:
{data}
"""


class TextGenerator(Protocol):
    """Protocol for the language model client."""

    def generate(self, prompt: str) -> CommentaryResponse:
        """Generate a reply for the prompt."""
        ...


def build_prompt(comparison: Sequence[ComparisonRow]) -> str:
    """Embed the comparison table as JSON in the commentary prompt."""
    data = json.dumps([row.to_dict() for row in comparison], ensure_ascii=False)
    return PROMPT_TEMPLATE.format(data=data)


class CommentaryService:
    """Obtains commentary with bounded retries and fallback text."""

    def __init__(
        self,
        client: TextGenerator | None,
        max_retries: int = 2,
        retry_delay: float = 0.5,
    ) -> None:
        """Initialize the service.

        Args:
            client: Language model client, None when no API key is configured.
            max_retries: Retries after the first failed attempt.
            retry_delay: Delay between attempts in seconds.
        """
        self._client = client
        self._max_retries = max(0, max_retries)
        self._retry_delay = retry_delay

    @classmethod
    def from_config(cls, settings: CommentaryConfig) -> "CommentaryService":
        """Create a service, without a client when ANTHROPIC_API_KEY is unset."""
        try:
            client_config = CommentaryClientConfig.from_env(settings)
        except ValueError as e:
            logger.warning(f"AI commentary disabled: {e}")
            return cls(None, settings.max_retries, settings.retry_delay)
        return cls(
            CommentaryClient(client_config),
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
        )

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def get_commentary(self, comparison: Sequence[ComparisonRow]) -> str:
        """Return commentary for the comparison table. Never raises."""
        if self._client is None:
            return NOT_CONFIGURED_TEXT
        if not comparison:
            return NO_DATA_TEXT

        prompt = build_prompt(comparison)

        for attempt in range(self._max_retries + 1):
            try:
                response = self._client.generate(prompt)
                text = response.text.strip()
                if text:
                    logger.info(
                        f"Commentary received ({response.tokens_used} tokens, "
                        f"{response.latency_ms}ms)"
                    )
                    return text
                logger.warning(f"Empty commentary (attempt {attempt + 1})")

            except CommentaryAuthError as e:
                logger.error(f"Commentary authentication failed: {e}")
                break

            except CommentaryError as e:
                logger.warning(f"Commentary error (attempt {attempt + 1}): {e}")

            except Exception as e:
                logger.warning(f"Unexpected commentary error (attempt {attempt + 1}): {e}")

            if attempt < self._max_retries:
                time.sleep(self._retry_delay)

        return FAILED_TEXT


__all__ = [
    "FAILED_TEXT",
    "NOT_CONFIGURED_TEXT",
    "NO_DATA_TEXT",
    "CommentaryService",
    "TextGenerator",
    "build_prompt",
]
