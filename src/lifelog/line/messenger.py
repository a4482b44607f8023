"""LINE Messaging API integration.

Sends text messages to every follower of the channel through the
broadcast endpoint.

API docs: https://developers.line.biz/en/reference/messaging-api/#send-broadcast-message
"""

import logging
import os

import httpx

from lifelog.config import LineConfig
from lifelog.errors import DeliveryError

logger = logging.getLogger(__name__)

# LINE rejects text messages longer than this
MAX_TEXT_LENGTH = 5000


class LineMessenger:
    """Broadcasts text messages via the LINE Messaging API."""

    def __init__(
        self,
        token: str | None = None,
        settings: LineConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the messenger.

        Args:
            token: Channel access token. If not provided, will look for
                LINE_CHANNEL_TOKEN environment variable.
            settings: Endpoint and timeout settings.
            client: HTTP client to use, mainly for tests.
        """
        self._token = token or os.environ.get("LINE_CHANNEL_TOKEN", "").strip() or None
        self._settings = settings or LineConfig()
        self._client = client

        if not self._token:
            logger.warning("LINE_CHANNEL_TOKEN not set - LINE notifications unavailable.")

    @property
    def is_available(self) -> bool:
        return bool(self._token)

    def broadcast(self, text: str) -> bool:
        """Broadcast a text message.

        Returns:
            True when sent, False when skipped because no token is configured.

        Raises:
            DeliveryError: If the request fails or LINE returns a non-200 status.
        """
        if not self._token:
            logger.warning("LINE message skipped: no channel token configured")
            return False

        if len(text) > MAX_TEXT_LENGTH:
            logger.warning(f"LINE message truncated from {len(text)} characters")
            text = text[: MAX_TEXT_LENGTH - 1] + "…"

        payload = {"messages": [{"type": "text", "text": text}]}
        headers = {"Authorization": f"Bearer {self._token}"}

        try:
            if self._client is not None:
                response = self._client.post(
                    self._settings.endpoint,
                    json=payload,
                    headers=headers,
                    timeout=self._settings.timeout_seconds,
                )
            else:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(self._settings.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"LINE request failed: {e}")
            raise DeliveryError("line", f"Request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"LINE API error (status {response.status_code}): {response.text}")
            raise DeliveryError(
                "line",
                f"API returned status {response.status_code}",
                status_code=response.status_code,
            )

        logger.info("LINE message sent")
        return True


__all__ = ["MAX_TEXT_LENGTH", "LineMessenger"]
