"""Report email settings, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_PORT = 587
SSL_PORT = 465

REQUIRED_VARS = ("EMAIL_ADDRESS", "SMTP_HOST", "SMTP_USER", "SMTP_PASS")


def _split_addresses(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class EmailConfig:
    """Where the weekly report is sent and how to reach the SMTP server."""

    recipients: list[str]
    smtp_host: str
    smtp_user: str
    smtp_pass: str
    smtp_port: int = DEFAULT_PORT
    sender_address: str = ""
    use_ssl: bool = False

    @classmethod
    def from_env(cls) -> EmailConfig | None:
        """Build the settings from environment variables.

        EMAIL_ADDRESS may hold several comma-separated recipients.
        SMTP_PORT defaults to 587 (STARTTLS); port 465 switches to implicit
        TLS. EMAIL_FROM overrides the sender, which is SMTP_USER otherwise.

        Returns:
            EmailConfig, or None when a required variable is missing.
        """
        env = {name: os.environ.get(name, "").strip() for name in REQUIRED_VARS}
        missing = [name for name, value in env.items() if not value]
        if missing:
            logger.debug(f"Email disabled, missing: {', '.join(missing)}")
            return None

        port_str = os.environ.get("SMTP_PORT", "").strip()
        try:
            port = int(port_str) if port_str else DEFAULT_PORT
        except ValueError:
            logger.warning(f"Invalid SMTP_PORT '{port_str}', using {DEFAULT_PORT}")
            port = DEFAULT_PORT

        return cls(
            recipients=_split_addresses(env["EMAIL_ADDRESS"]),
            smtp_host=env["SMTP_HOST"],
            smtp_user=env["SMTP_USER"],
            smtp_pass=env["SMTP_PASS"],
            smtp_port=port,
            sender_address=os.environ.get("EMAIL_FROM", "").strip() or env["SMTP_USER"],
            use_ssl=port == SSL_PORT,
        )

    @property
    def sender(self) -> str:
        return self.sender_address or self.smtp_user

    def missing_fields(self) -> list[str]:
        """Names of settings that prevent sending."""
        missing = []
        if not self.recipients:
            missing.append("recipients")
        if not self.smtp_host:
            missing.append("smtp_host")
        if not (1 <= self.smtp_port <= 65535):
            missing.append("smtp_port")
        if not (self.smtp_user and self.smtp_pass):
            missing.append("credentials")
        return missing

    def is_valid(self) -> bool:
        return not self.missing_fields()
