"""HTML report email sender via SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.header import Header
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

from lifelog.errors import DeliveryError

if TYPE_CHECKING:
    from .config import EmailConfig

logger = logging.getLogger(__name__)

CHART_CONTENT_ID = "chart"
CHART_FILENAME = "daily_chart.png"
SMTP_TIMEOUT = 30


def _chart_parts(chart_png: bytes) -> tuple[MIMEImage, MIMEImage]:
    inline = MIMEImage(chart_png, "png")
    inline.add_header("Content-ID", f"<{CHART_CONTENT_ID}>")
    inline.add_header("Content-Disposition", "inline", filename=CHART_FILENAME)

    attachment = MIMEImage(chart_png, "png")
    attachment.add_header("Content-Disposition", "attachment", filename=CHART_FILENAME)
    return inline, attachment


def build_message(
    config: EmailConfig,
    subject: str,
    html_body: str,
    text_body: str = "",
    chart_png: bytes | None = None,
) -> MIMEMultipart:
    """Build a report message.

    Structure is ``mixed[related[alternative[text, html], chart], chart]``:
    the chart, when present, is shown inline through ``cid:chart`` and also
    attached as a file.
    """
    body = MIMEMultipart("alternative")
    body.attach(MIMEText(text_body, "plain", "utf-8"))
    body.attach(MIMEText(html_body, "html", "utf-8"))

    related = MIMEMultipart("related")
    related.attach(body)

    msg = MIMEMultipart("mixed")
    msg.attach(related)

    if chart_png:
        inline, attachment = _chart_parts(chart_png)
        related.attach(inline)
        msg.attach(attachment)

    msg["Subject"] = Header(subject, "utf-8")
    msg["From"] = config.sender
    msg["To"] = ", ".join(config.recipients)
    return msg


class SMTPEmailSender:
    """Delivers report emails over SMTP (STARTTLS or implicit TLS)."""

    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self._config.use_ssl:
            return smtplib.SMTP_SSL(
                self._config.smtp_host,
                self._config.smtp_port,
                timeout=SMTP_TIMEOUT,
                context=context,
            )
        server = smtplib.SMTP(self._config.smtp_host, self._config.smtp_port, timeout=SMTP_TIMEOUT)
        try:
            server.starttls(context=context)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def send_report(
        self,
        subject: str,
        html_body: str,
        text_body: str = "",
        chart_png: bytes | None = None,
    ) -> None:
        """Send a report email.

        Args:
            subject: Subject line, may contain non-ASCII text.
            html_body: HTML body; reference the chart as ``cid:chart``.
            text_body: Plain-text alternative.
            chart_png: Chart image, embedded and attached when given.

        Raises:
            DeliveryError: If the configuration is incomplete or sending fails.
        """
        missing = self._config.missing_fields()
        if missing:
            raise DeliveryError("email", f"Email is not configured ({', '.join(missing)}).")

        msg = build_message(self._config, subject, html_body, text_body, chart_png)
        logger.info(f"Sending '{subject}' to {len(self._config.recipients)} recipient(s)")

        try:
            with self._connect() as server:
                server.login(self._config.smtp_user, self._config.smtp_pass)
                server.send_message(msg)

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            raise DeliveryError("email", "Could not authenticate with email server.") from e

        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP refused recipients: {list(e.recipients)}")
            raise DeliveryError("email", "All recipients were refused.") from e

        except (smtplib.SMTPConnectError, OSError) as e:
            logger.error(f"SMTP connection to {self._config.smtp_host} failed: {e}")
            raise DeliveryError("email", "Could not connect to email server.") from e

        except smtplib.SMTPException as e:
            logger.error(f"SMTP send failed: {e}")
            raise DeliveryError("email", "Failed to send email.") from e

        logger.info("Report email sent")


__all__ = ["SMTPEmailSender", "build_message"]
