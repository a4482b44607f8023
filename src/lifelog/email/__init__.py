"""Email module for sending reports via SMTP."""

from .config import EmailConfig
from .sender import SMTPEmailSender, build_message

__all__ = [
    "EmailConfig",
    "SMTPEmailSender",
    "build_message",
]
