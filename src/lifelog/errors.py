"""Error types for lifelog reports.

Computation errors (bad timestamps, unknown durations) never surface as
exceptions; they are absorbed by the core. The types here cover the
external collaborators.
"""


class LifelogError(Exception):
    """Base exception for lifelog errors."""

    pass


class ConfigError(LifelogError):
    """Raised when a configuration file is invalid."""

    pass


class MissingSourceError(LifelogError):
    """Raised when the activity log spreadsheet or worksheet cannot be read."""

    pass


class CommentaryError(LifelogError):
    """Base exception for commentary service errors."""

    pass


class CommentaryTimeoutError(CommentaryError):
    """Raised when the commentary request times out."""

    pass


class CommentaryAuthError(CommentaryError):
    """Raised when the commentary API rejects the credentials."""

    pass


class CommentaryAPIError(CommentaryError):
    """Raised when the commentary API returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class DeliveryError(LifelogError):
    """Raised when a report could not be delivered."""

    def __init__(self, channel: str, message: str, status_code: int | None = None) -> None:
        """Initialize delivery error.

        Args:
            channel: Delivery channel name ("line", "email").
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(f"{channel}: {message}")
        self.channel = channel
        self.status_code = status_code


__all__ = [
    "CommentaryAPIError",
    "CommentaryAuthError",
    "CommentaryError",
    "CommentaryTimeoutError",
    "ConfigError",
    "DeliveryError",
    "LifelogError",
    "MissingSourceError",
]
