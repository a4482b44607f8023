"""AI commentary for weekly reports, via the Claude API."""

from .client import CommentaryClient, CommentaryClientConfig, CommentaryResponse
from .service import CommentaryService, build_prompt

__all__ = [
    "CommentaryClient",
    "CommentaryClientConfig",
    "CommentaryResponse",
    "CommentaryService",
    "build_prompt",
]
