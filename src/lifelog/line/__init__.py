"""LINE chat delivery."""

from .messenger import LineMessenger

__all__ = ["LineMessenger"]
