"""Category extraction from event titles.

A category is the text between the first opening marker and the next
closing marker in a title, e.g. ``"【Work】standup"`` -> ``"Work"``.
"""

from typing import Any

OPEN_MARKER = "【"
CLOSE_MARKER = "】"


def extract_category(
    title: Any,
    open_marker: str = OPEN_MARKER,
    close_marker: str = CLOSE_MARKER,
) -> str | None:
    """Extract the category label from a title.

    Args:
        title: Event title. Non-string values are converted with ``str()``.
        open_marker: Marker that opens the category segment.
        close_marker: Marker that closes the category segment.

    Returns:
        The text of the first complete marker pair (possibly empty), or
        None when the title has no complete pair.
    """
    if title is None:
        return None
    text = title if isinstance(title, str) else str(title)

    start = text.find(open_marker)
    if start < 0:
        return None
    start += len(open_marker)

    end = text.find(close_marker, start)
    if end < 0:
        return None

    return text[start:end]


__all__ = ["CLOSE_MARKER", "OPEN_MARKER", "extract_category"]
