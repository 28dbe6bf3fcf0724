"""BeautifulSoup-based content validation and sanitization."""

import re

from bs4 import BeautifulSoup

from lyntfeed.exceptions import InvalidContent
from lyntfeed.models.item import MAX_CONTENT_LENGTH


# Elements whose body is never visible text
DROPPED_ELEMENTS = ["script", "style", "iframe", "object", "embed", "noscript", "template"]

LINK_PATTERN = re.compile(r"https?://", re.IGNORECASE)


def validate_content(raw: str | None, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """
    Check raw content before it is sanitized.

    Args:
        raw: Content as submitted, None treated as empty
        max_length: Maximum number of characters

    Returns:
        The raw content, "" for None

    Raises:
        InvalidContent: If content exceeds max_length
    """
    if raw is None:
        return ""
    if len(raw) > max_length:
        raise InvalidContent(f"content has {len(raw)} characters, limit is {max_length}")
    return raw


def sanitize(raw: str) -> str:
    """
    Reduce user text to plain text with no markup.

    Tags are stripped, dangerous elements are dropped with their bodies,
    and any remaining markup characters are escaped.

    Examples:
        "<b>hi</b>" -> "hi"
        "<script>alert(1)</script>hello" -> "hello"
        "1 < 2" -> "1 &lt; 2"
    """
    if not raw:
        return ""

    soup = BeautifulSoup(raw, "html.parser")
    for el in soup.find_all(DROPPED_ELEMENTS):
        el.decompose()

    text = soup.get_text()
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def has_link(text: str) -> bool:
    """Return True if the text contains an http(s) scheme token."""
    return bool(LINK_PATTERN.search(text or ""))
