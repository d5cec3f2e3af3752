"""Input classification: literal markup versus a remote locator."""

from __future__ import annotations

import re

# Heuristic, not a validating URL parser: anything it does not match is
# treated as markup.
LOCATOR_PATTERN = re.compile(
    r"(ht|f)tp(s?)\:\/\/[0-9a-zA-Z]([-.\w]*[0-9a-zA-Z])*(:(0-9)*)*(\/?)([a-zA-Z0-9\-\.\?\,\'\/\\\+&amp;%\$#_]*)?"
)

PREVIEW_LENGTH = 50


def is_locator(value: str) -> bool:
    """True when the whole input is a single locator-like token.

    Markup that merely contains a link (``<a href="http://...">``) stays markup.
    """
    candidate = value.strip()
    if not candidate or "<" in candidate or any(ch.isspace() for ch in candidate):
        return False
    return bool(LOCATOR_PATTERN.match(candidate))


def preview(value: str, length: int = PREVIEW_LENGTH) -> str:
    """Shorten markup for log lines."""
    return value[:length] + "..."


__all__ = ["LOCATOR_PATTERN", "PREVIEW_LENGTH", "is_locator", "preview"]
