"""Utility functions for Postshelf.

Key functions:
    slugify: Convert a post name to a URL slug.
    titleize: Convert a post name to a human-readable title.
    split_words: Split an entry on ASCII whitespace.
    today: Current date in the ``YYYY-MM-DD`` form used for ``created_at``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"

# ASCII only; U+00A0 and other Unicode spaces are ordinary characters.
ASCII_WHITESPACE = " \t\r\n\f\v"
ASCII_WHITESPACE_RE = re.compile(r"[ \t\r\n\f\v]+")


def slugify(name: str) -> str:
    """Convert a post name to a slug.

    Args:
        name: Free-form post name, e.g. ``"Hello, World"``.

    Returns:
        URL-friendly slug, or an empty string if nothing usable remains.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    return cleaned.strip("-").lower()


def titleize(name: str) -> str:
    """Convert a slug or post name to a human-readable title.

    Examples:
        >>> titleize("getting-started")
        'Getting Started'

        >>> titleize("hello_world")
        'Hello World'
    """
    words = re.split(r"[\s\-_]+", name)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def split_words(text: str) -> list[str]:
    """Split on runs of ASCII whitespace, dropping empty leading/trailing parts."""
    stripped = text.strip(ASCII_WHITESPACE)
    if not stripped:
        return []
    return ASCII_WHITESPACE_RE.split(stripped)


def today(clock: Callable[[], datetime] = datetime.now) -> str:
    """Return the current date formatted as ``YYYY-MM-DD``.

    Args:
        clock: Callable returning the current datetime.
    """
    return clock().strftime(DATE_FORMAT)
