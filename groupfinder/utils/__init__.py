"""
Utilities Package

Small helpers shared by services and routers.
"""

import re

_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_text(value: str | None) -> str | None:
    """
    Strip surrounding whitespace and HTML tags from user-supplied text.

    Returns None for missing or blank input.

    Example:
        >>> sanitize_text("  <b>looks good</b> ")
        'looks good'
    """
    if value is None:
        return None
    cleaned = _TAG_RE.sub("", value).strip()
    return cleaned or None


def slugify(value: str) -> str:
    """Lowercase URL-safe slug: 'Street Photography' -> 'street-photography'."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")
