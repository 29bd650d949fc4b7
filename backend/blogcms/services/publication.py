"""
Publication rules: slug derivation, post status, visibility and display helpers.

Everything here is pure; persistence lives in ``ContentRepository``.
"""

import html
import re
from enum import Enum
from typing import Mapping, Optional

from blogcms.core.errors import ValidationError
from blogcms.core.utils import is_object_id

UNCATEGORIZED = "uncategorized"
EXCERPT_LENGTH = 150

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_HTML_TAG = re.compile(r"<[^>]*>")


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


def slugify(text: str) -> str:
    """
    Derive a URL-safe slug from a title or name.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into
    a single hyphen and strips leading/trailing hyphens.
    "Hello World!" -> "hello-world"
    """
    return _NON_SLUG_CHARS.sub("-", (text or "").lower()).strip("-")


def resolve_slug(explicit: Optional[str], source: str) -> str:
    """Normalise an explicit slug, or derive one from ``source``."""
    slug = slugify(explicit if explicit else source)
    if not slug:
        raise ValidationError("Cannot derive a slug: use letters or digits")
    if is_object_id(slug):
        # Would be looked up as an identifier, never as a slug
        raise ValidationError(f"Slug '{slug}' looks like an identifier: add a word to it")
    return slug


def parse_status(value) -> PostStatus:
    if isinstance(value, PostStatus):
        return value
    try:
        return PostStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in PostStatus)
        raise ValidationError(f"Invalid status '{value}': expected one of {allowed}")


def is_visible(status: str, include_drafts: bool) -> bool:
    return include_drafts or status == PostStatus.PUBLISHED.value


def generate_excerpt(content: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Plain-text preview of HTML content, cut at ``max_length`` with an ellipsis."""
    text = html.unescape(_HTML_TAG.sub("", content or "")).strip()
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def resolve_category_name(
    category_id: Optional[str], categories: Mapping[str, str]
) -> str:
    """Name of the referenced category; dangling or empty references read as uncategorized."""
    if not category_id:
        return UNCATEGORIZED
    return categories.get(category_id, UNCATEGORIZED)
