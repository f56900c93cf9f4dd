"""Очистка HTML из rich-text редактора (bio, описания услуг)."""
from typing import Dict, Optional, Set

import nh3

ALLOWED_TAGS: Set[str] = {
    "p", "br", "b", "strong", "i", "em", "u", "a", "ul", "ol", "li", "span", "div",
}
ALLOWED_ATTRIBUTES: Dict[str, Set[str]] = {
    "a": {"href", "title"},
}


def sanitize_html(content: Optional[str]) -> Optional[str]:
    if not content:
        return content
    return nh3.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes={"http", "https", "mailto"},
    )


def clean_text(value: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    """strip, пустая строка -> None, опционально обрезка по длине."""
    if value is None:
        return None
    cleaned = value.strip()
    if max_length is not None:
        cleaned = cleaned[:max_length]
    return cleaned or None
