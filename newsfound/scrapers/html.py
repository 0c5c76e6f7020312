"""Locate content containers in raw HTML by balanced tag scanning."""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContainerMarker:
    """A container element: tag name plus an optional attribute match.

    For ``class`` the value matches one class token; for any other attribute
    it matches the whole attribute value.
    """

    tag: str
    attribute: Optional[str] = None
    value: Optional[str] = None

    def opening_pattern(self) -> re.Pattern:
        tag = re.escape(self.tag)
        if self.attribute is None:
            return re.compile(rf"<{tag}(?=[\s>/])[^>]*>", re.IGNORECASE)

        attribute = re.escape(self.attribute)
        value = re.escape(self.value or "")
        if self.attribute.lower() == "class":
            value_pattern = rf"""(["'])(?:[^"']*\s)?{value}(?:\s[^"']*)?\1"""
        else:
            value_pattern = rf"""(["']){value}\1"""
        return re.compile(
            rf"<{tag}(?=[\s>/])[^>]*?\s{attribute}\s*=\s*{value_pattern}[^>]*>",
            re.IGNORECASE,
        )

    def __str__(self) -> str:
        if self.attribute is None:
            return f"<{self.tag}>"
        if self.attribute.lower() == "class":
            return f"{self.tag}.{self.value}"
        if self.attribute.lower() == "id":
            return f"{self.tag}#{self.value}"
        return f"{self.tag}[{self.attribute}={self.value}]"


def _tag_pattern(tag: str) -> re.Pattern:
    """Opening or closing tags of one element name."""
    return re.compile(rf"<(/?){re.escape(tag)}(?=[\s>/])[^>]*>", re.IGNORECASE)


def find_container(html: str, marker: ContainerMarker) -> Optional[Tuple[int, int]]:
    """Inner ``(start, end)`` span of the first element matching ``marker``.

    Nested elements with the same tag name are skipped by tracking depth.
    Returns None when the element is missing or never closed.
    """
    opening = marker.opening_pattern().search(html)
    if opening is None:
        return None

    start = opening.end()
    if opening.group(0).endswith("/>"):
        return start, start

    depth = 1
    for tag in _tag_pattern(marker.tag).finditer(html, start):
        if tag.group(1):
            depth -= 1
            if depth == 0:
                return start, tag.start()
        elif not tag.group(0).endswith("/>"):
            depth += 1

    logger.warning("No closing tag found for %s", marker)
    return None


def extract_region(html: str, marker: ContainerMarker) -> Optional[str]:
    """Inner HTML of the first element matching ``marker``."""
    span = find_container(html, marker)
    if span is None:
        return None
    return html[span[0]:span[1]]


def extract_first(html: str, markers: Iterable[ContainerMarker]) -> Optional[str]:
    """Inner HTML for the first marker, in order, that locates non-empty content."""
    for marker in markers:
        region = extract_region(html, marker)
        if region and region.strip():
            logger.debug("Matched content container %s", marker)
            return region
    return None
