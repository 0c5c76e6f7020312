"""Feed text cleanup."""

import re

# CDATA wrappers and the pipe character, literal or entity-encoded. Pipes in
# channel titles used to leak into derived table names.
ESCAPE_ARTIFACTS = re.compile(r"<!\[CDATA\[|\]\]>|&#124;|\|")


def strip_escape_artifacts(text: str) -> str:
    """Remove CDATA wrappers and pipe characters."""
    return ESCAPE_ARTIFACTS.sub("", text)


def clean_title(title: str, default: str = "Untitled") -> str:
    """Clean a feed or item title, falling back to ``default`` when empty."""
    if not title:
        return default
    cleaned = " ".join(strip_escape_artifacts(title).split())
    return cleaned or default
