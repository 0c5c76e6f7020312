"""Storage-table identifiers derived from channel titles."""

import hashlib
import re

from ..errors import StorageError
from ..ingestion.text import strip_escape_artifacts

TABLE_PREFIX = "articles_"

# Postgres silently truncates longer identifiers, which could merge tables.
MAX_IDENTIFIER_LENGTH = 63

VALID_IDENTIFIER = re.compile(r"^articles_[a-z0-9]+(?:_[a-z0-9]+)*$")
NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def _short_hash(value: str, length: int) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()[:length]


def _with_suffix(identifier: str, suffix: str) -> str:
    """Append ``_suffix``, truncating the stem so the result fits."""
    stem = identifier[: MAX_IDENTIFIER_LENGTH - len(suffix) - 1].rstrip("_")
    return f"{stem}_{suffix}"


def sanitize_title(title: str) -> str:
    """Lower-case slug of a channel title, runs of non-alphanumerics as ``_``."""
    slug = strip_escape_artifacts(title or "").lower()
    slug = NON_ALNUM_RUN.sub("_", slug)
    return slug.strip("_")


def display_name(channel_title: str, feed_url: str) -> str:
    """Stored channel name; titles that sanitize to nothing get a per-feed placeholder."""
    if not sanitize_title(channel_title):
        return f"Untitled source {_short_hash(feed_url, 10)}"
    return channel_title


def derive_table_identifier(channel_title: str, feed_url: str) -> str:
    """Derive the articles table name for a feed.

    Stable for a fixed title. Titles that sanitize to nothing get a
    placeholder keyed on the feed URL so that such sources never share a
    table.
    """
    slug = sanitize_title(channel_title)
    if not slug:
        return f"{TABLE_PREFIX}source_{_short_hash(feed_url, 10)}"

    identifier = TABLE_PREFIX + slug
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        identifier = _with_suffix(identifier, _short_hash(slug, 8))
    return identifier


def disambiguate(identifier: str, feed_url: str) -> str:
    """Variant of ``identifier`` owned by ``feed_url``."""
    return _with_suffix(identifier, _short_hash(feed_url, 8))


def validate_table_identifier(identifier: str) -> str:
    """Raise StorageError unless ``identifier`` is a well-formed table name."""
    if (
        not isinstance(identifier, str)
        or len(identifier) > MAX_IDENTIFIER_LENGTH
        or not VALID_IDENTIFIER.match(identifier)
    ):
        raise StorageError(f"Invalid table identifier: {identifier!r}")
    return identifier


def index_identifier(table_identifier: str) -> str:
    """Name of the date index on an articles table."""
    name = f"{table_identifier}_date_added_idx"
    if len(name) <= MAX_IDENTIFIER_LENGTH:
        return name
    return f"idx_{_short_hash(table_identifier, 16)}_date_added"
