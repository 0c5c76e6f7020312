"""Exception types raised by the ingestion and enrichment pipeline."""


class NewsFoundError(Exception):
    """Base class for pipeline errors."""


class FetchError(NewsFoundError):
    """Network or transport failure while retrieving a feed or page."""

    def __init__(self, url: str, message: str) -> None:
        """Initialize the exception."""
        self.url = url
        super().__init__(f"{url}: {message}")


class ParseError(NewsFoundError):
    """Malformed feed or HTML document."""


class StorageError(NewsFoundError):
    """Constraint violation, connection failure or aborted transaction."""


class ExtractionError(NewsFoundError):
    """No article content could be located."""
