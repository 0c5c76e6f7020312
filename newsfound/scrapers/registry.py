"""Dispatch article URLs to the strategy registered for their domain."""

import logging
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

import httpx

from .base import ExtractionStrategy
from .cbc import CBCStrategy
from .true_north import TrueNorthStrategy

logger = logging.getLogger(__name__)


def _host_matches(host: str, suffix: str) -> bool:
    return host == suffix or host.endswith("." + suffix)


class ScraperRegistry:
    """Ordered ``(domain_suffix, strategy)`` pairs, first match wins."""

    def __init__(self, entries: Iterable[Tuple[str, ExtractionStrategy]] = ()) -> None:
        """Initialize registry, registering ``entries`` in order."""
        self._entries: List[Tuple[str, ExtractionStrategy]] = []
        for suffix, strategy in entries:
            self.register(suffix, strategy)

    def register(self, domain_suffix: str, strategy: ExtractionStrategy) -> None:
        """Register a strategy for a domain and its subdomains.

        Raises:
            ValueError: if the suffix overlaps one already registered, which
                would make precedence depend on registration order.
        """
        suffix = domain_suffix.strip().lower().lstrip(".")
        if not suffix:
            raise ValueError("Domain suffix must not be empty")

        for existing, _ in self._entries:
            if _host_matches(suffix, existing) or _host_matches(existing, suffix):
                raise ValueError(f"Domain {suffix!r} overlaps registered domain {existing!r}")

        self._entries.append((suffix, strategy))

    @property
    def domains(self) -> List[str]:
        return [suffix for suffix, _ in self._entries]

    def resolve_strategy(self, url: str) -> Optional[ExtractionStrategy]:
        """Strategy for ``url``, or None when no registered domain matches."""
        try:
            host = (urlsplit(url).hostname or "").lower()
        except ValueError:
            logger.error("Invalid or malformed URL: %s", url)
            return None

        if not host:
            logger.error("Invalid or malformed URL: %s", url)
            return None

        for suffix, strategy in self._entries:
            if _host_matches(host, suffix):
                logger.debug("Found scraper %s for %s", strategy.name, host)
                return strategy

        logger.info("No scraper found for hostname: %s", host)
        return None


def default_registry(
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ScraperRegistry:
    """Registry with the built-in site strategies."""
    return ScraperRegistry(
        [
            ("tnc.news", TrueNorthStrategy(timeout=timeout, transport=transport)),
            ("cbc.ca", CBCStrategy(timeout=timeout, transport=transport)),
        ]
    )
