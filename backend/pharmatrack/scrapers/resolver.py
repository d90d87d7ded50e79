"""Registry mapping retailer domains to extraction strategies."""

from typing import Dict, Iterable, Optional

from pharmatrack.scrapers.base import RetailerExtractor
from pharmatrack.scrapers.extractors import GENERIC, RETAILER_EXTRACTORS
from pharmatrack.scrapers.utils.proxy_manager import domain_matches, extract_domain


class ExtractorRegistry:
    """Static domain -> extractor lookup with a generic fallback.

    Pure lookup: no network access and no state beyond the registered table.
    """

    def __init__(
        self,
        extractors: Iterable[RetailerExtractor] = (),
        fallback: RetailerExtractor = GENERIC,
    ):
        """Initialize the registry.

        Args:
            extractors: Dedicated extractors to register by their domains
            fallback: Extractor used for unknown domains
        """
        self.fallback = fallback
        self._by_domain: Dict[str, RetailerExtractor] = {}
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: RetailerExtractor) -> None:
        """Register an extractor under each of its domains.

        Raises:
            ValueError: If the extractor declares no domains or a domain is taken
        """
        if not extractor.domains:
            raise ValueError(f"Extractor {extractor.name!r} declares no domains")
        for domain in extractor.domains:
            existing = self._by_domain.get(domain)
            if existing is not None and existing is not extractor:
                raise ValueError(f"Domain {domain} already registered to {existing.name!r}")
            self._by_domain[domain] = extractor

    def resolve(self, url: str) -> RetailerExtractor:
        """Pick the extractor for ``url``.

        The hostname (``www.`` stripped) is matched exactly first, then as a
        subdomain of a registered domain. Unknown or unparsable URLs get the
        fallback.
        """
        domain = extract_domain(url)
        if not domain:
            return self.fallback

        extractor = self._by_domain.get(domain)
        if extractor is not None:
            return extractor

        for registered, candidate in self._by_domain.items():
            if domain_matches(domain, registered):
                return candidate

        return self.fallback

    def find(self, domain: str) -> Optional[RetailerExtractor]:
        """Dedicated extractor registered for exactly ``domain``, if any."""
        return self._by_domain.get(domain)

    def get_registered_domains(self) -> list[str]:
        """Get list of registered domains.

        Returns:
            Domains in registration order
        """
        return list(self._by_domain.keys())


# Global registry instance
extractor_registry = ExtractorRegistry(RETAILER_EXTRACTORS)


def get_extractor_registry() -> ExtractorRegistry:
    """Get the global extractor registry instance."""
    return extractor_registry


def resolve_extractor(url: str) -> RetailerExtractor:
    """Map ``url`` to its retailer extractor, or the generic fallback."""
    return extractor_registry.resolve(url)
