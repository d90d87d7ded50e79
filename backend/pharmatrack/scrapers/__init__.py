"""Scraping engine for pharmacy product pages.

This package provides:
- Retailer extraction strategies and the shared parse algorithm
- Domain -> extractor resolution with a generic fallback
- HTTP fetch client with proxy routing for protected domains
- Utility modules for price normalization, retries and politeness delays
"""

from .base import (
    ExtractionResult,
    RetailerExtractor,
    RunSummary,
    ScrapeTarget,
)
from .fetcher import FetchClient
from .resolver import (
    ExtractorRegistry,
    extractor_registry,
    get_extractor_registry,
    resolve_extractor,
)

__all__ = [
    # Data structures
    "ExtractionResult",
    "RetailerExtractor",
    "RunSummary",
    "ScrapeTarget",
    # Fetching
    "FetchClient",
    # Resolution
    "ExtractorRegistry",
    "extractor_registry",
    "get_extractor_registry",
    "resolve_extractor",
]
