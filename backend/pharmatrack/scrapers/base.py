"""Extraction strategy and the data structures shared by the scraping engine.

Every retailer is described by one :class:`RetailerExtractor` value: its
domains plus ranked selector and phrase tables. All of them run the same
parse algorithm:

1. stock signals (out-of-stock selectors, then page-text phrases)
2. JSON-LD structured data price and availability
3. ``product:price:amount`` meta tag
4. ranked price selectors
5. ranked original-price selectors (must exceed the current price)
6. discount percentage
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Comment, Tag

from pharmatrack.core.exceptions import ExtractionError
from pharmatrack.scrapers.utils.normalizer import PriceNormalizer


logger = structlog.get_logger(__name__)

PRICE_META_SELECTOR = 'meta[property="product:price:amount"]'
STRUCTURED_DATA_SELECTOR = 'script[type="application/ld+json"]'

# schema.org availability values that mean the offer cannot be bought
_UNAVAILABLE_MARKERS = ("outofstock", "soldout", "discontinued")

# Tags whose strings are not visible page text
_NON_TEXT_TAGS = {"script", "style", "noscript", "template"}


@dataclass
class ExtractionResult:
    """Structured output of one extractor run. Never persisted as such."""

    price: Optional[Decimal] = None
    original_price: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    in_stock: bool = True
    error: Optional[str] = None

    @property
    def has_price(self) -> bool:
        """True when a strictly positive current price was found."""
        return self.price is not None and self.price > 0

    @classmethod
    def failed(cls, error: str) -> "ExtractionResult":
        """Result for a page that could not be parsed at all."""
        return cls(
            price=None,
            original_price=None,
            discount_percentage=None,
            in_stock=False,
            error=error,
        )


@dataclass
class ScrapeTarget:
    """One (product, retailer URL) pairing under monitoring."""

    id: Any  # Opaque store identifier
    url: str
    failure_count: int = 0
    active: bool = True
    last_success_at: Optional[datetime] = None
    last_error: Optional[str] = None

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.url:
            raise ValueError("url is required")
        if self.failure_count < 0:
            raise ValueError("failure_count must be non-negative")


@dataclass
class RunSummary:
    """Outcome of one orchestration pass over all active targets."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)  # (url, error), in visit order
    deactivated: List[str] = field(default_factory=list)  # URLs that hit the failure threshold

    def record_success(self) -> None:
        self.total += 1
        self.successful += 1

    def record_failure(self, url: str, error: str, deactivated: bool = False) -> None:
        self.total += 1
        self.failed += 1
        self.errors.append((url, error))
        if deactivated:
            self.deactivated.append(url)

    def finish(self, finished_at: datetime) -> "RunSummary":
        self.finished_at = finished_at
        return self

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        """JSON-friendly representation (used for logs and the scrape_logs row)."""
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [{"url": url, "error": error} for url, error in self.errors],
            "deactivated": list(self.deactivated),
        }


StockCheck = Callable[[BeautifulSoup], bool]


@dataclass(frozen=True)
class RetailerExtractor:
    """Price/stock extraction strategy for one retailer's page layout.

    Attributes:
        name: Human readable retailer name
        domains: Bare domains served by this layout (empty for the fallback)
        out_of_stock_selectors: Selectors whose presence means out of stock
        out_of_stock_phrases: Lower-case phrases that mean out of stock
        price_selectors: Ranked selectors for the current price
        original_price_selectors: Ranked selectors for the pre-discount price
        stock_check: Optional extra hook returning True when the page shows
            an out-of-stock signal the tables cannot express
    """

    name: str
    domains: Tuple[str, ...]
    out_of_stock_selectors: Tuple[str, ...]
    out_of_stock_phrases: Tuple[str, ...]
    price_selectors: Tuple[str, ...]
    original_price_selectors: Tuple[str, ...]
    stock_check: Optional[StockCheck] = None

    def parse(self, markup: str, url: str) -> ExtractionResult:
        """Extract price and stock signals from ``markup``.

        Never raises: any failure becomes an ExtractionResult with null
        prices, ``in_stock=False`` and an error message.

        Args:
            markup: Raw HTML of the product page
            url: Page URL (for logging)

        Returns:
            ExtractionResult
        """
        try:
            return self._parse(markup)
        except Exception as e:
            logger.warning(
                "extraction_failed",
                extractor=self.name,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ExtractionResult.failed(f"Parse error: {e}")

    def _parse(self, markup: str) -> ExtractionResult:
        if not markup or not markup.strip():
            raise ExtractionError("empty page body")

        soup = BeautifulSoup(markup, "html.parser")

        in_stock = not self._has_out_of_stock_signal(soup)

        price, offer_in_stock = self._structured_data_price(soup)
        if offer_in_stock is False:
            in_stock = False

        if price is None:
            price = self._meta_price(soup)
        if price is None:
            price = self._selector_price(soup)

        original_price = self._original_price(soup, price)

        return ExtractionResult(
            price=price,
            original_price=original_price,
            discount_percentage=PriceNormalizer.discount_percentage(price, original_price),
            in_stock=in_stock,
        )

    # -- stock --------------------------------------------------------------

    def _has_out_of_stock_signal(self, soup: BeautifulSoup) -> bool:
        for selector in self.out_of_stock_selectors:
            if soup.select_one(selector) is not None:
                return True

        page_text = _visible_text(soup)
        for phrase in self.out_of_stock_phrases:
            if phrase in page_text:
                return True

        if self.stock_check is not None and self.stock_check(soup):
            return True

        return False

    # -- price sources ------------------------------------------------------

    def _structured_data_price(self, soup: BeautifulSoup) -> Tuple[Optional[Decimal], Optional[bool]]:
        """First positive offer price found in JSON-LD blocks.

        Returns:
            (price, in_stock) where in_stock is False if that offer's
            availability says the product cannot be bought, else None
        """
        for script in soup.select(STRUCTURED_DATA_SELECTOR):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw)
            except ValueError:
                continue

            for offer in _iter_offers(data):
                price = PriceNormalizer.to_decimal(offer.get("price", offer.get("lowPrice")))
                if price is not None and price > 0:
                    return price, _offer_availability(offer)

        return None, None

    def _meta_price(self, soup: BeautifulSoup) -> Optional[Decimal]:
        meta = soup.select_one(PRICE_META_SELECTOR)
        if meta is None:
            return None
        price = PriceNormalizer.clean_price_string(meta.get("content"))
        if price is not None and price > 0:
            return price
        return None

    def _selector_price(self, soup: BeautifulSoup) -> Optional[Decimal]:
        for selector in self.price_selectors:
            for element in soup.select(selector):
                for text in _price_candidates(element):
                    price = PriceNormalizer.clean_price_string(text)
                    if price is not None and price > 0:
                        return price
        return None

    def _original_price(self, soup: BeautifulSoup, price: Optional[Decimal]) -> Optional[Decimal]:
        """Pre-discount price, only if it is above the current price."""
        if price is None:
            return None
        for selector in self.original_price_selectors:
            for element in soup.select(selector):
                for text in _price_candidates(element):
                    original = PriceNormalizer.clean_price_string(text)
                    if original is not None and original > 0 and original > price:
                        return original
        return None


def _visible_text(soup: BeautifulSoup) -> str:
    """Lower-cased, whitespace-collapsed text of the page body."""
    root = soup.body or soup
    parts = []
    for string in root.find_all(string=True):
        if isinstance(string, Comment):
            continue
        if string.parent is not None and string.parent.name in _NON_TEXT_TAGS:
            continue
        parts.append(string)
    return " ".join(" ".join(parts).split()).lower()


def _price_candidates(element: Tag) -> Iterator[str]:
    """Attribute values first (content, data-price*), then the element text."""
    content = element.get("content")
    if content:
        yield content
    for name in ("data-price-amount", "data-price"):
        value = element.get(name)
        if value:
            yield value
    for name, value in element.attrs.items():
        if name.startswith("data-price") and name not in ("data-price-amount", "data-price"):
            if isinstance(value, str) and value:
                yield value
    text = element.get_text(" ", strip=True)
    if text:
        yield text


def _iter_offers(data: Any) -> Iterator[dict]:
    """Offer dicts inside a JSON-LD document, in document order.

    Handles a bare entity, a list of entities, and ``@graph`` containers;
    ``offers`` may be a single offer or a list of offers.
    """
    if isinstance(data, list):
        for item in data:
            yield from _iter_offers(item)
        return
    if not isinstance(data, dict):
        return

    offers = data.get("offers")
    if isinstance(offers, dict):
        yield offers
    elif isinstance(offers, list):
        for offer in offers:
            if isinstance(offer, dict):
                yield offer

    graph = data.get("@graph")
    if isinstance(graph, list):
        for item in graph:
            yield from _iter_offers(item)


def _offer_availability(offer: dict) -> Optional[bool]:
    availability = offer.get("availability")
    if not isinstance(availability, str):
        return None
    normalized = availability.lower()
    if any(marker in normalized for marker in _UNAVAILABLE_MARKERS):
        return False
    return None
