"""SQLAlchemy models for PharmaTrack.

All models are imported here so ``Base.metadata`` knows every table.
"""

from pharmatrack.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from pharmatrack.models.product import Product
from pharmatrack.models.retailer import Retailer
from pharmatrack.models.product_url import ProductUrl
from pharmatrack.models.price_history import PriceHistory
from pharmatrack.models.scrape_log import ScrapeLog

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Product",
    "Retailer",
    "ProductUrl",
    "PriceHistory",
    "ScrapeLog",
]
