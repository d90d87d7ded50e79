"""Persistence services used by the scraping engine."""

from pharmatrack.services.price_store import PriceStore, SQLAlchemyPriceStore

__all__ = [
    "PriceStore",
    "SQLAlchemyPriceStore",
]
