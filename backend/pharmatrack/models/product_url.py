"""Monitored product page: one product at one retailer."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, ForeignKey, Boolean, Integer, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pharmatrack.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pharmatrack.models.product import Product
    from pharmatrack.models.retailer import Retailer
    from pharmatrack.models.price_history import PriceHistory


class ProductUrl(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Scrape target with its health counters.

    ``error_count`` counts consecutive failed attempts. When it reaches the
    failure threshold ``is_active`` is cleared and the URL is skipped until
    an operator reactivates it. Rows are never deleted by the scraper.
    """

    __tablename__ = "product_urls"

    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    retailer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("retailers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(2000), nullable=False, comment="Product page URL")

    # Health state
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    error_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive failed scrape attempts",
    )
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_success_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last attempt that produced a price",
    )
    last_scraped_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last attempt, successful or not",
    )

    __table_args__ = (
        UniqueConstraint("product_id", "retailer_id", name="uq_product_url_product_retailer"),
        Index("idx_product_urls_active", "is_active"),
    )

    product: Mapped["Product"] = relationship(back_populates="urls")
    retailer: Mapped["Retailer"] = relationship(back_populates="urls")
    price_history: Mapped[list["PriceHistory"]] = relationship(
        back_populates="product_url",
        cascade="all, delete-orphan",
        order_by="PriceHistory.scraped_at.desc()",
    )

    def __repr__(self) -> str:
        return f"<ProductUrl(id={self.id}, url='{self.url[:60]}', active={self.is_active}, errors={self.error_count})>"
