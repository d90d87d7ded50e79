"""Price observations recorded by the scraper."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text, ForeignKey, Boolean, Numeric, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pharmatrack.models.base import Base, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pharmatrack.models.product_url import ProductUrl


class PriceHistory(UUIDPrimaryKeyMixin, Base):
    """One scrape attempt for a product URL.

    Append-only: one row per attempt. Failed attempts keep null prices and
    carry the error text so gaps in the series can be explained.
    """

    __tablename__ = "price_history"

    product_url_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("product_urls.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Price data (RON)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    original_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Price before the promotion, when shown",
    )
    promo_percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    is_in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Set on failed attempts")

    scraped_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When this attempt ran",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_price_history_url_scraped", "product_url_id", "scraped_at"),
    )

    product_url: Mapped["ProductUrl"] = relationship(back_populates="price_history")

    def __repr__(self) -> str:
        return f"<PriceHistory(id={self.id}, product_url_id={self.product_url_id}, price={self.price}, scraped_at={self.scraped_at})>"
