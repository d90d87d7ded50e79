"""Catalog product tracked across pharmacies."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pharmatrack.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pharmatrack.models.product_url import ProductUrl


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Product in the fixed monitoring catalog.

    Created by the catalog import; the scraper only reads it through its URLs.
    """

    __tablename__ = "products"

    ean: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True, comment="EAN-13 barcode")
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    urls: Mapped[list["ProductUrl"]] = relationship(back_populates="product", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name[:50]}', ean={self.ean})>"
