"""Retailer model representing pharmacy e-commerce sites."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pharmatrack.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pharmatrack.models.product_url import ProductUrl


class Retailer(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Online pharmacy (Farmacia Tei, Catena, Dr. Max, ...)."""

    __tablename__ = "retailers"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    base_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="Shop's base URL")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    urls: Mapped[list["ProductUrl"]] = relationship(back_populates="retailer", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Retailer(id={self.id}, name='{self.name}')>"
