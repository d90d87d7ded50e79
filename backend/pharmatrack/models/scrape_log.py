"""Scrape run tracking and monitoring."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Integer, Numeric, DateTime, func
from sqlalchemy import JSON as JSONB
from sqlalchemy.orm import Mapped, mapped_column

from pharmatrack.models.base import Base, UUIDPrimaryKeyMixin


class ScrapeLog(UUIDPrimaryKeyMixin, Base):
    """Audit row bracketing one orchestration run.

    Inserted when the run starts and completed with the totals when it ends.
    A row with no ``finished_at`` is a run still in progress, or one that crashed.
    """

    __tablename__ = "scrape_logs"

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    total_products: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    errors: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="[{url, error}] in visit order",
    )
    deactivated: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="URLs deactivated during this run",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ScrapeLog(id={self.id}, started_at={self.started_at}, successful={self.successful}, failed={self.failed})>"
