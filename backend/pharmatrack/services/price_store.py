"""Persistence interface used by the scraping engine.

The orchestrator only needs a handful of operations: read the active
worklist, append observations, update URL health and bracket a run.
:class:`PriceStore` names them; :class:`SQLAlchemyPriceStore` implements them
on top of the relational schema in :mod:`pharmatrack.models`.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmatrack.models.price_history import PriceHistory
from pharmatrack.models.product_url import ProductUrl
from pharmatrack.models.scrape_log import ScrapeLog
from pharmatrack.scrapers.base import RunSummary, ScrapeTarget


logger = structlog.get_logger(__name__)


class PriceStore(ABC):
    """Narrow persistence capability consumed by the scrape orchestrator.

    Only one run may write at a time; implementations are not expected to
    handle concurrent health updates for the same target.
    """

    @abstractmethod
    async def list_active_targets(self) -> List[ScrapeTarget]:
        """Return every target whose active flag is set."""

    @abstractmethod
    async def record_observation(
        self,
        target_id: Any,
        price: Optional[Decimal],
        original_price: Optional[Decimal],
        discount_percentage: Optional[Decimal],
        in_stock: bool,
        scraped_at: datetime,
        error: Optional[str] = None,
    ) -> None:
        """Append one observation to the target's price history."""

    @abstractmethod
    async def update_target_health(
        self,
        target_id: Any,
        failure_count: int,
        active: bool,
        last_error: Optional[str],
        last_success_at: Optional[datetime],
    ) -> None:
        """Overwrite the target's health fields (idempotent)."""

    @abstractmethod
    async def start_run(self, started_at: datetime) -> Any:
        """Open a run record and return its identifier."""

    @abstractmethod
    async def finish_run(self, run_id: Any, summary: RunSummary) -> None:
        """Close the run record with the final summary."""

    @abstractmethod
    async def get_target_by_url(self, url: str) -> Optional[ScrapeTarget]:
        """Look up a target (active or not) by its URL."""

    @abstractmethod
    async def reactivate_target(self, target_id: Any) -> bool:
        """Clear the failure counter and set the active flag again.

        Returns:
            True if the target exists
        """


def _to_target(row: ProductUrl) -> ScrapeTarget:
    return ScrapeTarget(
        id=row.id,
        url=row.url,
        failure_count=row.error_count or 0,
        active=row.is_active,
        last_success_at=row.last_success_at,
        last_error=row.last_error,
    )


class SQLAlchemyPriceStore(PriceStore):
    """PriceStore backed by the ``product_urls``, ``price_history`` and ``scrape_logs`` tables.

    Every operation runs in its own session and commits immediately, so a
    crash mid-run keeps everything recorded up to that point.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize price store.

        Args:
            session_factory: Async session factory for database access
        """
        self.session_factory = session_factory
        self.logger = logger.bind(service="price_store")

    async def list_active_targets(self) -> List[ScrapeTarget]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(ProductUrl)
                .where(ProductUrl.is_active == True)  # noqa: E712
                .order_by(ProductUrl.created_at, ProductUrl.url)
            )
            rows = list(result.scalars().all())

        targets = []
        for row in rows:
            try:
                targets.append(_to_target(row))
            except ValueError as e:
                self.logger.warning("invalid_target_skipped", target_id=str(row.id), error=str(e))

        self.logger.debug("active_targets_loaded", count=len(targets), skipped=len(rows) - len(targets))
        return targets

    async def record_observation(
        self,
        target_id: Any,
        price: Optional[Decimal],
        original_price: Optional[Decimal],
        discount_percentage: Optional[Decimal],
        in_stock: bool,
        scraped_at: datetime,
        error: Optional[str] = None,
    ) -> None:
        async with self.session_factory() as db:
            db.add(
                PriceHistory(
                    product_url_id=_as_uuid(target_id),
                    price=price,
                    original_price=original_price,
                    promo_percentage=discount_percentage,
                    is_in_stock=in_stock,
                    error=error,
                    scraped_at=scraped_at,
                )
            )
            await db.commit()

    async def update_target_health(
        self,
        target_id: Any,
        failure_count: int,
        active: bool,
        last_error: Optional[str],
        last_success_at: Optional[datetime],
    ) -> None:
        async with self.session_factory() as db:
            await db.execute(
                update(ProductUrl)
                .where(ProductUrl.id == _as_uuid(target_id))
                .values(
                    error_count=failure_count,
                    is_active=active,
                    last_error=last_error,
                    last_success_at=last_success_at,
                    last_scraped_at=datetime.now(timezone.utc),
                )
            )
            await db.commit()

    async def start_run(self, started_at: datetime) -> UUID:
        async with self.session_factory() as db:
            log = ScrapeLog(started_at=started_at, errors=[], deactivated=[])
            db.add(log)
            await db.commit()
            await db.refresh(log)
            return log.id

    async def finish_run(self, run_id: Any, summary: RunSummary) -> None:
        duration = summary.duration_seconds
        async with self.session_factory() as db:
            log = await db.get(ScrapeLog, _as_uuid(run_id))
            if log is None:
                self.logger.error("scrape_log_not_found", run_id=str(run_id))
                return

            data = summary.to_dict()
            log.finished_at = summary.finished_at
            log.duration_seconds = Decimal(str(round(duration, 2))) if duration is not None else None
            log.total_products = summary.total
            log.successful = summary.successful
            log.failed = summary.failed
            log.errors = data["errors"]
            log.deactivated = data["deactivated"]
            await db.commit()

    async def get_target_by_url(self, url: str) -> Optional[ScrapeTarget]:
        async with self.session_factory() as db:
            result = await db.execute(select(ProductUrl).where(ProductUrl.url == url).limit(1))
            row = result.scalar_one_or_none()
        return _to_target(row) if row else None

    async def reactivate_target(self, target_id: Any) -> bool:
        async with self.session_factory() as db:
            row = await db.get(ProductUrl, _as_uuid(target_id))
            if row is None:
                return False
            row.is_active = True
            row.error_count = 0
            row.last_error = None
            await db.commit()

        self.logger.info("target_reactivated", target_id=str(target_id))
        return True


def _as_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))
