"""Scrape orchestration service.

Walks the active worklist one URL at a time: fetch (with retries), extract,
record the observation and update the URL's health counters. A failing URL
never stops the run; a URL that fails ``FAILURE_THRESHOLD`` times in a row is
deactivated until an operator reactivates it.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import structlog

from pharmatrack.config import Settings, settings as default_settings
from pharmatrack.core.exceptions import FetchError, NoPriceFoundError, ProxyConfigurationError
from pharmatrack.scrapers.base import ExtractionResult, RunSummary, ScrapeTarget
from pharmatrack.scrapers.fetcher import FetchClient
from pharmatrack.scrapers.resolver import ExtractorRegistry, get_extractor_registry
from pharmatrack.scrapers.utils.rate_limiter import RandomDelay
from pharmatrack.scrapers.utils.retry import with_retry
from pharmatrack.services.price_store import PriceStore, SQLAlchemyPriceStore

logger = structlog.get_logger(__name__)

# failure_kind values
FAILURE_FETCH = "fetch"
FAILURE_PROXY_CONFIG = "proxy_config"
FAILURE_EXTRACTION = "extraction"
FAILURE_NO_PRICE = "no_price"


@dataclass
class ScrapeOutcome:
    """Result of fetching and extracting one URL."""

    url: str
    extractor: str
    success: bool
    result: ExtractionResult = field(default_factory=lambda: ExtractionResult(in_stock=False))
    error: Optional[str] = None
    failure_kind: Optional[str] = None


class ScrapeOrchestrator:
    """Runs scrape passes over the active targets of a :class:`PriceStore`.

    Targets are visited strictly sequentially with a random pause after each
    one, so there is never more than one request in flight.
    """

    def __init__(
        self,
        store: PriceStore,
        fetch_client: FetchClient,
        settings: Optional[Settings] = None,
        registry: Optional[ExtractorRegistry] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the orchestrator.

        Args:
            store: Persistence for targets, observations and run logs
            fetch_client: Client used to download pages
            settings: Retry, delay and threshold policy (global settings if omitted)
            registry: Domain -> extractor registry (global registry if omitted)
            sleep: Awaitable sleep used for backoff and politeness delays
        """
        self.store = store
        self.fetch_client = fetch_client
        self.settings = settings or default_settings
        self.registry = registry or get_extractor_registry()
        self._sleep = sleep
        self.delay = RandomDelay(
            min_seconds=self.settings.REQUEST_DELAY_MIN_SECONDS,
            max_seconds=self.settings.REQUEST_DELAY_MAX_SECONDS,
            sleep=sleep,
        )
        self.logger = logger.bind(service="scrape_orchestrator")

    async def run(self) -> RunSummary:
        """Scrape every active target once.

        Returns:
            RunSummary with totals and the (url, error) list
        """
        started_at = datetime.now(timezone.utc)
        run_id = await self.store.start_run(started_at)
        summary = RunSummary(started_at=started_at)

        targets = await self.store.list_active_targets()
        self.logger.info("scrape_run_started", run_id=str(run_id), targets=len(targets))

        for target in targets:
            await self.process_target(target, summary)
            await self.delay.wait()

        summary.finish(datetime.now(timezone.utc))
        await self.store.finish_run(run_id, summary)

        self.logger.info(
            "scrape_run_completed",
            run_id=str(run_id),
            total=summary.total,
            successful=summary.successful,
            failed=summary.failed,
            deactivated=len(summary.deactivated),
            duration_seconds=summary.duration_seconds,
        )
        return summary

    async def process_target(self, target: ScrapeTarget, summary: RunSummary) -> ScrapeOutcome:
        """Scrape one target, persist the observation and update its health.

        Args:
            target: Target to scrape
            summary: Run summary to accumulate into

        Returns:
            ScrapeOutcome for the target
        """
        outcome = await self.scrape_url(target.url)
        scraped_at = datetime.now(timezone.utc)
        result = outcome.result

        if outcome.success:
            await self.store.record_observation(
                target.id,
                price=result.price,
                original_price=result.original_price,
                discount_percentage=result.discount_percentage,
                in_stock=result.in_stock,
                scraped_at=scraped_at,
            )
            await self.store.update_target_health(
                target.id,
                failure_count=0,
                active=True,
                last_error=None,
                last_success_at=scraped_at,
            )
            summary.record_success()
            self.logger.info(
                "target_scraped",
                url=target.url,
                extractor=outcome.extractor,
                price=str(result.price),
                original_price=str(result.original_price) if result.original_price else None,
                in_stock=result.in_stock,
            )
            return outcome

        failure_count = target.failure_count + 1
        deactivate = failure_count >= self.settings.FAILURE_THRESHOLD

        await self.store.record_observation(
            target.id,
            price=None,
            original_price=None,
            discount_percentage=None,
            in_stock=False,
            scraped_at=scraped_at,
            error=outcome.error,
        )
        await self.store.update_target_health(
            target.id,
            failure_count=failure_count,
            active=not deactivate,
            last_error=outcome.error,
            last_success_at=target.last_success_at,
        )
        summary.record_failure(target.url, outcome.error or "Unknown error", deactivated=deactivate)

        self.logger.warning(
            "target_scrape_failed",
            url=target.url,
            extractor=outcome.extractor,
            failure_kind=outcome.failure_kind,
            error=outcome.error,
            failure_count=failure_count,
        )
        if deactivate:
            self.logger.warning(
                "target_deactivated",
                url=target.url,
                failure_count=failure_count,
                threshold=self.settings.FAILURE_THRESHOLD,
            )
        return outcome

    async def scrape_url(self, url: str) -> ScrapeOutcome:
        """Fetch and extract ``url`` without touching persistence.

        Args:
            url: Product page URL

        Returns:
            ScrapeOutcome; ``success`` is True only when a positive price was found
        """
        extractor = self.registry.resolve(url)

        try:
            markup = await with_retry(
                lambda: self.fetch_client.fetch(url),
                max_attempts=self.settings.RETRY_ATTEMPTS,
                base_delay=self.settings.RETRY_BASE_DELAY_SECONDS,
                sleep=self._sleep,
            )
        except ProxyConfigurationError as e:
            return self._failure(url, extractor.name, FAILURE_PROXY_CONFIG, e.message)
        except FetchError as e:
            return self._failure(url, extractor.name, FAILURE_FETCH, e.message)
        except Exception as e:
            self.logger.error("unexpected_fetch_error", url=url, error=str(e), exc_info=True)
            return self._failure(url, extractor.name, FAILURE_FETCH, f"{type(e).__name__}: {e}")

        result = extractor.parse(markup, url)

        if result.error:
            return self._failure(url, extractor.name, FAILURE_EXTRACTION, result.error, result)

        if not result.has_price:
            error = NoPriceFoundError(url, extractor.name)
            return self._failure(url, extractor.name, FAILURE_NO_PRICE, error.message, result)

        return ScrapeOutcome(url=url, extractor=extractor.name, success=True, result=result)

    @staticmethod
    def _failure(
        url: str,
        extractor: str,
        kind: str,
        error: str,
        result: Optional[ExtractionResult] = None,
    ) -> ScrapeOutcome:
        return ScrapeOutcome(
            url=url,
            extractor=extractor,
            success=False,
            result=result or ExtractionResult(in_stock=False),
            error=error,
            failure_kind=kind,
        )


async def run_scrape_once(
    session_factory=None,
    settings: Optional[Settings] = None,
) -> RunSummary:
    """Run one full pass against the configured database.

    This is what the scheduler and the ``run`` CLI command call.

    Args:
        session_factory: Async session factory (application default if omitted)
        settings: Settings to use (global settings if omitted)

    Returns:
        RunSummary of the pass
    """
    if session_factory is None:
        from pharmatrack.db.session import async_session_factory as session_factory

    settings = settings or default_settings
    store = SQLAlchemyPriceStore(session_factory)
    async with FetchClient(settings) as fetch_client:
        orchestrator = ScrapeOrchestrator(store, fetch_client, settings=settings)
        return await orchestrator.run()
