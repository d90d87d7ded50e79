"""PharmaTrack command line entry point.

Usage:
    python -m pharmatrack init-db
    python -m pharmatrack run
    python -m pharmatrack check https://www.farmaciatei.ro/some-product.html
    python -m pharmatrack reactivate https://www.drmax.ro/some-product
    python -m pharmatrack schedule
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from pharmatrack.config import settings
from pharmatrack.scrapers.base import RunSummary
from pharmatrack.scrapers.fetcher import FetchClient
from pharmatrack.scrapers.scheduler import ScrapeScheduler
from pharmatrack.scrapers.scraper_service import ScrapeOrchestrator, ScrapeOutcome, run_scrape_once
from pharmatrack.services.price_store import SQLAlchemyPriceStore

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Route structlog through stdlib logging with the usual line format."""
    level = logging.INFO if (verbose or settings.DEBUG) else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _print_summary(summary: RunSummary) -> None:
    print(f"\n{'=' * 70}")
    print("  Scrape run summary")
    print(f"{'=' * 70}")
    print(f"  Total:       {summary.total}")
    print(f"  Successful:  {summary.successful}")
    print(f"  Failed:      {summary.failed}")
    if summary.duration_seconds is not None:
        print(f"  Duration:    {summary.duration_seconds:.1f}s")

    if summary.errors:
        print("\n  Errors:")
        for url, error in summary.errors:
            print(f"    - {url}")
            print(f"      {error}")

    if summary.deactivated:
        print("\n  Deactivated:")
        for url in summary.deactivated:
            print(f"    - {url}")
    print(f"{'=' * 70}\n")


def _print_outcome(outcome: ScrapeOutcome) -> None:
    result = outcome.result
    print(f"\n  URL:        {outcome.url}")
    print(f"  Extractor:  {outcome.extractor}")
    if not outcome.success:
        print(f"  Failed ({outcome.failure_kind}): {outcome.error}\n")
        return
    print(f"  Price:      {result.price} RON")
    if result.original_price is not None:
        print(f"  Original:   {result.original_price} RON")
    if result.discount_percentage is not None:
        print(f"  Discount:   {result.discount_percentage}%")
    print(f"  In stock:   {'yes' if result.in_stock else 'no'}\n")


async def cmd_init_db() -> int:
    from pharmatrack.db.session import engine, init_db

    await init_db(engine)
    await engine.dispose()
    print("Database tables verified/created")
    return 0


async def cmd_run() -> int:
    from pharmatrack.db.session import engine

    try:
        summary = await run_scrape_once(settings=settings)
    finally:
        await engine.dispose()
    _print_summary(summary)
    return 0


async def cmd_check(url: str) -> int:
    from pharmatrack.db.session import async_session_factory

    store = SQLAlchemyPriceStore(async_session_factory)
    async with FetchClient(settings) as fetch_client:
        orchestrator = ScrapeOrchestrator(store, fetch_client, settings=settings)
        outcome = await orchestrator.scrape_url(url)
    _print_outcome(outcome)
    return 0 if outcome.success else 1


async def cmd_reactivate(url: str) -> int:
    from pharmatrack.db.session import async_session_factory, engine

    store = SQLAlchemyPriceStore(async_session_factory)
    try:
        target = await store.get_target_by_url(url)
        if target is None:
            print(f"No monitored URL matches {url}", file=sys.stderr)
            return 1
        await store.reactivate_target(target.id)
    finally:
        await engine.dispose()

    print(f"Reactivated {url} (was {'active' if target.active else 'inactive'}, "
          f"{target.failure_count} consecutive failures)")
    return 0


async def cmd_schedule() -> int:
    scheduler = ScrapeScheduler(
        run_pass=lambda: run_scrape_once(settings=settings),
        cron=settings.SCRAPE_CRON,
    )
    scheduler.start()
    try:
        # Park until cancelled (Ctrl+C)
        await asyncio.Event().wait()
    finally:
        scheduler.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pharmatrack",
        description="Track product prices and stock across pharmacy websites",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("run", help="Scrape every active URL once and print the summary")

    check = subparsers.add_parser("check", help="Fetch and extract one URL without saving")
    check.add_argument("url", help="Product page URL")

    reactivate = subparsers.add_parser("reactivate", help="Re-enable a deactivated URL")
    reactivate.add_argument("url", help="Monitored product page URL")

    subparsers.add_parser("schedule", help=f"Run on the SCRAPE_CRON schedule ({settings.SCRAPE_CRON} UTC)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "init-db":
        coro = cmd_init_db()
    elif args.command == "run":
        coro = cmd_run()
    elif args.command == "check":
        coro = cmd_check(args.url)
    elif args.command == "reactivate":
        coro = cmd_reactivate(args.url)
    else:
        coro = cmd_schedule()

    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
