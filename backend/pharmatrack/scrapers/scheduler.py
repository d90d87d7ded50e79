"""APScheduler-based daily scrape scheduler.

Runs one full scrape pass on a cron schedule (``SCRAPE_CRON``, UTC). Only
one pass may be in flight at a time; a pass that is still running when the
next trigger fires makes APScheduler skip that firing.
"""

from typing import Awaitable, Callable, Optional

import structlog
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from pharmatrack.scrapers.base import RunSummary

logger = structlog.get_logger(__name__)

SCRAPE_JOB_ID = "scrape_all_targets"


class ScrapeScheduler:
    """Manages the periodic scrape job using APScheduler."""

    def __init__(
        self,
        run_pass: Callable[[], Awaitable[RunSummary]],
        cron: str,
        timezone: str = "UTC",
    ):
        """Initialize scrape scheduler.

        Args:
            run_pass: Coroutine function running one full scrape pass
            cron: Standard five-field crontab expression
            timezone: Timezone the cron expression is evaluated in
        """
        self.run_pass = run_pass
        self.cron = cron
        self.timezone = timezone
        self.scheduler = AsyncIOScheduler(timezone=timezone)
        self.logger = logger.bind(service="scrape_scheduler")
        self._job: Optional[Job] = None

    def start(self) -> Job:
        """Register the scrape job and start the scheduler.

        Returns:
            The APScheduler job

        Raises:
            ValueError: If the cron expression is invalid
        """
        if self._job is None:
            trigger = CronTrigger.from_crontab(self.cron, timezone=self.timezone)
            self._job = self.scheduler.add_job(
                func=self._run_pass_wrapper,
                trigger=trigger,
                id=SCRAPE_JOB_ID,
                name="Scrape all active targets",
                replace_existing=True,
                max_instances=1,  # Never overlap two passes
                coalesce=True,
            )

        if not self.scheduler.running:
            self.scheduler.start()
            self.logger.info(
                "scheduler_started",
                cron=self.cron,
                next_run=self._job.next_run_time.isoformat() if self._job.next_run_time else None,
            )
        else:
            self.logger.warning("scheduler_already_running")

        return self._job

    def stop(self) -> None:
        """Stop the scheduler, waiting for a running pass to finish."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            self.logger.info("scheduler_stopped")
        else:
            self.logger.warning("scheduler_not_running")

    async def _run_pass_wrapper(self) -> Optional[RunSummary]:
        """Run one pass, logging instead of raising so the schedule survives.

        Returns:
            RunSummary, or None if the pass crashed
        """
        self.logger.info("scheduled_scrape_starting")
        try:
            return await self.run_pass()
        except Exception as e:
            self.logger.error("scheduled_scrape_failed", error=str(e), exc_info=True)
            return None

    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self.scheduler.running
