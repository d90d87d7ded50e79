"""Tests for the cron scheduler wrapper and the command line parser."""

from datetime import datetime, timezone

import pytest
from apscheduler.triggers.cron import CronTrigger

from pharmatrack.__main__ import build_parser
from pharmatrack.scrapers.base import RunSummary
from pharmatrack.scrapers.scheduler import SCRAPE_JOB_ID, ScrapeScheduler


class TestScrapeScheduler:
    async def test_start_registers_single_cron_job(self):
        async def run_pass():
            return None

        scheduler = ScrapeScheduler(run_pass, cron="0 6 * * *")
        job = scheduler.start()
        try:
            assert scheduler.is_running()
            assert job.id == SCRAPE_JOB_ID
            assert job.max_instances == 1
            assert isinstance(job.trigger, CronTrigger)
            assert job.next_run_time is not None
            assert job.next_run_time.hour == 6
        finally:
            scheduler.stop()

        assert not scheduler.is_running()

    async def test_failed_pass_does_not_propagate(self):
        async def run_pass():
            raise RuntimeError("database unavailable")

        scheduler = ScrapeScheduler(run_pass, cron="0 6 * * *")

        assert await scheduler._run_pass_wrapper() is None

    async def test_wrapper_returns_summary(self):
        summary = RunSummary(started_at=datetime.now(timezone.utc))

        async def run_pass():
            return summary

        scheduler = ScrapeScheduler(run_pass, cron="0 6 * * *")

        assert await scheduler._run_pass_wrapper() is summary

    def test_invalid_cron_rejected(self):
        scheduler = ScrapeScheduler(lambda: None, cron="every morning")

        with pytest.raises(ValueError):
            scheduler.start()


class TestCommandLine:
    def test_check_takes_url(self):
        args = build_parser().parse_args(["check", "https://www.catena.ro/p"])

        assert args.command == "check"
        assert args.url == "https://www.catena.ro/p"

    def test_verbose_flag(self):
        args = build_parser().parse_args(["-v", "run"])

        assert args.verbose is True
        assert args.command == "run"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
