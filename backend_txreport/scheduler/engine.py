"""
Report scheduling engine: cron jobs that fetch, report and notify.

Jobs (UTC): daily at REPORT_SCHEDULE (default 09:00), weekly on Monday
10:00, monthly on the 1st at 11:00. Each run fetches transactions and
portfolios for the configured wallets, writes the full report and sends
notifications. A failed run is logged and reported through the error
notification; it never stops the scheduler.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from pytz import utc

from backend_txreport.alerts.notifier import Notifier
from backend_txreport.config.env import DEFAULT_REPORT_SCHEDULE
from backend_txreport.core.exceptions import ConfigError
from backend_txreport.octav.client import OctavClient
from backend_txreport.reports.date_range import DateRange, get_date_range, to_iso
from backend_txreport.reports.generator import ReportGenerator
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

JOB_DAILY = "daily"
JOB_WEEKLY = "weekly"
JOB_MONTHLY = "monthly"

WEEKLY_DAY_OF_WEEK = "mon"
WEEKLY_HOUR = 10
MONTHLY_DAY = 1
MONTHLY_HOUR = 11


@dataclass
class SchedulerConfig:
    """Cron settings for the report jobs."""

    daily_cron: str = DEFAULT_REPORT_SCHEDULE
    """Five-field crontab expression for the daily report."""
    weekly_day_of_week: str = WEEKLY_DAY_OF_WEEK
    weekly_hour: int = WEEKLY_HOUR
    monthly_day: int = MONTHLY_DAY
    monthly_hour: int = MONTHLY_HOUR


def build_triggers(config: SchedulerConfig) -> dict[str, CronTrigger]:
    """Job id -> CronTrigger, all in UTC."""
    return {
        JOB_DAILY: CronTrigger.from_crontab(config.daily_cron, timezone=utc),
        JOB_WEEKLY: CronTrigger(day_of_week=config.weekly_day_of_week, hour=config.weekly_hour, minute=0, timezone=utc),
        JOB_MONTHLY: CronTrigger(day=config.monthly_day, hour=config.monthly_hour, minute=0, timezone=utc),
    }


class ReportScheduler:
    """Runs scheduled and on-demand full reports for a fixed wallet list."""

    def __init__(
        self,
        client: OctavClient,
        generator: ReportGenerator,
        notifier: Notifier,
        wallets: list[str],
        config: SchedulerConfig | None = None,
        scheduler: BackgroundScheduler | None = None,
    ) -> None:
        self.client = client
        self.generator = generator
        self.notifier = notifier
        self.wallets = list(wallets)
        self.config = config or SchedulerConfig()
        self._scheduler = scheduler or BackgroundScheduler(timezone=utc)
        self._shut_down = False

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Register the cron jobs and start the background scheduler."""
        if self._shut_down:
            # a shut down APScheduler instance cannot be restarted
            self._scheduler = BackgroundScheduler(timezone=utc)
            self._shut_down = False
        for job_id, trigger in build_triggers(self.config).items():
            self._scheduler.add_job(
                self.generate_report,
                trigger,
                args=[job_id],
                id=job_id,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
        logger.info("report_scheduler_starting", jobs=[job.id for job in self._scheduler.get_jobs()], wallets=len(self.wallets))
        if not self._scheduler.running:
            # BlockingScheduler does not return from start() until shutdown
            self._scheduler.start()

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.remove_all_jobs()
            self._scheduler.shutdown(wait=False)
            self._shut_down = True
        logger.info("report_scheduler_stopped")

    def get_status(self) -> dict[str, dict[str, Any]]:
        """{job_id: {"running": bool, "nextDate": iso | None}}"""
        status: dict[str, dict[str, Any]] = {}
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            status[job.id] = {
                "running": self._scheduler.running and next_run is not None,
                "nextDate": to_iso(next_run) if next_run else None,
            }
        return status

    def fetch_report_data(self, date_range: DateRange) -> dict[str, Any]:
        """Fetch transactions and portfolios for every configured wallet."""
        if not self.wallets:
            raise ConfigError("No wallet addresses configured (WALLET_ADDRESSES)")
        window = date_range.to_dict()
        transactions = self.client.get_batch_transactions(
            self.wallets, startDate=window["start"], endDate=window["end"]
        )
        portfolios = self.client.get_batch_portfolios(self.wallets)
        return {
            "transactions": transactions,
            "portfolios": portfolios,
            "dateRange": window,
            "fetchedAt": to_iso(datetime.now(timezone.utc)),
        }

    def generate_report(self, report_type: str = JOB_DAILY) -> dict[str, Any] | None:
        """Fetch, write the full report and notify. Returns the report, or None on failure."""
        started = time.monotonic()
        logger.info("report_job_start", report_type=report_type)
        try:
            data = self.fetch_report_data(get_date_range(report_type))
            report = self.generator.generate_transaction_report(data, report_type)
        except Exception as e:
            logger.exception("report_job_error", report_type=report_type, error=str(e))
            self.notifier.send_error_notification(e, report_type)
            return None
        logger.info(
            "report_job_end",
            report_type=report_type,
            duration_ms=int((time.monotonic() - started) * 1000),
            transactions=report["summary"]["totalTransactions"],
        )
        self.notifier.send_report_notifications(report, report_type)
        return report

    def trigger_report(self, report_type: str = JOB_DAILY) -> dict[str, Any] | None:
        """Run a report now, outside the cron schedule."""
        logger.info("report_manual_trigger", report_type=report_type)
        return self.generate_report(report_type)
