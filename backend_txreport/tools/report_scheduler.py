"""
Run the report jobs on their cron schedule (UTC) in the foreground.

Usage:
  python -m backend_txreport.tools.report_scheduler                  # daily/weekly/monthly jobs
  python -m backend_txreport.tools.report_scheduler --run-now weekly # run one report, then exit
"""

from __future__ import annotations

import argparse
import sys

from apscheduler.schedulers.blocking import BlockingScheduler
from pytz import utc

from backend_txreport.core.exceptions import TxReportError
from backend_txreport.core.services import build_services
from backend_txreport.scheduler.engine import ReportScheduler, SchedulerConfig
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run scheduled wallet transaction reports.")
    parser.add_argument(
        "--run-now",
        metavar="REPORT_TYPE",
        help="Generate one report of this type immediately, then exit.",
    )
    args = parser.parse_args(argv)

    try:
        services = build_services()
        if args.run_now:
            report = services.scheduler.trigger_report(args.run_now)
            return 0 if report is not None else 1
        scheduler = ReportScheduler(
            client=services.client,
            generator=services.generator,
            notifier=services.notifier,
            wallets=list(services.settings.wallet_addresses),
            config=SchedulerConfig(daily_cron=services.settings.report_schedule),
            scheduler=BlockingScheduler(timezone=utc),
        )
    except TxReportError as e:
        logger.error("report_scheduler_config_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("report_scheduler_interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
