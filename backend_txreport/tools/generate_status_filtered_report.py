"""
Generate a CSV of transactions filtered by validation status.

Usage:
  python -m backend_txreport.tools.generate_status_filtered_report validated daily
  python -m backend_txreport.tools.generate_status_filtered_report pending weekly
  python -m backend_txreport.tools.generate_status_filtered_report failed custom 2024-01-01 2024-01-31
  python -m backend_txreport.tools.generate_status_filtered_report all last7days
"""

from __future__ import annotations

import argparse
import sys

from backend_txreport.core.exceptions import TxReportError
from backend_txreport.core.services import build_services
from backend_txreport.projection.status import VALID_STATUS_FILTERS, validate_status_filter
from backend_txreport.reports.date_range import resolve_date_range
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a status-filtered transaction CSV.")
    parser.add_argument("status_filter", help=f"One of {', '.join(VALID_STATUS_FILTERS)}")
    parser.add_argument("report_type", nargs="?", default="daily")
    parser.add_argument("start_date", nargs="?")
    parser.add_argument("end_date", nargs="?")
    args = parser.parse_args(argv)

    try:
        validate_status_filter(args.status_filter)
        date_range = resolve_date_range(args.report_type, args.start_date, args.end_date)
        services = build_services()
        data = services.scheduler.fetch_report_data(date_range)
        summary = services.generator.generate_status_filtered_csv_report(
            data, args.status_filter, f"status_filtered_{args.status_filter}_{args.report_type}"
        )
    except TxReportError as e:
        logger.error("status_filtered_report_failed", error=str(e))
        print(f"Error generating status-filtered report: {e}", file=sys.stderr)
        return 1

    counts = summary["statusCounts"]
    print(f"Status filter:               {summary['statusFilter']}")
    print(f"Total filtered transactions: {summary['totalFilteredTransactions']}")
    print(f"Wallets:                     {summary['wallets']}")
    print(
        f"Breakdown: validated={counts['validated']} pending={counts['pending']} "
        f"failed={counts['failed']} unknown={counts['unknown']}"
    )
    if summary["totalFilteredTransactions"] == 0:
        print("No transactions matched; try the 'all' filter or a wider date range.")
    print(f"CSV: {summary['path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
