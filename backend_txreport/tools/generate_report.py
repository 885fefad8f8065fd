"""
Generate a full transaction report (JSON, CSV and HTML) for the configured wallets.

Usage:
  python -m backend_txreport.tools.generate_report daily
  python -m backend_txreport.tools.generate_report weekly
  python -m backend_txreport.tools.generate_report custom 2024-01-01 2024-01-31

Report types: daily, yesterday, weekly, monthly, last7days, last30days, custom.
Env: OCTAV_API_KEY, WALLET_ADDRESSES, REPORT_OUTPUT_DIR.
"""

from __future__ import annotations

import argparse
import sys

from backend_txreport.core.exceptions import TxReportError
from backend_txreport.core.services import build_services
from backend_txreport.reports.date_range import REPORT_TYPES, resolve_date_range
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a full wallet transaction report.")
    parser.add_argument("report_type", nargs="?", default="daily", help=f"One of {', '.join(REPORT_TYPES)}")
    parser.add_argument("start_date", nargs="?", help="Start date for custom reports")
    parser.add_argument("end_date", nargs="?", help="End date for custom reports")
    args = parser.parse_args(argv)

    try:
        date_range = resolve_date_range(args.report_type, args.start_date, args.end_date)
        services = build_services()
        data = services.scheduler.fetch_report_data(date_range)
        report = services.generator.generate_transaction_report(data, args.report_type)
    except TxReportError as e:
        logger.error("generate_report_failed", error=str(e))
        print(f"Error generating report: {e}", file=sys.stderr)
        return 1

    summary = report["summary"]
    print(f"Report type:        {args.report_type}")
    print(f"Date range:         {date_range.start:%Y-%m-%d} to {date_range.end:%Y-%m-%d}")
    print(f"Total transactions: {summary['totalTransactions']}")
    print(f"Total volume:       {summary['totalVolume']:.2f}")
    print(f"Unique tokens:      {summary['uniqueTokens']}")
    print(f"Chains:             {', '.join(summary['chains'])}")
    for kind, path in report["files"].items():
        print(f"{kind.upper():5} {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
