"""
Generate a CSV of transactions of the given types.

Usage:
  python -m backend_txreport.tools.generate_type_filtered_report swap daily
  python -m backend_txreport.tools.generate_type_filtered_report "swap,transfer" last7days
  python -m backend_txreport.tools.generate_type_filtered_report deposit custom "2024-01-15 09:00" "2024-01-15 17:30"

Types are matched exactly as Octav reports them (case-sensitive).
"""

from __future__ import annotations

import argparse
import sys

from backend_txreport.core.exceptions import TxReportError
from backend_txreport.core.services import build_services
from backend_txreport.reports.date_range import resolve_date_range
from backend_txreport.reports.generator import normalize_transaction_types
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a type-filtered transaction CSV.")
    parser.add_argument("transaction_types", help="Comma-separated transaction types")
    parser.add_argument("report_type", nargs="?", default="daily")
    parser.add_argument("start_date", nargs="?")
    parser.add_argument("end_date", nargs="?")
    args = parser.parse_args(argv)

    try:
        types = normalize_transaction_types(args.transaction_types)
        date_range = resolve_date_range(args.report_type, args.start_date, args.end_date)
        services = build_services()
        data = services.scheduler.fetch_report_data(date_range)
        summary = services.generator.generate_type_filtered_csv_report(
            data, types, f"type_filtered_{'_'.join(types)}_{args.report_type}"
        )
    except TxReportError as e:
        logger.error("type_filtered_report_failed", error=str(e))
        print(f"Error generating type-filtered report: {e}", file=sys.stderr)
        return 1

    print(f"Transaction types:           {', '.join(summary['transactionTypes'])}")
    print(f"Total filtered transactions: {summary['totalFilteredTransactions']}")
    print(f"Wallets:                     {summary['wallets']}")
    if summary["totalFilteredTransactions"] == 0:
        print("No transactions matched; check the type spelling or widen the date range.")
    print(f"CSV: {summary['path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
