"""
Generate the on-chain CSV: BRIDGEIN, BRIDGEOUT and CLAIM, one row per asset.

Usage:
  python -m backend_txreport.tools.generate_onchain_report
  python -m backend_txreport.tools.generate_onchain_report --start-date 2025-10-01 --end-date 2025-10-15
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

from backend_txreport.core.exceptions import ConfigError, TxReportError
from backend_txreport.core.services import build_services
from backend_txreport.reports.date_range import custom_date_range
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)


def _date_arg(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, use YYYY-MM-DD") from e
    return value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the on-chain (bridge/claim) transaction CSV.")
    parser.add_argument("--start-date", type=_date_arg, help="YYYY-MM-DD (optional)")
    parser.add_argument("--end-date", type=_date_arg, help="YYYY-MM-DD (optional)")
    args = parser.parse_args(argv)

    try:
        services = build_services()
        wallets = list(services.settings.wallet_addresses)
        if not wallets:
            raise ConfigError("No wallet addresses configured (WALLET_ADDRESSES)")
        options = {}
        if args.start_date:
            options["startDate"] = args.start_date
        if args.end_date:
            options["endDate"] = args.end_date
        range_label = None
        date_range = None
        if args.start_date and args.end_date:
            window = custom_date_range(args.start_date, args.end_date)
            range_label = window.label()
            date_range = window.to_dict()
        transactions = services.client.get_batch_transactions(wallets, **options)
        summary = services.generator.generate_onchain_csv_report(
            {"transactions": transactions, "dateRange": date_range}, range_label=range_label
        )
    except TxReportError as e:
        logger.error("onchain_report_failed", error=str(e))
        print(f"Error generating on-chain report: {e}", file=sys.stderr)
        return 1

    if summary is None:
        print("No on-chain transactions found for the specified criteria.")
        return 0
    print(f"Report saved to: {summary['path']}")
    print(f"On-chain transactions: {summary['totalOnChainTransactions']} ({summary['totalRows']} rows)")
    print("Transaction type breakdown:")
    for tx_type, count in summary["typeBreakdown"].items():
        print(f"  {tx_type}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
