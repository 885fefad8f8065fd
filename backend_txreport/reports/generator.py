"""
Report generation: runs a projection view over fetched data and writes files.

Input data is the fetch payload:
    {"transactions": {wallet: [tx, ...] | {"error": ...}},
     "portfolios": {wallet: {...}}, "dateRange": {"start": iso, "end": iso},
     "fetchedAt": iso}

Every method validates its parameters first, projects, and only then
writes output into output_dir. File names carry a YYYY-MM-DD_HH-MM-SS
timestamp so runs never overwrite each other.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from backend_txreport.core.exceptions import ReportValidationError
from backend_txreport.projection.fields import parse_float_prefix
from backend_txreport.projection.projector import RowProjector
from backend_txreport.projection.rows import ONCHAIN_COLUMNS, REPORT_COLUMNS
from backend_txreport.projection.status import validate_status_filter
from backend_txreport.projection.summary import summarize
from backend_txreport.projection.type_gate import TypeGate
from backend_txreport.reports.date_range import to_iso
from backend_txreport.reports.writers import (
    FILE_TIMESTAMP_FORMAT,
    render_html_report,
    write_html,
    write_json,
    write_rows_csv,
)
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

TOP_ASSETS_LIMIT = 10


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _transactions(data: Mapping[str, Any]) -> Mapping[str, Any]:
    transactions = data.get("transactions") or {}
    return transactions if isinstance(transactions, Mapping) else {}


def check_file_name(name: str) -> str:
    """Return name if it is a plain file name inside the output directory."""
    if not name or name in (".", "..") or any(sep in name for sep in ("/", "\\", "\0")):
        raise ReportValidationError(f"Invalid report name: {name!r}")
    return name


def normalize_transaction_types(transaction_types: str | list[str] | tuple[str, ...]) -> list[str]:
    """Accept "swap,transfer" or a list; raise when nothing usable is left."""
    if isinstance(transaction_types, str):
        types = [t.strip() for t in transaction_types.split(",")]
    elif isinstance(transaction_types, (list, tuple)):
        types = [str(t).strip() for t in transaction_types]
    else:
        types = []
    types = [t for t in types if t]
    if not types:
        raise ReportValidationError("transactionTypes must name at least one transaction type")
    return types


def summarize_portfolios(portfolios: Mapping[str, Any]) -> dict[str, Any]:
    """Total value, asset count, chains and top assets by value across portfolios."""
    total_value = 0.0
    total_assets = 0
    chains: list[str] = []
    asset_values: Counter = Counter()
    for wallet, portfolio in portfolios.items():
        if not isinstance(portfolio, Mapping) or "error" in portfolio:
            logger.debug("portfolio_skipped", wallet_id=wallet)
            continue
        assets = portfolio.get("assets")
        if not isinstance(assets, list):
            continue
        for asset in assets:
            if not isinstance(asset, Mapping):
                continue
            value = parse_float_prefix(asset.get("value"))
            total_assets += 1
            total_value += value
            chain = asset.get("chain")
            if chain and chain not in chains:
                chains.append(chain)
            symbol = asset.get("symbol")
            if symbol:
                asset_values[symbol] += value
    top_assets = sorted(asset_values.items(), key=lambda item: item[1], reverse=True)[:TOP_ASSETS_LIMIT]
    return {
        "totalValue": total_value,
        "totalAssets": total_assets,
        "chains": chains,
        "topAssets": [{"symbol": symbol, "value": value} for symbol, value in top_assets],
    }


class ReportGenerator:
    """Writes report files for the full, filtered, on-chain and portfolio views."""

    def __init__(self, output_dir: str | Path, gate: TypeGate) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.gate = gate
        self.projector = RowProjector(gate)

    def _path(self, stem: str, suffix: str, now: datetime) -> Path:
        return self.output_dir / f"{check_file_name(stem)}_{now.strftime(FILE_TIMESTAMP_FORMAT)}.{suffix}"

    def generate_transaction_report(self, data: Mapping[str, Any], report_type: str = "daily") -> dict[str, Any]:
        """
        Full report: summary + details, written as JSON, CSV (full view) and HTML.

        Returns the report dict with a "files" entry listing what was written.
        """
        now = _now()
        transactions = _transactions(data)
        summary = summarize(transactions, self.gate)
        result = self.projector.project_full(transactions)
        report: dict[str, Any] = {
            "metadata": {
                "generatedAt": to_iso(now),
                "reportType": report_type,
                "reportDate": now.strftime("%Y-%m-%d"),
                "totalWallets": len(transactions),
            },
            "summary": summary.to_dict(),
            "details": dict(data),
        }
        json_path = self._path("transaction_report", "json", now)
        csv_path = self._path("transaction_report", "csv", now)
        html_path = self._path("transaction_report", "html", now)
        write_json(json_path, report)
        write_rows_csv(csv_path, REPORT_COLUMNS, result.rows)
        write_html(html_path, render_html_report(report))
        report["files"] = {"json": str(json_path), "csv": str(csv_path), "html": str(html_path)}
        logger.info(
            "transaction_report_generated",
            report_type=report_type,
            wallets=len(transactions),
            transactions=summary.total_transactions,
            rows=result.row_count,
        )
        return report

    def generate_status_filtered_csv_report(
        self,
        data: Mapping[str, Any],
        status_filter: str = "all",
        report_name: str = "status_filtered",
    ) -> dict[str, Any]:
        """Status-filtered CSV. Raises InvalidStatusFilterError before writing anything."""
        validate_status_filter(status_filter)
        check_file_name(report_name)
        now = _now()
        transactions = _transactions(data)
        result = self.projector.project_status_filtered(transactions, status_filter)
        path = self._path(report_name, "csv", now)
        write_rows_csv(path, REPORT_COLUMNS, result.rows)
        logger.info(
            "status_filtered_report_generated",
            status_filter=status_filter,
            transactions=result.transaction_count,
            status_counts=result.status_counts.to_dict(),
        )
        return {
            "totalFilteredTransactions": result.transaction_count,
            "statusFilter": status_filter,
            "statusCounts": result.status_counts.to_dict(),
            "wallets": len(transactions),
            "dateRange": data.get("dateRange"),
            "generatedAt": to_iso(now),
            "path": str(path),
        }

    def generate_type_filtered_csv_report(
        self,
        data: Mapping[str, Any],
        transaction_types: str | list[str],
        report_name: str = "type_filtered",
    ) -> dict[str, Any]:
        """Type-filtered CSV for one or more raw transaction types."""
        types = normalize_transaction_types(transaction_types)
        check_file_name(report_name)
        now = _now()
        transactions = _transactions(data)
        result = self.projector.project_type_filtered(transactions, types)
        path = self._path(report_name, "csv", now)
        write_rows_csv(path, REPORT_COLUMNS, result.rows)
        logger.info("type_filtered_report_generated", types=types, transactions=result.transaction_count)
        return {
            "totalFilteredTransactions": result.transaction_count,
            "transactionTypes": types,
            "wallets": len(transactions),
            "dateRange": data.get("dateRange"),
            "generatedAt": to_iso(now),
            "path": str(path),
        }

    def generate_onchain_csv_report(
        self,
        data: Mapping[str, Any],
        filename: str | None = None,
        range_label: str | None = None,
    ) -> dict[str, Any] | None:
        """
        On-chain CSV (BRIDGEIN / BRIDGEOUT / CLAIM, one row per asset).

        Returns None without writing when no on-chain transaction was found.
        range_label (YYYY-MM-DD_to_YYYY-MM-DD) goes into the default file name,
        which otherwise says all_time.
        """
        now = _now()
        transactions = _transactions(data)
        result = self.projector.project_onchain(transactions)
        if result.transaction_count == 0:
            logger.warning("onchain_report_empty", wallets=len(transactions))
            return None
        if filename:
            path = self.output_dir / check_file_name(filename)
        else:
            path = self._path(f"onchain_transactions_{range_label or 'all_time'}", "csv", now)
        write_rows_csv(path, ONCHAIN_COLUMNS, result.rows)
        logger.info(
            "onchain_report_generated",
            transactions=result.transaction_count,
            rows=result.row_count,
            type_breakdown=result.type_breakdown,
        )
        return {
            "totalOnChainTransactions": result.transaction_count,
            "totalRows": result.row_count,
            "typeBreakdown": result.type_breakdown,
            "wallets": len(transactions),
            "dateRange": data.get("dateRange"),
            "generatedAt": to_iso(now),
            "path": str(path),
        }

    def generate_portfolio_report(self, portfolios: Mapping[str, Any]) -> dict[str, Any]:
        """Portfolio snapshot report written as JSON."""
        now = _now()
        report = {
            "metadata": {
                "generatedAt": to_iso(now),
                "reportType": "portfolio",
                "totalWallets": len(portfolios),
            },
            "portfolios": dict(portfolios),
            "summary": summarize_portfolios(portfolios),
        }
        path = self._path("portfolio_report", "json", now)
        write_json(path, report)
        report["path"] = str(path)
        return report
