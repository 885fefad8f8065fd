"""
Report file writers: CSV rows, JSON payloads and the HTML summary page.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, BaseLoader, select_autoescape

from backend_txreport.projection.rows import to_record
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Transaction Report - {{ metadata.reportDate }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; background-color: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; background: white; padding: 20px; border-radius: 8px; }
        .header { text-align: center; border-bottom: 2px solid #007bff; padding-bottom: 20px; margin-bottom: 30px; }
        .summary-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; }
        .summary-card { background: #f8f9fa; padding: 15px; border-radius: 5px; border-left: 4px solid #007bff; }
        .summary-card h3 { margin: 0 0 10px 0; color: #007bff; }
        .summary-card p { margin: 0; font-size: 24px; font-weight: bold; }
        .section { margin-bottom: 30px; }
        table { width: 100%; border-collapse: collapse; margin-top: 15px; }
        th, td { padding: 12px; text-align: left; border-bottom: 1px solid #ddd; }
        th { background-color: #f8f9fa; }
        .metadata { background: #e9ecef; padding: 15px; border-radius: 5px; margin-bottom: 20px; }
    </style>
</head>
<body>
<div class="container">
    <div class="header">
        <h1>Transaction Report</h1>
        <p>Generated on {{ metadata.generatedAt }}</p>
    </div>
    <div class="metadata">
        <h3>Report Information</h3>
        <p><strong>Type:</strong> {{ metadata.reportType }}</p>
        <p><strong>Date:</strong> {{ metadata.reportDate }}</p>
        <p><strong>Wallets Monitored:</strong> {{ metadata.totalWallets }}</p>
    </div>
    <div class="section">
        <h2>Summary Statistics</h2>
        <div class="summary-grid">
            <div class="summary-card"><h3>Total Transactions</h3><p>{{ summary.totalTransactions }}</p></div>
            <div class="summary-card"><h3>Total Volume</h3><p>{{ "%.2f"|format(summary.totalVolume) }}</p></div>
            <div class="summary-card"><h3>Unique Tokens</h3><p>{{ summary.uniqueTokens }}</p></div>
            <div class="summary-card"><h3>Chains</h3><p>{{ summary.chains|length }}</p></div>
        </div>
    </div>
    <div class="section">
        <h2>Transaction Types</h2>
        <table>
            <thead><tr><th>Type</th><th>Count</th></tr></thead>
            <tbody>
            {% for type, count in summary.transactionTypes.items() %}
                <tr><td>{{ type }}</td><td>{{ count }}</td></tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
    <div class="section">
        <h2>Top Tokens</h2>
        <table>
            <thead><tr><th>Token</th><th>Count</th></tr></thead>
            <tbody>
            {% for item in summary.topTokens %}
                <tr><td>{{ item.token }}</td><td>{{ item.count }}</td></tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
    <div class="section">
        <h2>Top Chains</h2>
        <table>
            <thead><tr><th>Chain</th><th>Count</th></tr></thead>
            <tbody>
            {% for item in summary.topChains %}
                <tr><td>{{ item.chain }}</td><td>{{ item.count }}</td></tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
</div>
</body>
</html>
"""

_env = Environment(loader=BaseLoader(), autoescape=select_autoescape(default_for_string=True))


def write_rows_csv(
    path: Path,
    columns: tuple[tuple[str, str], ...],
    rows: Iterable[Any],
) -> int:
    """Write rows with column titles as the header. Returns the row count."""
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=[title for _key, title in columns])
        writer.writeheader()
        for row in rows:
            writer.writerow(to_record(row, columns))
            written += 1
    logger.info("report_csv_written", path=str(path), rows=written)
    return written


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)
    logger.info("report_json_written", path=str(path))


def render_html_report(report: dict[str, Any]) -> str:
    """Render the summary page for a full transaction report."""
    template = _env.from_string(HTML_TEMPLATE)
    return template.render(metadata=report["metadata"], summary=report["summary"])


def write_html(path: Path, html: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.info("report_html_written", path=str(path))
