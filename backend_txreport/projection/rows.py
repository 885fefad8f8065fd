"""
Report row shapes and their CSV column sets.

Columns are (key, title) pairs; titles are the CSV headers in output order.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

TRADING_CAPACITY = "DEAL"
TRANSACTION_STATUS = "NEWT"

REPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("field_no", "Field no"),
    ("trading_capacity", "Trading capacity"),
    ("transaction_status", "Transaction_status"),
    ("direction", "Direction"),
    ("wallet_address", "Wallet Address"),
    ("timestamp", "Timestamp"),
    ("transaction_type", "Transaction Type"),
    ("chain", "Chain"),
    ("protocol", "Protocol"),
    ("token", "Token"),
    ("value", "Value"),
    ("value_fiat", "Value (Fiat)"),
    ("fees", "Fees"),
    ("transaction_hash", "Transaction Hash"),
    ("from_address", "From Address"),
    ("to_address", "To Address"),
    ("block_number", "Block Number"),
)

ONCHAIN_COLUMNS: tuple[tuple[str, str], ...] = (
    ("field_no", "Field no"),
    ("transaction_hash", "Transaction hash"),
    ("wallet_address", "Wallet address"),
    ("timestamp", "Timestamp"),
    ("quantity", "Quantity"),
    ("wallet_to", "Wallet to"),
    ("wallet_from", "Wallet from"),
    ("currency", "Currency"),
    ("transaction_type", "Transaction type"),
)


@dataclass(frozen=True)
class ReportRow:
    field_no: int
    direction: str
    wallet_address: str
    timestamp: str
    transaction_type: str
    chain: str
    protocol: str
    token: str
    value: str
    value_fiat: str
    fees: str
    transaction_hash: str
    from_address: str
    to_address: str
    block_number: str
    trading_capacity: str = TRADING_CAPACITY
    transaction_status: str = TRANSACTION_STATUS


@dataclass(frozen=True)
class OnChainRow:
    field_no: int
    transaction_hash: str
    wallet_address: str
    timestamp: str
    quantity: str
    wallet_to: str
    wallet_from: str
    currency: str
    transaction_type: str


def to_record(row: ReportRow | OnChainRow, columns: tuple[tuple[str, str], ...]) -> dict[str, Any]:
    """Map a row to {column title: value} in column order."""
    values = asdict(row)
    return {title: values[key] for key, title in columns}
