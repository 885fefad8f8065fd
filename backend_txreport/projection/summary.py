"""
Summary aggregation over the full view's admitted transactions.

Counts, total volume, unique tokens, chains and frequency tables. Top
lists are ordered by count descending; ties keep first-seen order.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from backend_txreport.projection.extractor import SIDE_AUTO, extract_token_info
from backend_txreport.projection.fields import PLACEHOLDER, parse_float_prefix, resolve
from backend_txreport.projection.models import Transaction
from backend_txreport.projection.projector import TransactionsByWallet, iter_wallet_transactions
from backend_txreport.projection.type_gate import TypeGate
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

TOP_TOKENS_LIMIT = 10
TOP_CHAINS_LIMIT = 5


@dataclass
class Summary:
    total_transactions: int = 0
    total_volume: float = 0.0
    unique_tokens: set[str] = field(default_factory=set)
    chains: list[str] = field(default_factory=list)
    transaction_types: Counter = field(default_factory=Counter)
    tokens: Counter = field(default_factory=Counter)
    chain_counts: Counter = field(default_factory=Counter)

    @property
    def top_tokens(self) -> list[tuple[str, int]]:
        return _top(self.tokens, TOP_TOKENS_LIMIT)

    @property
    def top_chains(self) -> list[tuple[str, int]]:
        return _top(self.chain_counts, TOP_CHAINS_LIMIT)

    def to_dict(self) -> dict[str, Any]:
        """Report shape used in JSON/HTML output and notifications."""
        return {
            "totalTransactions": self.total_transactions,
            "totalVolume": self.total_volume,
            "uniqueTokens": len(self.unique_tokens),
            "chains": list(self.chains),
            "transactionTypes": dict(self.transaction_types),
            "topTokens": [{"token": token, "count": count} for token, count in self.top_tokens],
            "topChains": [{"chain": chain, "count": count} for chain, count in self.top_chains],
        }


def _top(counter: Counter, limit: int) -> list[tuple[str, int]]:
    # sorted() is stable and Counter keeps insertion order, so ties stay first-seen
    return sorted(counter.items(), key=lambda item: item[1], reverse=True)[:limit]


def token_keys(tx: Transaction) -> tuple[str, str] | None:
    """
    (identity, label) for the transaction's token, or None.

    A token object is identified by its address and labelled by its symbol,
    each falling back to the other. Without one, the auto-extracted asset
    symbol serves as both.
    """
    if tx.token is not None:
        address = resolve(tx.token.get("address"), default=None)
        symbol = resolve(tx.token.get("symbol"), default=None)
        if address is None and symbol is None:
            return None
        identity = address if address is not None else symbol
        label = symbol if symbol is not None else address
        return str(identity), str(label)
    token = extract_token_info(tx, SIDE_AUTO).token
    if token == PLACEHOLDER:
        return None
    return str(token), str(token)


def summarize(transactions_by_wallet: TransactionsByWallet, gate: TypeGate) -> Summary:
    """Aggregate every transaction the gate admits."""
    summary = Summary()
    for _wallet, tx in iter_wallet_transactions(transactions_by_wallet):
        if not gate.admits(tx):
            continue
        summary.total_transactions += 1
        summary.total_volume += parse_float_prefix(tx.value)
        summary.transaction_types[tx.type_label] += 1

        keys = token_keys(tx)
        if keys is not None:
            identity, label = keys
            summary.unique_tokens.add(identity)
            summary.tokens[label] += 1

        if resolve(tx.chain, default=None) is not None:
            chain = tx.chain_label
            if chain not in summary.chain_counts:
                summary.chains.append(chain)
            summary.chain_counts[chain] += 1

    logger.debug(
        "summary_complete",
        transactions=summary.total_transactions,
        unique_tokens=len(summary.unique_tokens),
        chains=len(summary.chains),
    )
    return summary
