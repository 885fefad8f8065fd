"""
Row projection for the four report views.

- full: every transaction admitted by the type gate
- status-filtered: gate, then classified status matches the filter
- type-filtered: gate, then raw type is one of the requested types
- on-chain: only BRIDGEIN / BRIDGEOUT / CLAIM, one row per moved asset

General views use the first-asset split strategy: a dual-sided transaction
yields an OUT row carrying the fee followed by an IN row with fee "0";
anything else yields one row. Sequence numbers are assigned here, after
gating, and run 1..N without gaps across all wallets of one call.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from backend_txreport.projection.direction import Direction, classify_direction
from backend_txreport.projection.extractor import (
    SIDE_AUTO,
    SIDE_IN,
    SIDE_OUT,
    TokenInfo,
    asset_token_info,
    extract_token_info,
)
from backend_txreport.projection.fields import (
    ZERO,
    as_text,
    format_timestamp,
    resolve,
)
from backend_txreport.projection.models import Transaction
from backend_txreport.projection.rows import OnChainRow, ReportRow
from backend_txreport.projection.status import (
    StatusCounts,
    classify_status,
    status_matches,
    validate_status_filter,
)
from backend_txreport.projection.type_gate import TypeGate
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

ONCHAIN_TYPES = ("BRIDGEIN", "BRIDGEOUT", "CLAIM")
INBOUND_ONCHAIN_TYPES = frozenset({"CLAIM", "BRIDGEIN"})
OUTBOUND_ONCHAIN_TYPES = frozenset({"BRIDGEOUT"})

TransactionsByWallet = Mapping[str, Any]


@dataclass
class ProjectionResult:
    """Rows of one view run plus the tallies reported alongside them."""

    rows: list[Any] = field(default_factory=list)
    transaction_count: int = 0
    status_counts: StatusCounts = field(default_factory=StatusCounts)
    type_breakdown: dict[str, int] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.rows)


class _Sequence:
    """1-based row counter shared by every wallet of one view run."""

    def __init__(self) -> None:
        self._last = 0

    def next(self) -> int:
        self._last += 1
        return self._last


def iter_wallet_transactions(
    transactions_by_wallet: TransactionsByWallet,
) -> Iterator[tuple[str, Transaction]]:
    """
    Yield (wallet, Transaction) in input order.

    A wallet slot that is not a list (e.g. {"error": ...} from a failed fetch)
    contributes nothing.
    """
    for wallet, transactions in transactions_by_wallet.items():
        if not isinstance(transactions, (list, tuple)):
            logger.warning(
                "projection_wallet_skipped",
                wallet_id=wallet,
                reason="not_a_transaction_list",
                error=transactions.get("error") if isinstance(transactions, Mapping) else None,
            )
            continue
        for raw in transactions:
            yield wallet, Transaction.from_api(raw)


def _report_row(
    seq: _Sequence,
    wallet: str,
    tx: Transaction,
    direction: Direction,
    info: TokenInfo,
    fees: Any,
) -> ReportRow:
    return ReportRow(
        field_no=seq.next(),
        direction=direction.label,
        wallet_address=wallet,
        timestamp=format_timestamp(tx.when),
        transaction_type=tx.type_label,
        chain=tx.chain_label,
        protocol=as_text(resolve(tx.protocol.get("name"))),
        token=as_text(info.token),
        value=as_text(info.value),
        value_fiat=as_text(info.value_fiat),
        fees=as_text(fees),
        transaction_hash=as_text(resolve(tx.hash)),
        from_address=as_text(resolve(tx.from_)),
        to_address=as_text(resolve(tx.to)),
        block_number=as_text(resolve(tx.block_number)),
    )


def split_first_asset_rows(seq: _Sequence, wallet: str, tx: Transaction) -> list[ReportRow]:
    """General-view strategy: OUT(fee) + IN("0") for dual-sided, else one row."""
    fees = resolve(tx.fees, default=ZERO)
    direction = classify_direction(tx)
    if direction is Direction.DUAL:
        return [
            _report_row(seq, wallet, tx, Direction.OUT, extract_token_info(tx, SIDE_OUT), fees),
            _report_row(seq, wallet, tx, Direction.IN, extract_token_info(tx, SIDE_IN), ZERO),
        ]
    return [_report_row(seq, wallet, tx, direction, extract_token_info(tx, SIDE_AUTO), fees)]


def _onchain_row(
    seq: _Sequence,
    wallet: str,
    tx: Transaction,
    info: TokenInfo,
    wallet_to: Any,
    wallet_from: Any,
) -> OnChainRow:
    return OnChainRow(
        field_no=seq.next(),
        transaction_hash=as_text(resolve(tx.hash)),
        wallet_address=wallet,
        timestamp=format_timestamp(tx.when),
        quantity=as_text(info.value),
        wallet_to=as_text(wallet_to),
        wallet_from=as_text(wallet_from),
        currency=as_text(info.token),
        transaction_type=tx.type_label,
    )


def contract_address(tx: Transaction) -> Any:
    """First interacting address, then protocol address, then tx.to."""
    first_interacting = tx.interacting_addresses[0] if tx.interacting_addresses else None
    return resolve(first_interacting, tx.protocol.get("address"), tx.to)


def per_asset_onchain_rows(seq: _Sequence, wallet: str, tx: Transaction) -> list[OnChainRow]:
    """
    On-chain strategy: one row per asset on the side that moved.

    CLAIM/BRIDGEIN read assetsIn (to defaults to the wallet, from to the
    contract); BRIDGEOUT reads assetsOut the other way round. Without assets
    on that side a single fallback row uses auto extraction.
    """
    tx_type = tx.type_label.upper()
    contract = contract_address(tx)
    if tx_type in INBOUND_ONCHAIN_TYPES and tx.assets_in:
        return [
            _onchain_row(
                seq, wallet, tx, asset_token_info(asset),
                wallet_to=resolve(asset.to, wallet),
                wallet_from=resolve(asset.from_, contract),
            )
            for asset in tx.assets_in
        ]
    if tx_type in OUTBOUND_ONCHAIN_TYPES and tx.assets_out:
        return [
            _onchain_row(
                seq, wallet, tx, asset_token_info(asset),
                wallet_to=resolve(asset.to, contract),
                wallet_from=resolve(asset.from_, wallet),
            )
            for asset in tx.assets_out
        ]
    return [
        _onchain_row(
            seq, wallet, tx, extract_token_info(tx, SIDE_AUTO),
            wallet_to=resolve(tx.to),
            wallet_from=resolve(tx.from_),
        )
    ]


class RowProjector:
    """Projects wallet transactions into report rows, one view per call."""

    def __init__(self, gate: TypeGate) -> None:
        self.gate = gate

    def _project(
        self,
        transactions_by_wallet: TransactionsByWallet,
        select: Callable[[Transaction, ProjectionResult], bool],
        strategy: Callable[[_Sequence, str, Transaction], list[Any]],
        view: str,
    ) -> ProjectionResult:
        result = ProjectionResult()
        seq = _Sequence()
        for wallet, tx in iter_wallet_transactions(transactions_by_wallet):
            if not select(tx, result):
                continue
            result.transaction_count += 1
            result.rows.extend(strategy(seq, wallet, tx))
        logger.debug(
            "projection_complete",
            view=view,
            wallets=len(transactions_by_wallet),
            transactions=result.transaction_count,
            rows=result.row_count,
        )
        return result

    def project_full(self, transactions_by_wallet: TransactionsByWallet) -> ProjectionResult:
        return self._project(
            transactions_by_wallet,
            lambda tx, _result: self.gate.admits(tx),
            split_first_asset_rows,
            view="full",
        )

    def project_status_filtered(
        self,
        transactions_by_wallet: TransactionsByWallet,
        status_filter: str,
    ) -> ProjectionResult:
        """
        Rows for admitted transactions whose status matches status_filter.

        status_counts tallies every admitted transaction, matching or not.
        Raises InvalidStatusFilterError before looking at any transaction.
        """
        validate_status_filter(status_filter)

        def select(tx: Transaction, result: ProjectionResult) -> bool:
            if not self.gate.admits(tx):
                return False
            status = classify_status(tx)
            result.status_counts.add(status)
            return status_matches(status, status_filter)

        return self._project(transactions_by_wallet, select, split_first_asset_rows, view="status")

    def project_type_filtered(
        self,
        transactions_by_wallet: TransactionsByWallet,
        transaction_types: Iterable[str],
    ) -> ProjectionResult:
        """Rows for admitted transactions whose raw type (case-sensitive) is requested."""
        wanted = frozenset(transaction_types)
        return self._project(
            transactions_by_wallet,
            lambda tx, _result: self.gate.admits(tx) and tx.type_label in wanted,
            split_first_asset_rows,
            view="type",
        )

    def project_onchain(self, transactions_by_wallet: TransactionsByWallet) -> ProjectionResult:
        """
        Rows for BRIDGEIN / BRIDGEOUT / CLAIM only (compared upper-cased).

        Selects by its own type set; the exclusion gate is not consulted.
        type_breakdown counts transactions (not rows) per type.
        """
        breakdown: Counter[str] = Counter()

        def select(tx: Transaction, _result: ProjectionResult) -> bool:
            tx_type = tx.type_label.upper()
            if tx_type not in ONCHAIN_TYPES:
                return False
            breakdown[tx_type] += 1
            return True

        result = self._project(transactions_by_wallet, select, per_asset_onchain_rows, view="onchain")
        result.type_breakdown = dict(breakdown)
        return result

