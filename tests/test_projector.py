"""
Tests for the row projector: full, status-filtered, type-filtered and on-chain views.
"""

from __future__ import annotations

import pytest

from tests.conftest import WALLET_A, WALLET_B


def _projector(gate):
    from backend_txreport.projection.projector import RowProjector

    return RowProjector(gate)


# --- full view ---


def test_dual_sided_swap_yields_out_then_in(gate, swap_tx):
    result = _projector(gate).project_full({WALLET_A: [swap_tx]})

    assert result.transaction_count == 1
    assert [r.direction for r in result.rows] == ["OUT", "IN"]
    out_row, in_row = result.rows
    assert (out_row.field_no, in_row.field_no) == (1, 2)
    assert (out_row.token, out_row.value, out_row.value_fiat) == ("USDC", "100", "100")
    assert (in_row.token, in_row.value, in_row.value_fiat) == ("ETH", "0.05", "99.5")
    assert out_row.fees == "0.002"
    assert in_row.fees == "0"
    for row in result.rows:
        assert row.transaction_hash == "0xswap"
        assert row.timestamp == "01/01/2024 00:00:00"
        assert row.transaction_type == "SWAP"
        assert row.wallet_address == WALLET_A
        assert row.chain == "Ethereum"
        assert row.protocol == "Uniswap"
        assert row.block_number == "19000000"
        assert row.trading_capacity == "DEAL"
        assert row.transaction_status == "NEWT"


def test_single_sided_rows_and_placeholders(gate, transfer_in_tx):
    bare = {"type": "APPROVE"}
    result = _projector(gate).project_full({WALLET_A: [transfer_in_tx, bare]})

    assert result.transaction_count == 2
    transfer, approve = result.rows
    assert transfer.direction == "IN"
    assert transfer.token == "Arbitrum"
    assert transfer.chain == "arbitrum"
    assert transfer.protocol == "N/A"
    assert transfer.fees == "0"
    assert transfer.block_number == "N/A"

    assert approve.direction == "N/A"
    assert (approve.token, approve.value, approve.value_fiat) == ("N/A", "0", "0")
    assert approve.timestamp == "N/A"
    assert approve.chain == "unknown"
    assert approve.transaction_hash == "N/A"
    assert approve.from_address == "N/A"
    assert approve.to_address == "N/A"


def test_excluded_types_never_reach_rows(gate, transactions_by_wallet):
    result = _projector(gate).project_full(transactions_by_wallet)

    assert result.transaction_count == 2
    assert all(r.transaction_type.upper() != "CLAIM" for r in result.rows)
    # swap -> 2 rows, transfer -> 1 row
    assert [r.field_no for r in result.rows] == [1, 2, 3]


def test_sequence_contiguous_across_wallets(gate, swap_tx, transfer_in_tx):
    data = {WALLET_A: [transfer_in_tx], WALLET_B: [swap_tx, transfer_in_tx]}
    rows = _projector(gate).project_full(data).rows

    assert [r.field_no for r in rows] == [1, 2, 3, 4]
    assert [r.wallet_address for r in rows] == [WALLET_A, WALLET_B, WALLET_B, WALLET_B]


def test_error_marker_and_malformed_records(gate):
    data = {WALLET_A: {"error": "boom"}, WALLET_B: ["not-a-dict", None]}
    result = _projector(gate).project_full(data)

    assert result.transaction_count == 2
    assert all(r.wallet_address == WALLET_B for r in result.rows)
    assert all(r.transaction_type == "unknown" for r in result.rows)


def test_input_not_mutated(gate, swap_tx):
    import copy

    data = {WALLET_A: [swap_tx]}
    snapshot = copy.deepcopy(data)
    projector = _projector(gate)
    projector.project_full(data)
    projector.project_onchain(data)
    assert data == snapshot


# --- status-filtered view ---


def test_status_filter_counts_every_admitted_transaction(gate, transactions_by_wallet):
    result = _projector(gate).project_status_filtered(transactions_by_wallet, "validated")

    assert result.transaction_count == 1
    assert result.status_counts.to_dict() == {"validated": 1, "pending": 1, "failed": 0, "unknown": 0}
    assert [r.transaction_hash for r in result.rows] == ["0xswap", "0xswap"]


def test_status_filter_all_keeps_everything_admitted(gate, transactions_by_wallet):
    result = _projector(gate).project_status_filtered(transactions_by_wallet, "all")

    assert result.transaction_count == 2
    assert result.row_count == 3


def test_status_filter_excluded_type_not_tallied(gate):
    data = {WALLET_A: [{"type": "BRIDGEOUT", "status": "failed"}, {"type": "SEND", "status": "failed"}]}
    result = _projector(gate).project_status_filtered(data, "failed")

    assert result.status_counts.failed == 1
    assert result.transaction_count == 1


def test_status_filter_structured_status_counts_as_unknown(gate):
    data = {WALLET_A: [{"type": "SWAP", "status": {"code": 1}}, {"type": "SEND", "status": "pending"}]}
    result = _projector(gate).project_status_filtered(data, "all")

    assert result.transaction_count == 2
    assert result.status_counts.to_dict() == {"validated": 0, "pending": 1, "failed": 0, "unknown": 1}


def test_invalid_status_filter_raises(gate, transactions_by_wallet):
    from backend_txreport.core.exceptions import InvalidStatusFilterError

    with pytest.raises(InvalidStatusFilterError):
        _projector(gate).project_status_filtered(transactions_by_wallet, "done")


# --- type-filtered view ---


def test_type_filter_raw_case_sensitive(gate, swap_tx, transfer_in_tx):
    data = {WALLET_A: [swap_tx, transfer_in_tx]}
    projector = _projector(gate)

    assert projector.project_type_filtered(data, ["swap"]).transaction_count == 0
    swaps = projector.project_type_filtered(data, ["SWAP"])
    assert swaps.transaction_count == 1
    assert [r.direction for r in swaps.rows] == ["OUT", "IN"]

    both = projector.project_type_filtered(data, ["SWAP", "TRANSFERIN"])
    assert both.transaction_count == 2
    assert [r.field_no for r in both.rows] == [1, 2, 3]


def test_type_filter_cannot_bypass_exclusion(gate, claim_tx):
    result = _projector(gate).project_type_filtered({WALLET_A: [claim_tx]}, ["claim"])
    assert result.transaction_count == 0
    assert result.rows == []


# --- on-chain view ---


def test_onchain_claim_one_row_per_asset(gate, claim_tx):
    result = _projector(gate).project_onchain({WALLET_A: [claim_tx]})

    assert result.transaction_count == 1
    assert result.type_breakdown == {"CLAIM": 1}
    op_row, usdc_row = result.rows
    assert (op_row.field_no, usdc_row.field_no) == (1, 2)
    assert (op_row.currency, op_row.quantity) == ("OP", "5")
    assert op_row.wallet_to == WALLET_A
    assert op_row.wallet_from == "0xdistributor"
    assert usdc_row.wallet_from == "0xtreasury"
    assert op_row.transaction_type == "claim"
    assert op_row.timestamp == "01/03/2024 00:00:00"


def test_onchain_bridgeout_uses_assets_out(gate):
    tx = {
        "type": "BRIDGEOUT",
        "hash": "0xbridge",
        "protocol": {"address": "0xbridgecontract"},
        "assetsOut": [{"symbol": "ETH", "balance": "1"}, {"symbol": "USDT", "balance": "50", "to": "0xdest"}],
    }
    rows = _projector(gate).project_onchain({WALLET_A: [tx]}).rows

    assert [r.currency for r in rows] == ["ETH", "USDT"]
    assert rows[0].wallet_from == WALLET_A
    assert rows[0].wallet_to == "0xbridgecontract"
    assert rows[1].wallet_to == "0xdest"


def test_onchain_fallback_row_without_assets(gate):
    tx = {"type": "BridgeIn", "hash": "0xempty", "to": "0xto"}
    rows = _projector(gate).project_onchain({WALLET_A: [tx]}).rows

    assert len(rows) == 1
    row = rows[0]
    assert (row.currency, row.quantity) == ("N/A", "0")
    assert row.wallet_to == "0xto"
    assert row.wallet_from == "N/A"
    assert row.transaction_type == "BridgeIn"


def test_onchain_ignores_other_types_and_numbers_contiguously(gate, swap_tx, claim_tx):
    data = {WALLET_A: [swap_tx, claim_tx], WALLET_B: [claim_tx, {"type": "BRIDGEOUT"}]}
    result = _projector(gate).project_onchain(data)

    assert result.transaction_count == 3
    assert result.type_breakdown == {"CLAIM": 2, "BRIDGEOUT": 1}
    assert [r.field_no for r in result.rows] == [1, 2, 3, 4, 5]
