"""
Tests for the summary aggregator.
"""

from __future__ import annotations

from tests.conftest import WALLET_A, WALLET_B


def test_summary_skips_excluded_types():
    from backend_txreport.projection.summary import summarize
    from backend_txreport.projection.type_gate import TypeGate

    data = {WALLET_A: [{"type": "SWAP", "value": "10"}, {"type": "EXCLUDED_TYPE", "value": "5"}]}
    summary = summarize(data, TypeGate(["EXCLUDED_TYPE"]))

    assert summary.total_transactions == 1
    assert summary.total_volume == 10.0
    assert dict(summary.transaction_types) == {"SWAP": 1}


def test_summary_over_fixture(gate, transactions_by_wallet):
    from backend_txreport.projection.summary import summarize

    summary = summarize(transactions_by_wallet, gate)
    out = summary.to_dict()

    assert out["totalTransactions"] == 2
    assert out["totalVolume"] == 125.5
    assert out["uniqueTokens"] == 2
    assert out["chains"] == ["Ethereum", "arbitrum"]
    assert out["transactionTypes"] == {"SWAP": 1, "TRANSFERIN": 1}
    assert out["topTokens"] == [{"token": "ETH", "count": 1}, {"token": "Arbitrum", "count": 1}]


def test_summary_token_object_and_non_numeric_value(gate):
    from backend_txreport.projection.summary import summarize

    data = {
        WALLET_A: [
            {"type": "SEND", "value": "n/a", "token": {"address": "0xtoken", "symbol": "TKN"}},
            {"type": "SEND", "token": {"symbol": "TKN"}},
        ]
    }
    summary = summarize(data, gate)

    assert summary.total_volume == 0.0
    assert summary.unique_tokens == {"0xtoken", "TKN"}
    assert summary.to_dict()["topTokens"] == [{"token": "TKN", "count": 2}]
    assert summary.chains == []


def test_summary_top_tokens_use_symbol_not_address(gate):
    from backend_txreport.projection.summary import summarize

    data = {
        WALLET_A: [
            {"type": "SEND", "token": {"address": "0xtoken", "symbol": "TKN"}},
            {"type": "SEND", "token": {"address": "0xother"}},
        ]
    }
    summary = summarize(data, gate).to_dict()

    assert summary["uniqueTokens"] == 2
    assert summary["topTokens"] == [{"token": "TKN", "count": 1}, {"token": "0xother", "count": 1}]


def test_summary_top_lists_truncate_and_order():
    from backend_txreport.projection.summary import summarize
    from backend_txreport.projection.type_gate import TypeGate

    txs = []
    for i in range(12):
        for _ in range(i + 1):
            txs.append({"type": "SEND", "chain": f"chain{i}", "assetsIn": [{"symbol": f"T{i}"}]})
    summary = summarize({WALLET_A: txs, WALLET_B: {"error": "x"}}, TypeGate())

    assert len(summary.top_tokens) == 10
    assert summary.top_tokens[0] == ("T11", 12)
    assert len(summary.top_chains) == 5
    assert [c for c, _ in summary.top_chains] == ["chain11", "chain10", "chain9", "chain8", "chain7"]


def test_summary_ties_keep_first_seen_order():
    from backend_txreport.projection.summary import summarize
    from backend_txreport.projection.type_gate import TypeGate

    txs = [{"assetsIn": [{"symbol": s}]} for s in ("B", "A", "C")]
    summary = summarize({WALLET_A: txs}, TypeGate())
    assert [t for t, _ in summary.top_tokens] == ["B", "A", "C"]
