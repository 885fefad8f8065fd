"""
Tests for the command-line tools (services mocked, real generator).
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from tests.conftest import WALLET_A


def _services(generator, transactions):
    from backend_txreport.config.settings import Settings

    services = MagicMock()
    services.settings = Settings(octav_api_key="k", wallet_addresses=(WALLET_A,))
    services.generator = generator
    services.scheduler.fetch_report_data.return_value = {"transactions": transactions, "portfolios": {}}
    services.client.get_batch_transactions.return_value = transactions
    return services


def test_generate_report_tool(generator, transactions_by_wallet, capsys):
    from backend_txreport.tools import generate_report

    services = _services(generator, transactions_by_wallet)
    with patch.object(generate_report, "build_services", return_value=services):
        assert generate_report.main(["custom", "2024-01-01", "2024-01-31"]) == 0
    out = capsys.readouterr().out
    assert "Total transactions: 2" in out
    assert "2024-01-01 to 2024-01-31" in out


def test_status_tool_rejects_bad_filter_before_fetch(generator):
    from backend_txreport.tools import generate_status_filtered_report as tool

    services = _services(generator, {})
    with patch.object(tool, "build_services", return_value=services):
        assert tool.main(["confirmed"]) == 1
    services.scheduler.fetch_report_data.assert_not_called()


def test_status_tool(generator, transactions_by_wallet, capsys):
    from backend_txreport.tools import generate_status_filtered_report as tool

    with patch.object(tool, "build_services", return_value=_services(generator, transactions_by_wallet)):
        assert tool.main(["all", "last7days"]) == 0
    assert "Total filtered transactions: 2" in capsys.readouterr().out


def test_type_tool(generator, transactions_by_wallet, capsys):
    from backend_txreport.tools import generate_type_filtered_report as tool

    with patch.object(tool, "build_services", return_value=_services(generator, transactions_by_wallet)):
        assert tool.main(["SWAP,TRANSFERIN", "daily"]) == 0
    assert "SWAP, TRANSFERIN" in capsys.readouterr().out


def test_onchain_tool(generator, transactions_by_wallet, capsys):
    from backend_txreport.tools import generate_onchain_report as tool

    services = _services(generator, transactions_by_wallet)
    with patch.object(tool, "build_services", return_value=services):
        assert tool.main(["--start-date", "2024-01-01", "--end-date", "2024-01-31"]) == 0
    out = capsys.readouterr().out
    assert "CLAIM: 1" in out
    services.client.get_batch_transactions.assert_called_once_with(
        [WALLET_A], startDate="2024-01-01", endDate="2024-01-31"
    )


def test_report_scheduler_run_now(generator):
    from backend_txreport.tools import report_scheduler as tool

    services = MagicMock()
    services.scheduler.trigger_report.return_value = {"summary": {}}
    with patch.object(tool, "build_services", return_value=services):
        assert tool.main(["--run-now", "monthly"]) == 0
    services.scheduler.trigger_report.assert_called_once_with("monthly")
