"""
Pytest fixtures for TxReport tests: sample Octav transactions, an isolated
environment, a temporary output dir and a FastAPI TestClient with mocked services.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

WALLET_A = "0xaaa0000000000000000000000000000000000001"
WALLET_B = "0xbbb0000000000000000000000000000000000002"

TXREPORT_ENV_VARS = (
    "OCTAV_API_KEY",
    "OCTAV_BASE_URL",
    "WALLET_ADDRESSES",
    "REPORT_OUTPUT_DIR",
    "REPORT_SCHEDULE",
    "HIDE_SPAM",
    "EXCLUDED_TRANSACTION_TYPES",
    "SLACK_WEBHOOK_URL",
    "EMAIL_SMTP_HOST",
    "EMAIL_SMTP_PORT",
    "EMAIL_USERNAME",
    "EMAIL_PASSWORD",
    "EMAIL_FROM",
    "EMAIL_TO",
    "SCHEDULER_ENABLED",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every TxReport variable and stop .env from being read."""
    for name in TXREPORT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("backend_txreport.config.env.load_txreport_env", lambda: None)
    return monkeypatch


@pytest.fixture
def swap_tx():
    """Dual-sided swap: 100 USDC out, 0.05 ETH in."""
    return {
        "type": "SWAP",
        "timestamp": "1704067200",
        "hash": "0xswap",
        "from": WALLET_A,
        "to": "0xrouter",
        "fees": "0.002",
        "blockNumber": 19000000,
        "chain": {"name": "Ethereum", "key": "ethereum"},
        "protocol": {"name": "Uniswap"},
        "status": "success",
        "confirmed": True,
        "value": "100",
        "assetsOut": [{"symbol": "USDC", "balance": "100", "value": "100"}],
        "assetsIn": [{"symbol": "ETH", "balance": "0.05", "value": "99.5"}],
    }


@pytest.fixture
def transfer_in_tx():
    return {
        "type": "TRANSFERIN",
        "timestamp": 1704153600,
        "hash": "0xtransfer",
        "from": "0xsender",
        "to": WALLET_A,
        "chain": {"key": "arbitrum"},
        "status": "pending",
        "value": "25.5",
        "assetsIn": [{"name": "Arbitrum", "balance": "10", "value": "25.5"}],
    }


@pytest.fixture
def claim_tx():
    """CLAIM of two assets through a distributor contract."""
    return {
        "type": "claim",
        "timestamp": "1704240000",
        "hash": "0xclaim",
        "chain": {"name": "Optimism"},
        "interactingAddresses": ["0xdistributor"],
        "value": "7",
        "assetsIn": [
            {"symbol": "OP", "balance": "5", "value": "6"},
            {"symbol": "USDC", "balance": "1", "value": "1", "from": "0xtreasury"},
        ],
    }


@pytest.fixture
def transactions_by_wallet(swap_tx, transfer_in_tx, claim_tx):
    return {
        WALLET_A: [swap_tx, transfer_in_tx, claim_tx],
        WALLET_B: {"error": "HTTP 500"},
    }


@pytest.fixture
def gate():
    from backend_txreport.projection.type_gate import TypeGate

    return TypeGate(["BRIDGEIN", "BRIDGEOUT", "CLAIM"])


@pytest.fixture
def generator(tmp_path, gate):
    from backend_txreport.reports.generator import ReportGenerator

    return ReportGenerator(tmp_path / "reports", gate)


@pytest.fixture
def mock_services(tmp_path, gate, generator):
    """Services stand-in: real generator and gate, mocked client and scheduler."""
    from backend_txreport.config.settings import Settings

    services = MagicMock()
    services.settings = Settings(
        octav_api_key="test-key",
        wallet_addresses=(WALLET_A, WALLET_B),
        report_output_dir=str(tmp_path / "reports"),
        scheduler_enabled=False,
    )
    services.gate = gate
    services.generator = generator
    return services


@pytest.fixture
def client(mock_services):
    """FastAPI TestClient with get_services overridden."""
    from fastapi.testclient import TestClient

    from backend_txreport.api_server.server import app, get_services

    app.dependency_overrides[get_services] = lambda: mock_services
    yield TestClient(app)
    app.dependency_overrides.clear()
