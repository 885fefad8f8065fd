"""
Environment variable loading for TxReport.

- OCTAV_API_KEY: Octav API key (required for fetching)
- OCTAV_BASE_URL: API base URL (default: https://api.octav.fi)
- WALLET_ADDRESSES: comma-separated wallets for scheduled reports
- REPORT_OUTPUT_DIR: where report files are written (default: ./reports)
- REPORT_SCHEDULE: cron expression for the daily report (default: 0 9 * * *)
- HIDE_SPAM: hide spam transactions upstream (default: true)
- EXCLUDED_TRANSACTION_TYPES: types dropped from general views (default: BRIDGEIN,BRIDGEOUT,CLAIM)
- SLACK_WEBHOOK_URL, EMAIL_SMTP_HOST/PORT/USERNAME/PASSWORD, EMAIL_FROM, EMAIL_TO: notifications
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# config is backend_txreport/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_OCTAV_BASE_URL = "https://api.octav.fi"
DEFAULT_REPORT_OUTPUT_DIR = "./reports"
DEFAULT_REPORT_SCHEDULE = "0 9 * * *"
DEFAULT_EXCLUDED_TRANSACTION_TYPES = ("BRIDGEIN", "BRIDGEOUT", "CLAIM")
DEFAULT_SMTP_PORT = 587
DEFAULT_API_PORT = 3000

_TRUE_VALUES = ("1", "true", "yes", "on")


def load_txreport_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _get_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in _TRUE_VALUES


def get_octav_api_key() -> str:
    """Return OCTAV_API_KEY, or empty string when unset."""
    load_txreport_env()
    return (os.getenv("OCTAV_API_KEY") or "").strip()


def get_octav_base_url() -> str:
    load_txreport_env()
    return (os.getenv("OCTAV_BASE_URL") or DEFAULT_OCTAV_BASE_URL).strip().rstrip("/")


def get_wallet_addresses() -> list[str]:
    """Return WALLET_ADDRESSES as a list (comma-separated in env)."""
    load_txreport_env()
    return _split_csv(os.getenv("WALLET_ADDRESSES") or "")


def get_report_output_dir() -> str:
    load_txreport_env()
    return (os.getenv("REPORT_OUTPUT_DIR") or DEFAULT_REPORT_OUTPUT_DIR).strip()


def get_report_schedule() -> str:
    load_txreport_env()
    return (os.getenv("REPORT_SCHEDULE") or DEFAULT_REPORT_SCHEDULE).strip()


def get_hide_spam() -> bool:
    """HIDE_SPAM is true unless explicitly set to 'false'."""
    load_txreport_env()
    return (os.getenv("HIDE_SPAM") or "").strip().lower() != "false"


def get_excluded_transaction_types() -> list[str]:
    """
    Return EXCLUDED_TRANSACTION_TYPES upper-cased.
    Unset falls back to BRIDGEIN,BRIDGEOUT,CLAIM; an explicit empty value means no exclusions.
    """
    load_txreport_env()
    raw = os.getenv("EXCLUDED_TRANSACTION_TYPES")
    if raw is None:
        return list(DEFAULT_EXCLUDED_TRANSACTION_TYPES)
    return [t.upper() for t in _split_csv(raw)]


def get_slack_webhook_url() -> str:
    load_txreport_env()
    return (os.getenv("SLACK_WEBHOOK_URL") or "").strip()


def get_smtp_host() -> str:
    load_txreport_env()
    return (os.getenv("EMAIL_SMTP_HOST") or "").strip()


def get_smtp_port() -> int:
    load_txreport_env()
    raw = (os.getenv("EMAIL_SMTP_PORT") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_SMTP_PORT
    except ValueError:
        return DEFAULT_SMTP_PORT


def get_smtp_username() -> str:
    load_txreport_env()
    return (os.getenv("EMAIL_USERNAME") or "").strip()


def get_smtp_password() -> str:
    load_txreport_env()
    return os.getenv("EMAIL_PASSWORD") or ""


def get_email_sender() -> str:
    """EMAIL_FROM, falling back to the SMTP username."""
    load_txreport_env()
    return (os.getenv("EMAIL_FROM") or "").strip() or get_smtp_username()


def get_email_recipients() -> list[str]:
    load_txreport_env()
    return _split_csv(os.getenv("EMAIL_TO") or "")


def get_scheduler_enabled() -> bool:
    """SCHEDULER_ENABLED (default: true) starts cron jobs with the API server."""
    load_txreport_env()
    return _get_bool("SCHEDULER_ENABLED", True)


def get_api_port() -> int:
    load_txreport_env()
    raw = (os.getenv("PORT") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_API_PORT
    except ValueError:
        return DEFAULT_API_PORT
