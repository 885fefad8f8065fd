"""
Application settings assembled from the environment.

get_settings() returns a frozen Settings snapshot. Components take the
values they need explicitly (exclusion set, output dir, API key) instead of
reading the environment themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_txreport.config import env


@dataclass(frozen=True)
class Settings:
    """Typed snapshot of TxReport configuration."""

    octav_api_key: str = ""
    octav_base_url: str = env.DEFAULT_OCTAV_BASE_URL
    wallet_addresses: tuple[str, ...] = ()
    report_output_dir: str = env.DEFAULT_REPORT_OUTPUT_DIR
    report_schedule: str = env.DEFAULT_REPORT_SCHEDULE
    hide_spam: bool = True
    excluded_transaction_types: tuple[str, ...] = env.DEFAULT_EXCLUDED_TRANSACTION_TYPES
    slack_webhook_url: str = ""
    smtp_host: str = ""
    smtp_port: int = env.DEFAULT_SMTP_PORT
    smtp_username: str = ""
    smtp_password: str = field(default="", repr=False)
    email_sender: str = ""
    email_recipients: tuple[str, ...] = ()
    scheduler_enabled: bool = True
    api_port: int = env.DEFAULT_API_PORT


def get_settings() -> Settings:
    """Return the current application settings, read from env (and .env)."""
    return Settings(
        octav_api_key=env.get_octav_api_key(),
        octav_base_url=env.get_octav_base_url(),
        wallet_addresses=tuple(env.get_wallet_addresses()),
        report_output_dir=env.get_report_output_dir(),
        report_schedule=env.get_report_schedule(),
        hide_spam=env.get_hide_spam(),
        excluded_transaction_types=tuple(env.get_excluded_transaction_types()),
        slack_webhook_url=env.get_slack_webhook_url(),
        smtp_host=env.get_smtp_host(),
        smtp_port=env.get_smtp_port(),
        smtp_username=env.get_smtp_username(),
        smtp_password=env.get_smtp_password(),
        email_sender=env.get_email_sender(),
        email_recipients=tuple(env.get_email_recipients()),
        scheduler_enabled=env.get_scheduler_enabled(),
        api_port=env.get_api_port(),
    )
