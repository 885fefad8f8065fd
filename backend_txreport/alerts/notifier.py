"""
Report notifications: Slack incoming webhook and SMTP email.

Channels without configuration are skipped. A delivery failure on one
channel is logged and the other channels are still attempted; nothing here
raises into the report job.
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from typing import Any

import requests

from backend_txreport.config.settings import Settings
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

SLACK_TIMEOUT = 10
SMTP_TIMEOUT = 30
SUCCESS_COLOR = "#36a64f"
ERROR_COLOR = "#ff0000"


@dataclass
class NotificationConfig:
    """Delivery settings; empty values disable the channel."""

    slack_webhook_url: str = ""
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = field(default="", repr=False)
    email_sender: str = ""
    email_recipients: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> NotificationConfig:
        return cls(
            slack_webhook_url=settings.slack_webhook_url,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            email_sender=settings.email_sender,
            email_recipients=settings.email_recipients,
        )

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack_webhook_url)

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.email_recipients)


def build_report_message(report: dict[str, Any], report_type: str) -> dict[str, Any]:
    """Slack payload summarising a generated report."""
    summary = report.get("summary") or {}
    return {
        "text": f"{report_type.capitalize()} Transaction Report Generated",
        "attachments": [
            {
                "color": SUCCESS_COLOR,
                "fields": [
                    {"title": "Total Transactions", "value": str(summary.get("totalTransactions", 0)), "short": True},
                    {"title": "Total Volume", "value": f"{float(summary.get('totalVolume', 0.0)):.2f}", "short": True},
                    {"title": "Unique Tokens", "value": str(summary.get("uniqueTokens", 0)), "short": True},
                    {"title": "Chains", "value": str(len(summary.get("chains") or [])), "short": True},
                ],
            }
        ],
    }


def build_error_message(error: BaseException, report_type: str) -> dict[str, Any]:
    return {
        "text": f"Error generating {report_type} report",
        "attachments": [
            {
                "color": ERROR_COLOR,
                "fields": [
                    {"title": "Error", "value": str(error), "short": False},
                    {"title": "Timestamp", "value": datetime.now(timezone.utc).isoformat(), "short": True},
                ],
            }
        ],
    }


def _message_as_text(message: dict[str, Any]) -> str:
    lines = [message["text"], ""]
    for attachment in message.get("attachments", []):
        for item in attachment.get("fields", []):
            lines.append(f"{item['title']}: {item['value']}")
    return "\n".join(lines)


class Notifier:
    """Sends report and error notifications to the configured channels."""

    def __init__(self, config: NotificationConfig | None = None) -> None:
        self.config = config or NotificationConfig()

    def send_slack(self, message: dict[str, Any]) -> bool:
        if not self.config.slack_enabled:
            return False
        try:
            r = requests.post(self.config.slack_webhook_url, json=message, timeout=SLACK_TIMEOUT)
            r.raise_for_status()
        except requests.RequestException as e:
            logger.error("slack_notification_failed", error=str(e))
            return False
        logger.info("slack_notification_sent", text=message.get("text"))
        return True

    def send_email(self, subject: str, body: str) -> bool:
        cfg = self.config
        if not cfg.email_enabled:
            return False
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = cfg.email_sender or cfg.smtp_username
        msg["To"] = ", ".join(cfg.email_recipients)
        msg.set_content(body)
        try:
            with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=SMTP_TIMEOUT) as smtp:
                smtp.starttls()
                if cfg.smtp_username:
                    smtp.login(cfg.smtp_username, cfg.smtp_password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_notification_failed", error=str(e), host=cfg.smtp_host)
            return False
        logger.info("email_notification_sent", subject=subject, recipients=len(cfg.email_recipients))
        return True

    def send_report_notifications(self, report: dict[str, Any], report_type: str) -> dict[str, bool]:
        """Notify every configured channel about a finished report."""
        message = build_report_message(report, report_type)
        return {
            "slack": self.send_slack(message),
            "email": self.send_email(message["text"], _message_as_text(message)),
        }

    def send_error_notification(self, error: BaseException, report_type: str) -> dict[str, bool]:
        message = build_error_message(error, report_type)
        return {
            "slack": self.send_slack(message),
            "email": self.send_email(message["text"], _message_as_text(message)),
        }
