"""
Service wiring: builds the client, generator, notifier and scheduler from Settings.

Used by the API server, main.py and the command-line tools. The Octav client
is created on first use so commands that never fetch run without an API key.
"""

from __future__ import annotations

from functools import cached_property

from backend_txreport.alerts.notifier import NotificationConfig, Notifier
from backend_txreport.config.settings import Settings, get_settings
from backend_txreport.octav.client import OctavClient
from backend_txreport.projection.type_gate import TypeGate
from backend_txreport.reports.generator import ReportGenerator
from backend_txreport.scheduler.engine import ReportScheduler, SchedulerConfig


class Services:
    """Lazily constructed application services for one Settings snapshot."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @cached_property
    def gate(self) -> TypeGate:
        return TypeGate(self.settings.excluded_transaction_types)

    @cached_property
    def client(self) -> OctavClient:
        """Raises ConfigError when OCTAV_API_KEY is missing."""
        return OctavClient(
            api_key=self.settings.octav_api_key,
            base_url=self.settings.octav_base_url,
            hide_spam=self.settings.hide_spam,
        )

    @cached_property
    def generator(self) -> ReportGenerator:
        return ReportGenerator(self.settings.report_output_dir, self.gate)

    @cached_property
    def notifier(self) -> Notifier:
        return Notifier(NotificationConfig.from_settings(self.settings))

    @cached_property
    def scheduler(self) -> ReportScheduler:
        return ReportScheduler(
            client=self.client,
            generator=self.generator,
            notifier=self.notifier,
            wallets=list(self.settings.wallet_addresses),
            config=SchedulerConfig(daily_cron=self.settings.report_schedule),
        )


def build_services(settings: Settings | None = None) -> Services:
    return Services(settings or get_settings())
