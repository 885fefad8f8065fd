"""
Tests for ReportScheduler: job registration, report runs and failure handling.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from tests.conftest import WALLET_A


def _scheduler(generator, client=None, notifier=None, wallets=(WALLET_A,), aps=None):
    from backend_txreport.scheduler.engine import ReportScheduler

    return ReportScheduler(
        client=client or MagicMock(),
        generator=generator,
        notifier=notifier or MagicMock(),
        wallets=list(wallets),
        scheduler=aps,
    )


def test_build_triggers_utc_jobs():
    from backend_txreport.scheduler.engine import SchedulerConfig, build_triggers

    triggers = build_triggers(SchedulerConfig())
    assert set(triggers) == {"daily", "weekly", "monthly"}
    assert str(triggers["daily"].timezone) == "UTC"


def test_start_registers_jobs_and_status():
    aps = MagicMock()
    aps.running = False
    scheduler = _scheduler(MagicMock(), aps=aps)

    scheduler.start()

    ids = [c.kwargs["id"] for c in aps.add_job.call_args_list]
    assert ids == ["daily", "weekly", "monthly"]
    aps.start.assert_called_once()


def test_generate_report_fetches_writes_and_notifies(generator, swap_tx):
    client = MagicMock()
    client.get_batch_transactions.return_value = {WALLET_A: [swap_tx]}
    client.get_batch_portfolios.return_value = {WALLET_A: {"assets": []}}
    notifier = MagicMock()

    report = _scheduler(generator, client=client, notifier=notifier).trigger_report("weekly")

    assert report["summary"]["totalTransactions"] == 1
    kwargs = client.get_batch_transactions.call_args.kwargs
    assert kwargs["startDate"].endswith("T00:00:00.000Z")
    assert kwargs["endDate"].endswith("T23:59:59.999Z")
    notifier.send_report_notifications.assert_called_once()
    notifier.send_error_notification.assert_not_called()


def test_generate_report_failure_sends_error_notification(generator):
    from backend_txreport.core.exceptions import ConfigError

    notifier = MagicMock()
    result = _scheduler(generator, notifier=notifier, wallets=()).generate_report("daily")

    assert result is None
    error, report_type = notifier.send_error_notification.call_args[0]
    assert isinstance(error, ConfigError)
    assert report_type == "daily"


def test_real_background_scheduler_start_stop(generator):
    scheduler = _scheduler(generator)
    scheduler.start()
    try:
        status = scheduler.get_status()
        assert set(status) == {"daily", "weekly", "monthly"}
        assert all(job["running"] for job in status.values())
        assert all(job["nextDate"].endswith("Z") for job in status.values())
    finally:
        scheduler.stop()
    assert not scheduler.running
    assert scheduler.get_status() == {}
