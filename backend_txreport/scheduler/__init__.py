"""
Report scheduling (APScheduler cron jobs).
"""

from backend_txreport.scheduler.engine import ReportScheduler, SchedulerConfig  # noqa: F401

__all__ = ["ReportScheduler", "SchedulerConfig"]
