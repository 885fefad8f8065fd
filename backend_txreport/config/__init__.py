"""
Configuration for TxReport.

Loads settings from environment variables and an optional .env file.
"""

from backend_txreport.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
