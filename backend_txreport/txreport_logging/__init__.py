"""
Structured logging for TxReport. Import get_logger from here in every module.
"""

from backend_txreport.txreport_logging.logger import bind_wallet, get_logger

__all__ = ["bind_wallet", "get_logger"]
