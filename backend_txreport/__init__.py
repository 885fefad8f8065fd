"""
Backend TxReport: wallet transaction reporting service.

Fetches wallet transaction history from the Octav API, projects it into
tabular report views (full, status-filtered, type-filtered, on-chain) and
publishes CSV/JSON/HTML reports on a schedule or on demand through the API.
"""

__version__ = "0.1.0"
