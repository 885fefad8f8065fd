"""
Application-level exceptions.

Caller-facing validation errors are raised before any processing starts.
Malformed upstream records never raise; they fall back to placeholders.
"""

from __future__ import annotations


class TxReportError(Exception):
    """Base class for TxReport errors."""


class ReportValidationError(TxReportError, ValueError):
    """Invalid caller input (filter value, date, report parameters)."""


class InvalidStatusFilterError(ReportValidationError):
    def __init__(self, value: str, valid: tuple[str, ...]) -> None:
        self.value = value
        self.valid = valid
        super().__init__(
            f"Invalid status filter: {value!r}. Valid options: {', '.join(valid)}"
        )


class InvalidDateError(ReportValidationError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Invalid date format: {value!r}. Use YYYY-MM-DD, YYYY-MM-DD HH:mm, "
            "YYYY-MM-DD HH:mm:ss or ISO 8601"
        )


class ConfigError(TxReportError):
    """Required configuration is missing (API key, wallet list)."""


class OctavApiError(TxReportError):
    """Octav API request failed after retries."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
