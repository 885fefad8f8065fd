"""
Transaction status classification and the status filter.

validated requires both a confirmation signal and a success status; an
absent status counts as success but still needs confirmation.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_txreport.core.exceptions import InvalidStatusFilterError
from backend_txreport.projection.fields import parse_number, resolve
from backend_txreport.projection.models import Transaction

STATUS_VALIDATED = "validated"
STATUS_PENDING = "pending"
STATUS_FAILED = "failed"
STATUS_UNKNOWN = "unknown"

FILTER_ALL = "all"
VALID_STATUS_FILTERS = (STATUS_VALIDATED, STATUS_PENDING, STATUS_FAILED, FILTER_ALL)

PENDING_STATUSES = frozenset({"pending", "processing"})
FAILED_STATUSES = frozenset({"failed", "error", "reverted"})
DEFAULT_STATUS = "success"


def _is_confirmed(tx: Transaction) -> bool:
    if tx.confirmed is True:
        return True
    confirmations = parse_number(tx.confirmations)
    return confirmations is not None and confirmations > 0


def classify_status(tx: Transaction) -> str:
    """Return validated, pending, failed or unknown."""
    status = resolve(tx.status, default=DEFAULT_STATUS)
    if _is_confirmed(tx) and status == DEFAULT_STATUS:
        return STATUS_VALIDATED
    if not isinstance(status, str):
        return STATUS_UNKNOWN
    if status in PENDING_STATUSES:
        return STATUS_PENDING
    if status in FAILED_STATUSES:
        return STATUS_FAILED
    return STATUS_UNKNOWN


def validate_status_filter(value: str) -> str:
    """Return value if it is a known filter, else raise InvalidStatusFilterError."""
    if value not in VALID_STATUS_FILTERS:
        raise InvalidStatusFilterError(value, VALID_STATUS_FILTERS)
    return value


def status_matches(status: str, status_filter: str) -> bool:
    return status_filter == FILTER_ALL or status == status_filter


@dataclass
class StatusCounts:
    """Tally of classified statuses over admitted transactions."""

    validated: int = 0
    pending: int = 0
    failed: int = 0
    unknown: int = 0

    def add(self, status: str) -> None:
        setattr(self, status, getattr(self, status) + 1)

    def to_dict(self) -> dict[str, int]:
        return {
            STATUS_VALIDATED: self.validated,
            STATUS_PENDING: self.pending,
            STATUS_FAILED: self.failed,
            STATUS_UNKNOWN: self.unknown,
        }
