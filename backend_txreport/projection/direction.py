"""
Direction classification from asset presence.
"""

from __future__ import annotations

from enum import Enum

from backend_txreport.projection.fields import PLACEHOLDER
from backend_txreport.projection.models import Transaction


class Direction(Enum):
    DUAL = "DUAL"
    IN = "IN"
    OUT = "OUT"
    NONE = PLACEHOLDER

    @property
    def label(self) -> str:
        return self.value


def has_both_assets(tx: Transaction) -> bool:
    return bool(tx.assets_in) and bool(tx.assets_out)


def classify_direction(tx: Transaction) -> Direction:
    """DUAL when both sides carry assets, otherwise IN, OUT or NONE (N/A)."""
    if has_both_assets(tx):
        return Direction.DUAL
    if tx.assets_in:
        return Direction.IN
    if tx.assets_out:
        return Direction.OUT
    return Direction.NONE
