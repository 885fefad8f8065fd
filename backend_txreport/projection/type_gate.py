"""
Transaction type exclusion.

The exclusion set is injected at construction and compared upper-cased;
a missing type is seen as 'unknown'.
"""

from __future__ import annotations

from collections.abc import Iterable

from backend_txreport.projection.models import Transaction


class TypeGate:
    """Admits every transaction whose upper-cased type is not excluded."""

    def __init__(self, excluded_types: Iterable[str] = ()) -> None:
        self.excluded_types = frozenset(str(t).upper() for t in excluded_types)

    def admits(self, tx: Transaction) -> bool:
        return tx.type_label.upper() not in self.excluded_types

    def __repr__(self) -> str:
        return f"TypeGate(excluded_types={sorted(self.excluded_types)!r})"
