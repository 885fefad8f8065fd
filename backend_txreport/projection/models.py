"""
Read-only views over Octav transaction records.

Transaction.from_api() never raises: anything that is not a mapping is
treated as an empty record, and every field keeps its raw value so the
views decide how to render it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from backend_txreport.projection.fields import UNKNOWN, resolve


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


@dataclass(frozen=True)
class Asset:
    """One entry of assetsIn / assetsOut."""

    symbol: Any = None
    name: Any = None
    balance: Any = None
    value: Any = None
    to: Any = None
    from_: Any = None

    @classmethod
    def from_api(cls, raw: Any) -> Asset:
        data = _mapping(raw)
        return cls(
            symbol=data.get("symbol"),
            name=data.get("name"),
            balance=data.get("balance"),
            value=data.get("value"),
            to=data.get("to"),
            from_=data.get("from"),
        )


@dataclass(frozen=True)
class Transaction:
    """One wallet transaction as returned by Octav /v1/transactions."""

    type: Any = None
    timestamp: Any = None
    date: Any = None
    assets_in: tuple[Asset, ...] = ()
    assets_out: tuple[Asset, ...] = ()
    status: Any = None
    confirmed: Any = None
    confirmations: Any = None
    block_number: Any = None
    hash: Any = None
    from_: Any = None
    to: Any = None
    fees: Any = None
    value: Any = None
    chain: Any = None
    protocol: Mapping[str, Any] = field(default_factory=dict)
    token: Mapping[str, Any] | None = None
    interacting_addresses: tuple[Any, ...] = ()

    @classmethod
    def from_api(cls, raw: Any) -> Transaction:
        data = _mapping(raw)
        token = data.get("token")
        return cls(
            type=data.get("type"),
            timestamp=data.get("timestamp"),
            date=data.get("date"),
            assets_in=tuple(Asset.from_api(a) for a in _sequence(data.get("assetsIn"))),
            assets_out=tuple(Asset.from_api(a) for a in _sequence(data.get("assetsOut"))),
            status=data.get("status"),
            confirmed=data.get("confirmed"),
            confirmations=data.get("confirmations"),
            block_number=resolve(data.get("blockNumber"), data.get("block_number"), default=None),
            hash=resolve(data.get("hash"), data.get("transactionHash"), default=None),
            from_=data.get("from"),
            to=data.get("to"),
            fees=data.get("fees"),
            value=data.get("value"),
            chain=data.get("chain"),
            protocol=_mapping(data.get("protocol")),
            token=token if isinstance(token, Mapping) else None,
            interacting_addresses=tuple(_sequence(data.get("interactingAddresses"))),
        )

    @property
    def type_label(self) -> str:
        """Raw type, or 'unknown' when missing. Case is preserved."""
        return str(resolve(self.type, default=UNKNOWN))

    @property
    def when(self) -> Any:
        """timestamp, falling back to date."""
        return resolve(self.timestamp, self.date, default=None)

    @property
    def chain_label(self) -> str:
        """chain.name, chain.key, a plain string chain, or 'unknown'."""
        if isinstance(self.chain, Mapping):
            return str(resolve(self.chain.get("name"), self.chain.get("key"), default=UNKNOWN))
        return str(resolve(self.chain, default=UNKNOWN))
