"""
Token/value extraction from a transaction's asset lists.

General views only ever read the first asset of the chosen side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_txreport.projection.fields import PLACEHOLDER, ZERO, resolve
from backend_txreport.projection.models import Asset, Transaction

SIDE_IN = "in"
SIDE_OUT = "out"
SIDE_AUTO = "auto"
SIDES = (SIDE_IN, SIDE_OUT, SIDE_AUTO)


@dataclass(frozen=True)
class TokenInfo:
    token: Any = PLACEHOLDER
    value: Any = ZERO
    value_fiat: Any = ZERO


def asset_token_info(asset: Asset) -> TokenInfo:
    """Token is symbol then name; balance and value pass through unparsed."""
    return TokenInfo(
        token=resolve(asset.symbol, asset.name),
        value=resolve(asset.balance, default=ZERO),
        value_fiat=resolve(asset.value, default=ZERO),
    )


def extract_token_info(tx: Transaction, side: str = SIDE_AUTO) -> TokenInfo:
    """
    Extract token, quantity and fiat value from one side of tx.

    in/out read the first asset of that side; auto prefers assetsIn and falls
    back to assetsOut. An empty side yields the N/A / "0" / "0" defaults.
    """
    if side == SIDE_IN:
        candidates = tx.assets_in
    elif side == SIDE_OUT:
        candidates = tx.assets_out
    elif side == SIDE_AUTO:
        candidates = tx.assets_in or tx.assets_out
    else:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    if not candidates:
        return TokenInfo()
    return asset_token_info(candidates[0])
