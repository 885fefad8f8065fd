"""
Octav API client.

Thin requests wrapper around the Octav REST API: transactions, portfolios,
chains and status. Requests retry on 429, 5xx and connection errors; batch
helpers turn a failing wallet into an error marker
({"error": "..."}) and carry on with the next one.
"""

from __future__ import annotations

import time
from typing import Any

import requests

from backend_txreport.core.exceptions import ConfigError, OctavApiError
from backend_txreport.txreport_logging import bind_wallet, get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_DELAY_SEC = 2.0
TRANSACTIONS_PAGE_LIMIT = 250
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _param(value: Any) -> Any:
    # query strings want lowercase booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class OctavClient:
    """Blocking client for https://api.octav.fi."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.octav.fi",
        hide_spam: bool = True,
        session: requests.Session | None = None,
        retry_delay: float = RETRY_DELAY_SEC,
    ) -> None:
        if not api_key:
            raise ConfigError("Octav API key is required (OCTAV_API_KEY)")
        self.base_url = base_url.rstrip("/")
        self.hide_spam = hide_spam
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        query = {k: _param(v) for k, v in (params or {}).items() if v is not None}
        last_error = ""
        status_code: int | None = None
        for attempt in range(MAX_RETRIES):
            try:
                r = self.session.get(url, params=query, timeout=REQUEST_TIMEOUT)
            except requests.RequestException as e:
                last_error = str(e)
                logger.warning("octav_request_error", path=path, attempt=attempt + 1, error=last_error)
                if attempt < MAX_RETRIES - 1:
                    time.sleep(self.retry_delay)
                continue
            status_code = r.status_code
            if status_code in RETRYABLE_STATUS:
                last_error = f"HTTP {status_code}"
                logger.warning("octav_retryable_status", path=path, attempt=attempt + 1, status=status_code)
                if attempt < MAX_RETRIES - 1:
                    time.sleep(self.retry_delay)
                continue
            if status_code >= 400:
                raise OctavApiError(f"GET {path} failed: HTTP {status_code}", status_code=status_code)
            try:
                return r.json()
            except ValueError as e:
                raise OctavApiError(f"GET {path} returned invalid JSON: {e}", status_code=status_code) from e
        raise OctavApiError(
            f"GET {path} failed after {MAX_RETRIES} attempts: {last_error}",
            status_code=status_code,
        )

    def get_transactions(self, address: str, **options: Any) -> list[dict[str, Any]]:
        """
        GET /v1/transactions for one wallet.

        options are passed through as query params (startDate, endDate, limit, ...).
        """
        params: dict[str, Any] = {
            "addresses": address,
            "limit": TRANSACTIONS_PAGE_LIMIT,
            "offset": 0,
            "hideSpam": self.hide_spam,
        }
        params.update(options)
        logger.debug("octav_get_transactions", wallet_id=address, params=params)
        data = self._get("/v1/transactions", params)
        if isinstance(data, dict) and "transactions" in data:
            return data["transactions"]
        return data

    def get_portfolio(self, address: str) -> dict[str, Any]:
        return self._get(f"/v1/portfolio/{address}")

    def get_supported_chains(self) -> Any:
        return self._get("/chains")

    def get_status(self) -> dict[str, Any]:
        """API status and remaining credits."""
        return self._get("/status")

    def get_batch_transactions(self, addresses: list[str], **options: Any) -> dict[str, Any]:
        """Transactions per wallet; a failed wallet maps to {"error": message}."""
        results: dict[str, Any] = {}
        for address in addresses:
            wallet_log = bind_wallet(address, __name__)
            try:
                transactions = self.get_transactions(address, **options)
            except OctavApiError as e:
                wallet_log.error("octav_batch_transactions_failed", error=str(e))
                results[address] = {"error": str(e)}
                continue
            count = len(transactions) if isinstance(transactions, list) else None
            wallet_log.info("octav_batch_transactions_fetched", count=count)
            results[address] = transactions
        return results

    def get_batch_portfolios(self, addresses: list[str]) -> dict[str, Any]:
        """Portfolio per wallet; a failed wallet maps to {"error": message}."""
        results: dict[str, Any] = {}
        for address in addresses:
            try:
                results[address] = self.get_portfolio(address)
            except OctavApiError as e:
                bind_wallet(address, __name__).error("octav_batch_portfolio_failed", error=str(e))
                results[address] = {"error": str(e)}
        return results
