"""
Thin HTTP client for the Noves Translate and Pricing APIs.

All methods are read-only and map Noves errors to internal exceptions that the
tool layer can turn into safe, user-facing messages.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from noves_mcp.config import NovesConfig, default_config
from noves_mcp.models import TokenPrice, Transaction

logger = logging.getLogger(__name__)


class NovesApiError(Exception):
    """Base exception for Noves API errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class UnauthorizedError(NovesApiError):
    """Raised when the API rejects the request due to a missing or invalid key."""


class NotFoundError(NovesApiError):
    """Raised when the chain, transaction, or token is unknown to the API."""


class RateLimitedError(NovesApiError):
    """Raised when the API throttles the caller."""


class ProviderUnreachableError(NovesApiError):
    """Raised when the API cannot be reached."""


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class NovesApiClient:
    """Async client for the Noves endpoints used by the tool layer."""

    def __init__(
        self,
        config: NovesConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.config.api_key:
            headers["apiKey"] = self.config.api_key
        return headers

    def _map_error(self, status_code: int, message: Optional[str] = None) -> NovesApiError:
        detail = f" {message}" if message else ""
        if status_code in {401, 403}:
            return UnauthorizedError(
                "Unauthorized or API key required.", code=message, status_code=status_code
            )
        if status_code == 404:
            return NotFoundError(f"Resource not found.{detail}", code=message, status_code=status_code)
        if status_code == 429:
            return RateLimitedError(
                "Rate limited by Noves API.", code=message, status_code=status_code
            )
        return NovesApiError(f"Noves API error.{detail}", code=message, status_code=status_code)

    def _process_response(self, response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            message_field: Optional[str] = None
            if isinstance(data, dict):
                for key in ("message", "error", "detail"):
                    raw_message = data.get(key)
                    if isinstance(raw_message, str) and raw_message:
                        message_field = raw_message
                        break
            raise self._map_error(response.status_code, message=message_field)

        if data is None:
            raise NovesApiError("Unexpected response from provider.", status_code=response.status_code)
        return data

    async def _request(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(url, params=params, headers=self._build_headers())
        except httpx.RequestError as exc:
            logger.warning("Noves API unreachable for url %s", url)
            raise ProviderUnreachableError("Provider unreachable") from exc
        return self._process_response(response)

    def _translate_url(self, path: str) -> str:
        return f"{_normalize_url(self.config.translate_base_url)}{path}"

    def _pricing_url(self, path: str) -> str:
        return f"{_normalize_url(self.config.pricing_base_url)}{path}"

    async def fetch_recent_transactions(self, chain: str, wallet_or_address: str) -> List[Transaction]:
        """Retrieve the most recent classified transactions for an account."""
        data = await self._request(
            self._translate_url(f"/evm/{_segment(chain)}/txs/{_segment(wallet_or_address)}")
        )
        items = data.get("items") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise NovesApiError("Unexpected response from provider.")
        return [Transaction.from_payload(item) for item in items]

    async def fetch_translated_transaction(self, chain: str, transaction_hash: str) -> Transaction:
        """Retrieve the classification of a single transaction."""
        data = await self._request(
            self._translate_url(f"/evm/{_segment(chain)}/tx/{_segment(transaction_hash)}")
        )
        if not isinstance(data, dict):
            raise NovesApiError("Unexpected response from provider.")
        return Transaction.from_payload(data)

    async def fetch_token_price(
        self, chain: str, token_address: str, timestamp: Optional[str] = None
    ) -> TokenPrice:
        """Retrieve a token price, current when ``timestamp`` is omitted."""
        params: Dict[str, Any] = {}
        if timestamp is not None:
            params["timestamp"] = timestamp
        data = await self._request(
            self._pricing_url(f"/evm/{_segment(chain)}/price/{_segment(token_address)}"),
            params=params or None,
        )
        if not isinstance(data, dict):
            raise NovesApiError("Unexpected response from provider.")
        return TokenPrice.from_payload(data)


default_client = NovesApiClient()
