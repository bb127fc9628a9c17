"""
pawaPay API client.

Every call against the upstream API goes through ``PawapayClient``. Transport
and HTTP failures never escape as exceptions: each operation returns either
``GatewayOk`` carrying the decoded body or ``GatewayError`` carrying the
upstream error body (or a generic message when there is none). There is no
retry, circuit breaking or timeout beyond the transport default.
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import httpx
import structlog

from config import Settings
from monitoring.metrics import metrics

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GatewayOk:
    """Successful upstream call."""

    data: Any
    success = True
    http_status = 200

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class GatewayError:
    """Failed upstream call, with the upstream error body when available."""

    error: Any
    status_code: Optional[int] = None
    success = False
    http_status = 502

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error}


GatewayResult = Union[GatewayOk, GatewayError]


class PawapayClient:
    """
    Thin async wrapper around the pawaPay v2 API.

    One method per upstream endpoint. The underlying ``httpx.AsyncClient``
    carries the base URL and bearer token, and may be supplied by the caller
    (tests pass one built on ``httpx.MockTransport``).
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """
        Initialize the client.

        Args:
            http_client: HTTP client already configured with base URL and auth
        """
        self._http = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "PawapayClient":
        """
        Build a client pointed at the configured pawaPay environment.

        Args:
            settings: Application settings
            transport: Optional transport override

        Returns:
            PawapayClient: Configured client
        """
        http_client = httpx.AsyncClient(
            base_url=settings.pawapay_base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {settings.pawapay_api_token}",
            },
            transport=transport,
        )
        logger.info(
            "pawapay_client_initialized",
            base_url=settings.pawapay_base_url,
            sandbox=settings.is_sandbox,
        )
        return cls(http_client)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    @staticmethod
    def _error_body(response: httpx.Response, operation: str) -> Any:
        """Extract the upstream error body, falling back to text or a generic message."""
        try:
            body = response.json()
        except ValueError:
            body = response.text.strip()
        if body:
            return body
        return f"{operation} failed with HTTP {response.status_code}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> GatewayResult:
        """
        Issue one upstream call and normalise the outcome.

        Args:
            operation: Operation name used for logs and metrics
            method: HTTP method
            path: Path relative to the base URL
            **kwargs: Passed through to ``httpx.AsyncClient.request``

        Returns:
            GatewayResult: ``GatewayOk`` or ``GatewayError``
        """
        start_time = time.time()
        logger.info("pawapay_request_started", operation=operation, method=method, path=path)

        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            metrics.record_pawapay_api_call(operation, "transport_error", time.time() - start_time)
            logger.error(
                "pawapay_transport_error",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            return GatewayError(error=str(e) or f"{operation} failed: {type(e).__name__}")

        duration = time.time() - start_time

        if response.is_error:
            error = self._error_body(response, operation)
            metrics.record_pawapay_api_call(operation, "http_error", duration)
            logger.warning(
                "pawapay_request_rejected",
                operation=operation,
                status_code=response.status_code,
                error=error,
            )
            return GatewayError(error=error, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            metrics.record_pawapay_api_call(operation, "malformed", duration)
            logger.error(
                "pawapay_malformed_response",
                operation=operation,
                status_code=response.status_code,
            )
            return GatewayError(
                error=f"{operation} returned a malformed response",
                status_code=response.status_code,
            )

        metrics.record_pawapay_api_call(operation, "success", duration)
        logger.info(
            "pawapay_request_completed",
            operation=operation,
            status_code=response.status_code,
            duration_seconds=duration,
        )
        return GatewayOk(data=data)

    async def predict_provider(self, phone_number: str) -> GatewayResult:
        """Resolve a phone number to its provider, country and sanitized form."""
        return await self._request(
            "predict_provider", "POST", "/v2/predict-provider", json={"phoneNumber": phone_number}
        )

    async def fetch_active_conf(self) -> GatewayResult:
        """Fetch the country/provider/currency support matrix."""
        return await self._request("fetch_active_conf", "GET", "/v2/active-conf")

    async def initiate_deposit(self, payload: Dict[str, Any]) -> GatewayResult:
        """Create a deposit (collect funds from a payer)."""
        return await self._request("initiate_deposit", "POST", "/v2/deposits", json=payload)

    async def initiate_payout(self, payload: Dict[str, Any]) -> GatewayResult:
        """Create a payout (send funds to a recipient)."""
        return await self._request("initiate_payout", "POST", "/v2/payouts", json=payload)

    async def initiate_refund(self, payload: Dict[str, Any]) -> GatewayResult:
        """Create a refund of a prior deposit."""
        return await self._request("initiate_refund", "POST", "/v2/refunds", json=payload)

    async def check_deposit_status(self, deposit_id: str) -> GatewayResult:
        return await self._request(
            "check_deposit_status", "GET", f"/v2/deposits/{quote(deposit_id, safe='')}"
        )

    async def check_payout_status(self, payout_id: str) -> GatewayResult:
        return await self._request(
            "check_payout_status", "GET", f"/v2/payouts/{quote(payout_id, safe='')}"
        )

    async def check_refund_status(self, refund_id: str) -> GatewayResult:
        return await self._request(
            "check_refund_status", "GET", f"/v2/refunds/{quote(refund_id, safe='')}"
        )

    async def fetch_wallet_balances(self, country: Optional[str] = None) -> GatewayResult:
        """
        Fetch wallet balances.

        Args:
            country: Optional ISO 3166-1 alpha-3 country filter

        Returns:
            GatewayResult: Balances on success
        """
        params = {"country": country} if country else None
        return await self._request(
            "fetch_wallet_balances", "GET", "/v2/wallet-balances", params=params
        )
