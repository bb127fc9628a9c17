"""
Unit tests for the pawaPay API client.
"""
import json
from typing import Any, Callable, List

import httpx
import pytest

from config import Settings
from integrations.pawapay_client import GatewayError, GatewayOk, PawapayClient


def make_client(
    test_settings: Settings,
    handler: Callable[[httpx.Request], httpx.Response],
) -> PawapayClient:
    return PawapayClient.from_settings(test_settings, transport=httpx.MockTransport(handler))


class TestPawapayClient:
    """Test suite for PawapayClient."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_predict_provider_success(self, test_settings: Settings) -> None:
        """Successful calls return the decoded body and carry the bearer token."""
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"country": "ZMB", "provider": "MTN_MOMO_ZMB", "phoneNumber": "260763456789"},
            )

        client = make_client(test_settings, handler)
        result = await client.predict_provider("+260 763-456789")
        await client.aclose()

        assert isinstance(result, GatewayOk)
        assert result.data["provider"] == "MTN_MOMO_ZMB"
        assert result.to_dict() == {"success": True, "data": result.data}

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.sandbox.pawapay.io/v2/predict-provider"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert json.loads(request.content) == {"phoneNumber": "+260 763-456789"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_returns_upstream_body(self, test_settings: Settings) -> None:
        """Non-2xx responses surface the upstream error body verbatim."""
        error_body = {
            "status": "REJECTED",
            "failureReason": {"failureCode": "INVALID_PHONE_NUMBER", "failureMessage": "bad"},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json=error_body)

        client = make_client(test_settings, handler)
        result = await client.initiate_deposit({"depositId": "abc"})
        await client.aclose()

        assert isinstance(result, GatewayError)
        assert result.error == error_body
        assert result.status_code == 400
        assert result.to_dict() == {"success": False, "error": error_body}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_with_text_body(self, test_settings: Settings) -> None:
        """Non-JSON error bodies are passed through as text."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="Service Unavailable")

        client = make_client(test_settings, handler)
        result = await client.fetch_active_conf()
        await client.aclose()

        assert isinstance(result, GatewayError)
        assert result.error == "Service Unavailable"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_without_body(self, test_settings: Settings) -> None:
        """An empty error body falls back to a generic message."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        client = make_client(test_settings, handler)
        result = await client.initiate_payout({"payoutId": "abc"})
        await client.aclose()

        assert isinstance(result, GatewayError)
        assert result.error == "initiate_payout failed with HTTP 500"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_transport_error(self, test_settings: Settings) -> None:
        """Network failures are converted, never raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(test_settings, handler)
        result = await client.initiate_refund({"refundId": "abc", "depositId": "def"})
        await client.aclose()

        assert isinstance(result, GatewayError)
        assert result.error == "connection refused"
        assert result.status_code is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_success_body(self, test_settings: Settings) -> None:
        """A 2xx response that is not JSON is reported as a failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        client = make_client(test_settings, handler)
        result = await client.fetch_active_conf()
        await client.aclose()

        assert isinstance(result, GatewayError)
        assert result.error == "fetch_active_conf returned a malformed response"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method_name,path",
        [
            ("check_deposit_status", "/v2/deposits/"),
            ("check_payout_status", "/v2/payouts/"),
            ("check_refund_status", "/v2/refunds/"),
        ],
    )
    async def test_status_lookups(
        self, test_settings: Settings, method_name: str, path: str
    ) -> None:
        """Status lookups GET the resource by ID."""
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"status": "COMPLETED"}])

        client = make_client(test_settings, handler)
        result: Any = await getattr(client, method_name)("8917c345-4791-4285-a416-62f24b6982db")
        await client.aclose()

        assert isinstance(result, GatewayOk)
        assert seen[0].method == "GET"
        assert seen[0].url.path == path + "8917c345-4791-4285-a416-62f24b6982db"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_wallet_balances_country_filter(self, test_settings: Settings) -> None:
        """The country filter is sent as a query parameter only when given."""
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"balances": []})

        client = make_client(test_settings, handler)
        await client.fetch_wallet_balances("ZMB")
        await client.fetch_wallet_balances()
        await client.aclose()

        assert seen[0].url.path == "/v2/wallet-balances"
        assert seen[0].url.params["country"] == "ZMB"
        assert "country" not in seen[1].url.params
