"""
Pytest configuration and fixtures.
"""
import copy
import os
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

os.environ.setdefault("PAWAPAY_API_TOKEN", "test-token")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from api.main import create_app
from api.routes import get_health_check, get_orchestrator, get_transaction_log
from config import Settings
from core.orchestrator import TransactionOrchestrator
from database.connection import create_engine_for_url, create_session_factory, init_db
from database.transaction_log import TransactionLog
from integrations.pawapay_client import GatewayOk, GatewayResult
from monitoring.health import HealthCheck

PREDICTION: Dict[str, Any] = {
    "country": "ZMB",
    "provider": "MTN_MOMO_ZMB",
    "phoneNumber": "260763456789",
}

ACTIVE_CONF: Dict[str, Any] = {
    "companyName": "Sandbox Merchant",
    "countries": [
        {
            "country": "ZMB",
            "providers": [
                {
                    "provider": "MTN_MOMO_ZMB",
                    "currencies": [
                        {
                            "currency": "ZMW",
                            "operationTypes": {
                                "DEPOSIT": {"minAmount": "1", "maxAmount": "5000"},
                                "PAYOUT": {"minAmount": "1", "maxAmount": "5000"},
                            },
                        }
                    ],
                },
                {
                    "provider": "AIRTEL_OAPI_ZMB",
                    "currencies": [
                        {
                            "currency": "ZMW",
                            "operationTypes": {
                                "PAYOUT": {"minAmount": "1", "maxAmount": "5000"},
                            },
                        }
                    ],
                },
            ],
        }
    ],
}


class FakePawapayClient:
    """In-memory stand-in for PawapayClient that records every call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.results: Dict[str, GatewayResult] = {
            "predict_provider": GatewayOk(copy.deepcopy(PREDICTION)),
            "fetch_active_conf": GatewayOk(copy.deepcopy(ACTIVE_CONF)),
            "initiate_deposit": GatewayOk({"status": "ACCEPTED"}),
            "initiate_payout": GatewayOk({"status": "ACCEPTED"}),
            "initiate_refund": GatewayOk({"status": "ACCEPTED"}),
            "check_deposit_status": GatewayOk({"status": "FOUND", "data": {"status": "COMPLETED"}}),
            "check_payout_status": GatewayOk({"status": "FOUND", "data": {"status": "COMPLETED"}}),
            "check_refund_status": GatewayOk({"status": "FOUND", "data": {"status": "COMPLETED"}}),
            "fetch_wallet_balances": GatewayOk({"balances": [{"country": "ZMB", "balance": "100.00"}]}),
        }

    def _answer(self, operation: str, argument: Any = None) -> GatewayResult:
        self.calls.append((operation, argument))
        return self.results[operation]

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    def argument_of(self, operation: str) -> Any:
        return next(argument for name, argument in self.calls if name == operation)

    async def predict_provider(self, phone_number: str) -> GatewayResult:
        return self._answer("predict_provider", phone_number)

    async def fetch_active_conf(self) -> GatewayResult:
        return self._answer("fetch_active_conf")

    async def initiate_deposit(self, payload: Dict[str, Any]) -> GatewayResult:
        return self._answer("initiate_deposit", payload)

    async def initiate_payout(self, payload: Dict[str, Any]) -> GatewayResult:
        return self._answer("initiate_payout", payload)

    async def initiate_refund(self, payload: Dict[str, Any]) -> GatewayResult:
        return self._answer("initiate_refund", payload)

    async def check_deposit_status(self, deposit_id: str) -> GatewayResult:
        return self._answer("check_deposit_status", deposit_id)

    async def check_payout_status(self, payout_id: str) -> GatewayResult:
        return self._answer("check_payout_status", payout_id)

    async def check_refund_status(self, refund_id: str) -> GatewayResult:
        return self._answer("check_refund_status", refund_id)

    async def fetch_wallet_balances(self, country: Optional[str] = None) -> GatewayResult:
        return self._answer("fetch_wallet_balances", country)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings."""
    return Settings(
        pawapay_api_token="test-token",
        pawapay_base_url="https://api.sandbox.pawapay.io",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'transactions.db'}",
        app_name="pawapay-sandbox-tester-test",
        app_env="test",
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def log_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, Any]:
    """Engine over a fresh SQLite file with the schema created."""
    engine = create_engine_for_url(test_settings.database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def transaction_log(log_engine: AsyncEngine) -> TransactionLog:
    """Transaction log backed by the test database."""
    return TransactionLog(create_session_factory(log_engine))


@pytest.fixture
def fake_gateway() -> FakePawapayClient:
    """Fake pawaPay client with happy-path answers."""
    return FakePawapayClient()


@pytest.fixture
def orchestrator(
    fake_gateway: FakePawapayClient, transaction_log: TransactionLog
) -> TransactionOrchestrator:
    """Orchestrator wired to the fake gateway and the test log."""
    return TransactionOrchestrator(fake_gateway, transaction_log)


@pytest_asyncio.fixture
async def client(
    test_settings: Settings,
    log_engine: AsyncEngine,
    fake_gateway: FakePawapayClient,
    orchestrator: TransactionOrchestrator,
    transaction_log: TransactionLog,
) -> AsyncGenerator[AsyncClient, Any]:
    """Create test HTTP client."""
    health_check = HealthCheck(create_session_factory(log_engine), fake_gateway)  # type: ignore[arg-type]

    app = create_app(test_settings)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_transaction_log] = lambda: transaction_log
    app.dependency_overrides[get_health_check] = lambda: health_check

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
