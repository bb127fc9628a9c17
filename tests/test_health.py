"""
Unit tests for health checks.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from database.connection import create_session_factory
from integrations.pawapay_client import GatewayError
from monitoring.health import HealthCheck

from .conftest import FakePawapayClient


class TestHealthCheck:
    """Test suite for HealthCheck."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_all_healthy(
        self, log_engine: AsyncEngine, fake_gateway: FakePawapayClient
    ) -> None:
        health = HealthCheck(create_session_factory(log_engine), fake_gateway)  # type: ignore[arg-type]

        result = await health.check_all()

        assert result["status"] == "healthy"
        assert result["checks"]["database"]["status"] == "healthy"
        assert result["checks"]["pawapay"]["status"] == "healthy"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_pawapay_unreachable(
        self, log_engine: AsyncEngine, fake_gateway: FakePawapayClient
    ) -> None:
        fake_gateway.results["fetch_active_conf"] = GatewayError("connection refused")
        health = HealthCheck(create_session_factory(log_engine), fake_gateway)  # type: ignore[arg-type]

        result = await health.readiness()

        assert result["status"] == "unhealthy"
        assert result["checks"]["database"]["status"] == "healthy"
        assert "connection refused" in result["checks"]["pawapay"]["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_liveness(
        self, log_engine: AsyncEngine, fake_gateway: FakePawapayClient
    ) -> None:
        health = HealthCheck(create_session_factory(log_engine), fake_gateway)  # type: ignore[arg-type]

        assert (await health.liveness())["status"] == "alive"
        assert fake_gateway.calls == []
