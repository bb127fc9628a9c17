"""
Health checks for liveness/readiness probes.

Checks:
- Transaction log database connectivity
- pawaPay API reachability
"""
from typing import TYPE_CHECKING, Any, Dict

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

if TYPE_CHECKING:
    from integrations.pawapay_client import PawapayClient

logger = structlog.get_logger(__name__)


class HealthCheckError(Exception):
    """Raised when health check fails."""

    pass


class HealthCheck:
    """
    Health check service for monitoring system dependencies.

    Provides:
    - Database connectivity check
    - pawaPay API reachability check
    - Overall system health status
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        gateway: "PawapayClient",
    ) -> None:
        """
        Initialize health check service.

        Args:
            session_factory: Session factory of the transaction log database
            gateway: pawaPay API client
        """
        self.session_factory = session_factory
        self.gateway = gateway

    async def check_database(self) -> Dict[str, Any]:
        """
        Check database connectivity.

        Raises:
            HealthCheckError: If database check fails
        """
        try:
            async with self.session_factory() as db:
                result = await db.execute(text("SELECT 1"))
                result.scalar()
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            raise HealthCheckError(f"Database health check failed: {str(e)}")

        return {
            "status": "healthy",
            "service": "database",
            "message": "Database connection successful",
        }

    async def check_pawapay(self) -> Dict[str, Any]:
        """
        Check pawaPay API reachability with an active-conf lookup.

        Raises:
            HealthCheckError: If pawaPay check fails
        """
        result = await self.gateway.fetch_active_conf()
        if not result.success:
            logger.error("pawapay_health_check_failed", error=result.error)
            raise HealthCheckError(f"pawaPay health check failed: {result.error}")

        return {
            "status": "healthy",
            "service": "pawapay",
            "message": "pawaPay API reachable",
        }

    async def check_all(self) -> Dict[str, Any]:
        """
        Run all health checks.

        Returns:
            Dict[str, Any]: Overall health status
        """
        checks = {}
        all_healthy = True

        for name, check in (("database", self.check_database), ("pawapay", self.check_pawapay)):
            try:
                checks[name] = await check()
            except HealthCheckError as e:
                checks[name] = {
                    "status": "unhealthy",
                    "service": name,
                    "error": str(e),
                }
                all_healthy = False

        return {
            "status": "healthy" if all_healthy else "unhealthy",
            "checks": checks,
        }

    async def liveness(self) -> Dict[str, Any]:
        """
        Liveness probe.

        Does not check external dependencies.
        """
        return {
            "status": "alive",
            "message": "Application is running",
        }

    async def readiness(self) -> Dict[str, Any]:
        """Readiness probe; verifies all dependencies are available."""
        return await self.check_all()
