"""
API routes for the sandbox tester.
"""
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from core.orchestrator import TransactionOrchestrator
from core.results import SubmissionOutcome
from database.transaction_log import TransactionLog, TransactionLogError
from integrations.pawapay_client import GatewayResult
from monitoring.health import HealthCheck

from .schemas import (
    GatewayResponse,
    HealthCheckResponse,
    RefundRequest,
    SubmissionResponse,
    TransactionListResponse,
    TransactionLookupResponse,
    TransactionRequest,
)

logger = structlog.get_logger(__name__)

# Create routers
api_router = APIRouter(prefix="/api", tags=["sandbox"])
monitoring_router = APIRouter(tags=["monitoring"])


def get_orchestrator(request: Request) -> TransactionOrchestrator:
    """Orchestrator built at startup."""
    return request.app.state.orchestrator


def get_transaction_log(request: Request) -> TransactionLog:
    """Transaction log built at startup."""
    return request.app.state.transaction_log


def get_health_check(request: Request) -> HealthCheck:
    """Health check service built at startup."""
    return request.app.state.health_check


def _outcome_response(outcome: SubmissionOutcome) -> JSONResponse:
    return JSONResponse(status_code=outcome.http_status, content=outcome.to_dict())


def _gateway_response(result: GatewayResult) -> JSONResponse:
    return JSONResponse(status_code=result.http_status, content=result.to_dict())


def _log_unavailable(error: TransactionLogError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(error)},
    )


@api_router.post(
    "/deposit",
    response_model=SubmissionResponse,
    summary="Send a deposit",
    description="Predict provider, resolve currency, create the deposit and log it",
)
async def create_deposit(
    body: TransactionRequest,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Collect funds from the payer's mobile money wallet."""
    outcome = await orchestrator.submit_transaction("deposit", body.phone_number, body.amount)
    return _outcome_response(outcome)


@api_router.post(
    "/payout",
    response_model=SubmissionResponse,
    summary="Send a payout",
    description="Predict provider, resolve currency, create the payout and log it",
)
async def create_payout(
    body: TransactionRequest,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Send funds to the recipient's mobile money wallet."""
    outcome = await orchestrator.submit_transaction("payout", body.phone_number, body.amount)
    return _outcome_response(outcome)


@api_router.post(
    "/refund",
    response_model=SubmissionResponse,
    summary="Refund a deposit",
    description="Create a full or partial refund of a deposit and log it",
)
async def create_refund(
    body: RefundRequest,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Refund a deposit; omit amount for a full refund."""
    outcome = await orchestrator.submit_refund(body.deposit_id, body.amount)
    return _outcome_response(outcome)


@api_router.get(
    "/active-conf",
    response_model=GatewayResponse,
    summary="Active configuration",
    description="Countries, providers and currencies enabled on the pawaPay account",
)
async def active_conf(
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    return _gateway_response(await orchestrator.fetch_active_conf())


@api_router.get(
    "/deposit-status/{deposit_id}",
    response_model=GatewayResponse,
    summary="Deposit status",
)
async def deposit_status(
    deposit_id: str,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    return _gateway_response(await orchestrator.check_status("deposit", deposit_id))


@api_router.get(
    "/payout-status/{payout_id}",
    response_model=GatewayResponse,
    summary="Payout status",
)
async def payout_status(
    payout_id: str,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    return _gateway_response(await orchestrator.check_status("payout", payout_id))


@api_router.get(
    "/refund-status/{refund_id}",
    response_model=GatewayResponse,
    summary="Refund status",
)
async def refund_status(
    refund_id: str,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    return _gateway_response(await orchestrator.check_status("refund", refund_id))


@api_router.get(
    "/wallet-balances",
    response_model=GatewayResponse,
    summary="Wallet balances",
    description="Wallet balances, optionally filtered by ISO 3166-1 alpha-3 country",
)
async def wallet_balances(
    country: Optional[str] = None,
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    return _gateway_response(await orchestrator.fetch_wallet_balances(country or None))


@api_router.get(
    "/transactions",
    response_model=TransactionListResponse,
    summary="Transaction history",
    description="Every logged deposit, payout and refund, newest first",
)
async def list_transactions(
    transaction_log: TransactionLog = Depends(get_transaction_log),
) -> Any:
    try:
        records = await transaction_log.list_all()
    except TransactionLogError as e:
        return _log_unavailable(e)
    return {"success": True, "data": [record.to_dict() for record in records]}


@api_router.get(
    "/transactions/{transaction_id}",
    response_model=TransactionLookupResponse,
    summary="Transaction lookup",
    description="Find a logged transaction by its deposit, payout or refund ID",
)
async def get_transaction(
    transaction_id: str,
    transaction_log: TransactionLog = Depends(get_transaction_log),
) -> Any:
    try:
        record = await transaction_log.find_by_any_identifier(transaction_id)
    except TransactionLogError as e:
        return _log_unavailable(e)

    if record is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": f"Transaction {transaction_id} not found"},
        )
    return {"success": True, "data": record.to_dict()}


@monitoring_router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check",
    description="Check overall system health",
)
async def health(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return await health_check.check_all()


@monitoring_router.get(
    "/health/live",
    response_model=HealthCheckResponse,
    summary="Liveness probe",
)
async def liveness(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Liveness probe endpoint."""
    return await health_check.liveness()


@monitoring_router.get(
    "/health/ready",
    response_model=HealthCheckResponse,
    summary="Readiness probe",
)
async def readiness(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Readiness probe endpoint."""
    result = await health_check.readiness()
    if result["status"] != "healthy":
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result)
    return result


@monitoring_router.get(
    "/metrics",
    summary="Prometheus metrics",
    include_in_schema=False,
)
async def prometheus_metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
