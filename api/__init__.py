"""FastAPI application and routes."""
from .main import app, create_app
from .schemas import (
    GatewayResponse,
    RefundRequest,
    SubmissionResponse,
    TransactionListResponse,
    TransactionRequest,
)

__all__ = [
    "app",
    "create_app",
    "GatewayResponse",
    "RefundRequest",
    "SubmissionResponse",
    "TransactionListResponse",
    "TransactionRequest",
]
