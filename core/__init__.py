"""Core orchestration logic."""
from .currency import resolve_currency
from .orchestrator import TransactionOrchestrator
from .results import (
    Failure,
    FailureKind,
    PersistenceFailure,
    ResolutionFailure,
    SubmissionOutcome,
    Submitted,
    UpstreamFailure,
    ValidationFailure,
)

__all__ = [
    "Failure",
    "FailureKind",
    "PersistenceFailure",
    "ResolutionFailure",
    "SubmissionOutcome",
    "Submitted",
    "TransactionOrchestrator",
    "UpstreamFailure",
    "ValidationFailure",
    "resolve_currency",
]
