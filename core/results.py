"""
Outcomes of a deposit, payout or refund submission.

A submission ends in exactly one of these variants. ``Submitted`` is the
happy path; every ``Failure`` subclass names one error category and carries
the step that failed together with whatever had been computed before it.
All variants serialize to the wire shape the dashboard renders.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union


class FailureKind(str, Enum):
    """Error categories a submission can fail with."""

    VALIDATION = "validation"
    UPSTREAM = "upstream"
    RESOLUTION = "resolution"
    PERSISTENCE = "persistence"


def _wire(success: bool, always: Dict[str, Any], **context: Any) -> Dict[str, Any]:
    """
    Build the camelCase payload.

    Keys in ``always`` are emitted even when their value is None, since an
    upstream body may legitimately be JSON null. Context that was never
    computed is left out.
    """
    payload: Dict[str, Any] = {"success": success}
    payload.update({key: value for key, value in context.items() if value is not None})
    payload.update(always)
    return payload


@dataclass(frozen=True)
class Submitted:
    """pawaPay accepted the operation and it was written to the log."""

    step: str
    request_sent: Dict[str, Any]
    response: Any
    predicted_provider: Optional[Dict[str, Any]] = None
    resolved_currency: Optional[str] = None

    success: ClassVar[bool] = True
    http_status: ClassVar[int] = 200

    def to_dict(self) -> Dict[str, Any]:
        return _wire(
            True,
            {"response": self.response},
            step=self.step,
            predictedProvider=self.predicted_provider,
            resolvedCurrency=self.resolved_currency,
            requestSent=self.request_sent,
        )


@dataclass(frozen=True)
class Failure:
    """Base for every failed submission."""

    step: str
    error: Any
    predicted_provider: Optional[Dict[str, Any]] = None
    resolved_currency: Optional[str] = None
    request_sent: Optional[Dict[str, Any]] = None
    response: Any = None

    kind: ClassVar[FailureKind]
    success: ClassVar[bool] = False
    http_status: ClassVar[int] = 500
    # Set on failures that happen after pawaPay answered
    has_response: ClassVar[bool] = False

    def to_dict(self) -> Dict[str, Any]:
        always = {"response": self.response} if self.has_response else {}
        return _wire(
            False,
            always,
            step=self.step,
            predictedProvider=self.predicted_provider,
            resolvedCurrency=self.resolved_currency,
            requestSent=self.request_sent,
            response=self.response,
            error=self.error,
        )


class ValidationFailure(Failure):
    """A user-supplied field was missing or invalid; nothing was sent upstream."""

    kind = FailureKind.VALIDATION
    http_status = 400


class UpstreamFailure(Failure):
    """pawaPay rejected the call or could not be reached."""

    kind = FailureKind.UPSTREAM
    http_status = 502


class ResolutionFailure(Failure):
    """No provider or currency could be resolved for the phone number."""

    kind = FailureKind.RESOLUTION
    http_status = 422


class PersistenceFailure(Failure):
    """pawaPay accepted the operation but the log write failed."""

    kind = FailureKind.PERSISTENCE
    http_status = 500
    has_response = True


SubmissionOutcome = Union[Submitted, Failure]
