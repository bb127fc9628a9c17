"""
Transaction orchestration.

Runs the deposit/payout flow as a short-circuiting pipeline:

1. Validate phone number and amount
2. Predict the provider for the phone number
3. Fetch active configuration and resolve the currency
4. Build the payload and submit it to pawaPay
5. Record the accepted operation in the transaction log

Each step either fills in the shared ``_Submission`` context or returns a
``Failure``; the first failure ends the run. Refunds use the same idea with
a shorter pipeline. Status and balance lookups are plain pass-throughs and
never touch the log.
"""
import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, Dict, List, Optional

import structlog

from core.currency import OPERATION_TYPES, resolve_currency
from core.results import (
    Failure,
    PersistenceFailure,
    ResolutionFailure,
    SubmissionOutcome,
    Submitted,
    UpstreamFailure,
    ValidationFailure,
)
from database.models import FULL_REFUND_AMOUNT, UNKNOWN_STATUS, TransactionRecord
from database.transaction_log import TransactionLog, TransactionLogError
from integrations.pawapay_client import GatewayError, GatewayResult, PawapayClient
from monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

STEP_VALIDATION = "validation"
STEP_PREDICT_PROVIDER = "predict-provider"
STEP_RESOLVE_CURRENCY = "resolve-currency"
STEP_REFUND = "refund"


def normalize_amount(amount: Any) -> Optional[str]:
    """
    Return the amount as the decimal string pawaPay expects.

    Strings are stripped and numbers stringified, then written out in plain
    positional notation (``"1e3"`` -> ``"1000"``, ``1e-07`` -> ``"0.0000001"``).
    Trailing zeros the caller wrote are kept.

    Returns:
        Optional[str]: The amount, or None if it is not a positive number
    """
    if isinstance(amount, bool) or amount is None:
        return None
    text = amount.strip() if isinstance(amount, str) else str(amount)
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0:
        return None
    return format(value, "f")


def _status_of(response: Any) -> str:
    """Status reported by pawaPay, or UNKNOWN when the body has none."""
    if isinstance(response, dict) and response.get("status"):
        return str(response["status"])
    return UNKNOWN_STATUS


@dataclass
class _Submission:
    """Context accumulated while a deposit or payout moves through the pipeline."""

    transaction_type: str
    phone_number: Any
    amount: Any
    normalized_amount: Optional[str] = None
    prediction: Optional[Dict[str, Any]] = None
    currency: Optional[str] = None
    transaction_id: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    response: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def provider(self) -> Optional[str]:
        return (self.prediction or {}).get("provider")

    @property
    def country(self) -> Optional[str]:
        return (self.prediction or {}).get("country")

    @property
    def sanitized_phone_number(self) -> Optional[str]:
        return (self.prediction or {}).get("phoneNumber") or self.phone_number


Step = Callable[[_Submission], Awaitable[Optional[Failure]]]


class TransactionOrchestrator:
    """
    Deposit, payout and refund orchestrator.

    The pawaPay client and the transaction log are injected so tests can
    substitute either.
    """

    def __init__(self, gateway: PawapayClient, transaction_log: TransactionLog) -> None:
        """
        Initialize orchestrator.

        Args:
            gateway: pawaPay API client
            transaction_log: Log that accepted operations are written to
        """
        self.gateway = gateway
        self.transaction_log = transaction_log

    async def _run(self, submission: _Submission, steps: List[Step]) -> Optional[Failure]:
        for step in steps:
            failure = await step(submission)
            if failure is not None:
                logger.warning(
                    "submission_failed",
                    transaction_type=submission.transaction_type,
                    step=failure.step,
                    failure_kind=failure.kind.value,
                    error=failure.error,
                )
                metrics.record_submission(
                    submission.transaction_type, failure.kind.value, failure.step
                )
                return failure
        return None

    # Deposit / payout steps

    async def _validate(self, submission: _Submission) -> Optional[Failure]:
        phone_number = submission.phone_number
        if isinstance(phone_number, str):
            phone_number = phone_number.strip()
        if not phone_number or submission.amount in (None, ""):
            return ValidationFailure(
                step=STEP_VALIDATION, error="phoneNumber and amount are required"
            )

        normalized_amount = normalize_amount(submission.amount)
        if normalized_amount is None:
            return ValidationFailure(
                step=STEP_VALIDATION, error="amount must be a positive number"
            )

        submission.phone_number = str(phone_number)
        submission.normalized_amount = normalized_amount
        return None

    async def _predict_provider(self, submission: _Submission) -> Optional[Failure]:
        result = await self.gateway.predict_provider(submission.phone_number)
        if isinstance(result, GatewayError):
            return UpstreamFailure(step=STEP_PREDICT_PROVIDER, error=result.error)

        if not isinstance(result.data, dict) or not result.data.get("provider"):
            return ResolutionFailure(
                step=STEP_PREDICT_PROVIDER,
                error=f"No provider predicted for {submission.phone_number}",
                predicted_provider=result.data if isinstance(result.data, dict) else None,
            )

        submission.prediction = result.data
        return None

    async def _resolve_currency(self, submission: _Submission) -> Optional[Failure]:
        result = await self.gateway.fetch_active_conf()
        if isinstance(result, GatewayError):
            return UpstreamFailure(
                step=STEP_RESOLVE_CURRENCY,
                predicted_provider=submission.prediction,
                error=result.error,
            )

        operation_type = OPERATION_TYPES[submission.transaction_type]
        currency = None
        if isinstance(result.data, dict):
            currency = resolve_currency(
                result.data, submission.provider, operation_type, submission.country
            )
        if not currency:
            return ResolutionFailure(
                step=STEP_RESOLVE_CURRENCY,
                predicted_provider=submission.prediction,
                error=f"No {operation_type} currency found for provider {submission.provider}",
            )

        submission.currency = currency
        return None

    async def _submit(self, submission: _Submission) -> Optional[Failure]:
        transaction_type = submission.transaction_type
        submission.transaction_id = str(uuid.uuid4())
        party = {
            "type": "MMO",
            "accountDetails": {
                "phoneNumber": submission.sanitized_phone_number,
                "provider": submission.provider,
            },
        }

        if transaction_type == "deposit":
            submission.payload = {
                "depositId": submission.transaction_id,
                "amount": submission.normalized_amount,
                "currency": submission.currency,
                "payer": party,
            }
            result = await self.gateway.initiate_deposit(submission.payload)
        else:
            submission.payload = {
                "payoutId": submission.transaction_id,
                "amount": submission.normalized_amount,
                "currency": submission.currency,
                "recipient": party,
            }
            result = await self.gateway.initiate_payout(submission.payload)

        if isinstance(result, GatewayError):
            return UpstreamFailure(
                step=transaction_type,
                predicted_provider=submission.prediction,
                resolved_currency=submission.currency,
                request_sent=submission.payload,
                error=result.error,
            )

        submission.response = result.data
        return None

    async def _record(self, submission: _Submission) -> Optional[Failure]:
        record = TransactionRecord(
            type=submission.transaction_type,
            amount=submission.normalized_amount,
            currency=submission.currency,
            phone_number=submission.sanitized_phone_number,
            provider=submission.provider,
            country=submission.country,
            status=_status_of(submission.response),
        )
        setattr(record, f"{submission.transaction_type}_id", submission.transaction_id)

        try:
            await self.transaction_log.append(record)
        except TransactionLogError as e:
            return PersistenceFailure(
                step=submission.transaction_type,
                predicted_provider=submission.prediction,
                resolved_currency=submission.currency,
                request_sent=submission.payload,
                response=submission.response,
                error=str(e),
            )
        return None

    async def submit_transaction(
        self, transaction_type: str, phone_number: Any, amount: Any
    ) -> SubmissionOutcome:
        """
        Submit a deposit or payout.

        Args:
            transaction_type: ``deposit`` or ``payout``
            phone_number: Payer/recipient phone number as typed by the operator
            amount: Positive amount, string or number

        Returns:
            SubmissionOutcome: ``Submitted`` or the first ``Failure``
        """
        if transaction_type not in OPERATION_TYPES:
            raise ValueError(f"Unsupported transaction type: {transaction_type!r}")

        submission = _Submission(
            transaction_type=transaction_type, phone_number=phone_number, amount=amount
        )
        logger.info("submission_started", transaction_type=transaction_type)

        failure = await self._run(
            submission,
            [
                self._validate,
                self._predict_provider,
                self._resolve_currency,
                self._submit,
                self._record,
            ],
        )
        if failure is not None:
            return failure

        metrics.record_submission(transaction_type, "success")
        logger.info(
            "submission_completed",
            transaction_type=transaction_type,
            transaction_id=submission.transaction_id,
            provider=submission.provider,
            currency=submission.currency,
            status=_status_of(submission.response),
        )
        return Submitted(
            step=transaction_type,
            predicted_provider=submission.prediction,
            resolved_currency=submission.currency,
            request_sent=submission.payload,
            response=submission.response,
        )

    # Refund steps

    async def _validate_refund(self, submission: _Submission) -> Optional[Failure]:
        deposit_id = submission.extra.get("deposit_id")
        if isinstance(deposit_id, str):
            deposit_id = deposit_id.strip()
        if not deposit_id:
            return ValidationFailure(step=STEP_VALIDATION, error="depositId is required")
        submission.extra["deposit_id"] = str(deposit_id)

        if submission.amount in (None, ""):
            return None
        normalized_amount = normalize_amount(submission.amount)
        if normalized_amount is None:
            return ValidationFailure(
                step=STEP_VALIDATION, error="amount must be a positive number"
            )
        submission.normalized_amount = normalized_amount
        return None

    async def _submit_refund(self, submission: _Submission) -> Optional[Failure]:
        submission.transaction_id = str(uuid.uuid4())
        submission.payload = {
            "refundId": submission.transaction_id,
            "depositId": submission.extra["deposit_id"],
        }
        if submission.normalized_amount is not None:
            submission.payload["amount"] = submission.normalized_amount

        result = await self.gateway.initiate_refund(submission.payload)
        if isinstance(result, GatewayError):
            return UpstreamFailure(
                step=STEP_REFUND, request_sent=submission.payload, error=result.error
            )

        submission.response = result.data
        return None

    async def _record_refund(self, submission: _Submission) -> Optional[Failure]:
        record = TransactionRecord(
            type="refund",
            refund_id=submission.transaction_id,
            amount=submission.normalized_amount or FULL_REFUND_AMOUNT,
            status=_status_of(submission.response),
        )
        try:
            await self.transaction_log.append(record)
        except TransactionLogError as e:
            return PersistenceFailure(
                step=STEP_REFUND,
                request_sent=submission.payload,
                response=submission.response,
                error=str(e),
            )
        return None

    async def submit_refund(self, deposit_id: Any, amount: Any = None) -> SubmissionOutcome:
        """
        Refund a prior deposit, in full when ``amount`` is omitted.

        Args:
            deposit_id: ID of the deposit to refund
            amount: Optional partial amount

        Returns:
            SubmissionOutcome: ``Submitted`` or the first ``Failure``
        """
        submission = _Submission(
            transaction_type="refund",
            phone_number=None,
            amount=amount,
            extra={"deposit_id": deposit_id},
        )
        logger.info("submission_started", transaction_type="refund")

        failure = await self._run(
            submission, [self._validate_refund, self._submit_refund, self._record_refund]
        )
        if failure is not None:
            return failure

        metrics.record_submission("refund", "success")
        logger.info(
            "submission_completed",
            transaction_type="refund",
            transaction_id=submission.transaction_id,
            deposit_id=submission.extra["deposit_id"],
            status=_status_of(submission.response),
        )
        return Submitted(
            step=STEP_REFUND, request_sent=submission.payload, response=submission.response
        )

    # Pass-through lookups

    async def fetch_active_conf(self) -> GatewayResult:
        return await self.gateway.fetch_active_conf()

    async def check_status(self, transaction_type: str, transaction_id: str) -> GatewayResult:
        """
        Look up the live status of a deposit, payout or refund.

        Raises:
            ValueError: If ``transaction_type`` is not one of the three types
        """
        lookups = {
            "deposit": self.gateway.check_deposit_status,
            "payout": self.gateway.check_payout_status,
            "refund": self.gateway.check_refund_status,
        }
        if transaction_type not in lookups:
            raise ValueError(f"Unsupported transaction type: {transaction_type!r}")
        return await lookups[transaction_type](transaction_id)

    async def fetch_wallet_balances(self, country: Optional[str] = None) -> GatewayResult:
        return await self.gateway.fetch_wallet_balances(country)
