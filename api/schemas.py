"""
Pydantic schemas for API request/response models.

Field names follow the camelCase wire format the dashboard uses.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# Strict so JSON booleans are not coerced into amounts
Amount = Union[StrictStr, StrictInt, StrictFloat]


class TransactionRequest(BaseModel):
    """Request schema for a deposit or payout."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [{"phoneNumber": "260763456789", "amount": "15"}]
        },
    )

    phone_number: Optional[Union[StrictStr, StrictInt]] = Field(
        default=None, alias="phoneNumber", description="Payer/recipient MSISDN"
    )
    amount: Optional[Amount] = Field(default=None, description="Positive amount")


class RefundRequest(BaseModel):
    """Request schema for refunding a deposit."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"depositId": "f4401bd2-1568-4140-bf2d-eb77d2b2b639", "amount": "5"},
                {"depositId": "f4401bd2-1568-4140-bf2d-eb77d2b2b639"},
            ]
        },
    )

    deposit_id: Optional[str] = Field(
        default=None, alias="depositId", description="Deposit to refund"
    )
    amount: Optional[Amount] = Field(
        default=None, description="Partial refund amount (full refund if not specified)"
    )


class SubmissionResponse(BaseModel):
    """Response schema for deposit, payout and refund submissions."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., description="Whether pawaPay accepted and the log recorded it")
    step: Optional[str] = Field(default=None, description="Last step reached")
    predicted_provider: Optional[Dict[str, Any]] = Field(
        default=None, alias="predictedProvider", description="Provider prediction"
    )
    resolved_currency: Optional[str] = Field(
        default=None, alias="resolvedCurrency", description="Resolved currency"
    )
    request_sent: Optional[Dict[str, Any]] = Field(
        default=None, alias="requestSent", description="Payload sent to pawaPay"
    )
    response: Optional[Any] = Field(default=None, description="pawaPay response body")
    error: Optional[Any] = Field(default=None, description="Error detail on failure")


class GatewayResponse(BaseModel):
    """Response schema for pass-through pawaPay lookups."""

    success: bool = Field(..., description="Whether the pawaPay call succeeded")
    data: Optional[Any] = Field(default=None, description="pawaPay response body")
    error: Optional[Any] = Field(default=None, description="Error detail on failure")


class TransactionRecordSchema(BaseModel):
    """One entry of the local transaction log."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Log sequence number")
    type: str = Field(..., description="deposit, payout or refund")
    deposit_id: Optional[str] = Field(default=None, alias="depositId")
    payout_id: Optional[str] = Field(default=None, alias="payoutId")
    refund_id: Optional[str] = Field(default=None, alias="refundId")
    amount: Optional[str] = Field(default=None, description="Amount, or FULL for full refunds")
    currency: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    provider: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = Field(default=None, description="Status reported at submission")
    timestamp: str = Field(..., description="Creation timestamp (ISO 8601)")


class TransactionListResponse(BaseModel):
    """Response schema for the transaction log listing."""

    success: bool
    data: List[TransactionRecordSchema] = Field(default_factory=list)


class TransactionLookupResponse(BaseModel):
    """Response schema for a single transaction log lookup."""

    success: bool
    data: Optional[TransactionRecordSchema] = None
    error: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """Response schema for health checks."""

    status: str = Field(..., description="Overall health status (healthy/unhealthy)")
    checks: Optional[Dict[str, Any]] = Field(default=None, description="Individual service checks")
    message: Optional[str] = Field(default=None, description="Status message")
