"""SQLAlchemy database models for the transaction log."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TRANSACTION_TYPES = ("deposit", "payout", "refund")

# Sentinel stored as the amount of a refund that returns the whole deposit
FULL_REFUND_AMOUNT = "FULL"

UNKNOWN_STATUS = "UNKNOWN"


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TransactionRecord(Base):
    """
    Transaction log table.

    One row per operation accepted by pawaPay. Rows are written once and
    never updated or deleted; ``id`` order is insertion order.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    deposit_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    payout_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    refund_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    amount: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    provider: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("type IN ('deposit', 'payout', 'refund')", name="valid_type"),
        Index("idx_transactions_deposit_id", "deposit_id"),
        Index("idx_transactions_payout_id", "payout_id"),
        Index("idx_transactions_refund_id", "refund_id"),
    )

    @property
    def transaction_id(self) -> Optional[str]:
        """The identifier matching this record's type."""
        return getattr(self, f"{self.type}_id", None)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape shown by the dashboard."""
        timestamp = self.timestamp
        if timestamp is not None and timestamp.tzinfo is None:
            # SQLite hands back naive datetimes; they were written as UTC
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "type": self.type,
            "depositId": self.deposit_id,
            "payoutId": self.payout_id,
            "refundId": self.refund_id,
            "amount": self.amount,
            "currency": self.currency,
            "phoneNumber": self.phone_number,
            "provider": self.provider,
            "country": self.country,
            "status": self.status,
            "timestamp": timestamp.isoformat() if timestamp is not None else None,
        }

    def __repr__(self) -> str:
        """String representation of TransactionRecord."""
        return (
            f"<TransactionRecord(id={self.id}, type={self.type}, "
            f"transaction_id={self.transaction_id}, status={self.status})>"
        )
