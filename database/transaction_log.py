"""
Append-only transaction log.

Records every deposit, payout and refund pawaPay accepted so the dashboard
can list them later. A record is inserted once and never updated; a failed
write raises ``TransactionLogError`` instead of being dropped.
"""
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import TRANSACTION_TYPES, TransactionRecord
from monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

_ID_FIELDS = {
    "deposit": "deposit_id",
    "payout": "payout_id",
    "refund": "refund_id",
}


class TransactionLogError(Exception):
    """Raised when the transaction log cannot store or read records."""

    pass


class TransactionLog:
    """Repository over the ``transactions`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _check_record(record: TransactionRecord) -> None:
        """
        Enforce write-once and the one-identifier-per-record rule.

        Raises:
            TransactionLogError: If the record cannot be appended
        """
        if record.id is not None:
            raise TransactionLogError(f"Record {record.id} is already in the log")

        if record.type not in TRANSACTION_TYPES:
            raise TransactionLogError(f"Unknown transaction type: {record.type!r}")

        expected = _ID_FIELDS[record.type]
        populated = [field for field in _ID_FIELDS.values() if getattr(record, field)]
        if populated != [expected]:
            raise TransactionLogError(
                f"A {record.type} record must carry exactly one identifier ({expected}), "
                f"got {populated or 'none'}"
            )

    async def append(self, record: TransactionRecord) -> TransactionRecord:
        """
        Append a record, assigning its sequence number and timestamp.

        Args:
            record: Unsaved record

        Returns:
            TransactionRecord: The stored record with ``id`` and ``timestamp`` set

        Raises:
            TransactionLogError: If validation or the write fails
        """
        self._check_record(record)
        record.timestamp = datetime.now(timezone.utc)

        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as e:
            metrics.record_log_write("failed")
            logger.error(
                "transaction_log_write_failed",
                transaction_type=record.type,
                transaction_id=record.transaction_id,
                error=str(e),
            )
            raise TransactionLogError(f"Failed to record {record.type}: {e}") from e

        metrics.record_log_write("success")
        logger.info(
            "transaction_recorded",
            record_id=record.id,
            transaction_type=record.type,
            transaction_id=record.transaction_id,
            status=record.status,
        )
        return record

    async def list_all(self) -> List[TransactionRecord]:
        """
        Return every record, newest first.

        Raises:
            TransactionLogError: If the read fails
        """
        stmt = select(TransactionRecord).order_by(TransactionRecord.id.desc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("transaction_log_read_failed", error=str(e))
            raise TransactionLogError(f"Failed to read transactions: {e}") from e

    async def find_by_any_identifier(self, transaction_id: str) -> Optional[TransactionRecord]:
        """
        Find the record whose deposit, payout or refund ID equals ``transaction_id``.

        Raises:
            TransactionLogError: If the read fails
        """
        stmt = (
            select(TransactionRecord)
            .where(
                or_(
                    TransactionRecord.deposit_id == transaction_id,
                    TransactionRecord.payout_id == transaction_id,
                    TransactionRecord.refund_id == transaction_id,
                )
            )
            .order_by(TransactionRecord.id.desc())
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "transaction_log_read_failed", transaction_id=transaction_id, error=str(e)
            )
            raise TransactionLogError(f"Failed to look up {transaction_id}: {e}") from e
