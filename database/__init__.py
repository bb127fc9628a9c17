"""Database package for the transaction log."""
from .connection import create_engine_for_url, create_session_factory, init_db
from .models import Base, TransactionRecord
from .transaction_log import TransactionLog, TransactionLogError

__all__ = [
    "Base",
    "TransactionRecord",
    "TransactionLog",
    "TransactionLogError",
    "create_engine_for_url",
    "create_session_factory",
    "init_db",
]
