"""Storage — хранилище состояния, независимое от logic module, и транзакции."""

from .store import (
    POOL_RECORD,
    POSITION_RECORD,
    SNAPSHOT_SCHEMA_VERSION,
    PersistentStore,
    StorageLayout,
)
from .transaction import Transaction, TransactionError

__all__ = [
    "PersistentStore",
    "StorageLayout",
    "POOL_RECORD",
    "POSITION_RECORD",
    "SNAPSHOT_SCHEMA_VERSION",
    "Transaction",
    "TransactionError",
]
