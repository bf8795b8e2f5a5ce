"""
Contract Validation Module

Модуль для валидации JSON контрактов: события пула и снапшоты хранилища.
"""

from .validators import (
    ContractValidator,
    EventValidator,
    SchemaLoader,
    StoreSnapshotValidator,
    validate_event,
    validate_store_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "EventValidator",
    "StoreSnapshotValidator",
    # Functions
    "validate_event",
    "validate_store_snapshot",
]
