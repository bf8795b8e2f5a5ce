"""
ammpool — upgrade-safe constant-product pool manager.

Contains:
- ammpool.core       : domain models, integer math, JSON Schema contracts
- ammpool.storage    : PersistentStore (state module) and transactions
- ammpool.access     : role-based access control, upgrade gate
- ammpool.liquidity  : deposit / withdraw
- ammpool.swap       : constant-product swaps
- ammpool.amm        : AMMPool logic module bound to a store
"""

from ammpool.amm import AMMPool
from ammpool.config import AMMConfig
from ammpool.core.domain import PoolState, Role
from ammpool.core.errors import (
    AlreadyInitializedError,
    AMMError,
    AssetTransferError,
    AuthorizationError,
    InsufficientBalanceError,
    StorageLayoutError,
    ValidationError,
)
from ammpool.storage import PersistentStore

__all__ = [
    "AMMPool",
    "AMMConfig",
    "PersistentStore",
    "PoolState",
    "Role",
    # Errors
    "AMMError",
    "ValidationError",
    "InsufficientBalanceError",
    "AuthorizationError",
    "AlreadyInitializedError",
    "StorageLayoutError",
    "AssetTransferError",
]
