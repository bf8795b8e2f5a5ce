"""
Domain models and value objects.

Contains fundamental domain entities like PairKey, PoolRecord, LiquidityPosition, Role
and the pool events.
"""

from ammpool.core.domain.events import (
    EventLog,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    RoleGranted,
    RoleRevoked,
    Swap,
)
from ammpool.core.domain.pool import PairKey, PoolRecord, PoolState
from ammpool.core.domain.position import LiquidityPosition
from ammpool.core.domain.roles import Role

__all__ = [
    # Pool model
    "PairKey",
    "PoolRecord",
    "PoolState",
    # Position model
    "LiquidityPosition",
    # Roles
    "Role",
    # Events
    "PoolEvent",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
    "RoleGranted",
    "RoleRevoked",
    "EventLog",
]
