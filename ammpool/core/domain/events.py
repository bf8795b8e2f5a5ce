"""
Events — Структурированные события пула

События публикуются только после фиксации операции (commit) и собираются
в EventLog. Каждое событие сериализуется в контракт
(ammpool/contracts/schema/events.json) через to_contract().
"""

from collections import deque
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from .roles import Role


# =============================================================================
# BASE
# =============================================================================


class PoolEvent(BaseModel):
    """Базовое событие; event_type — имя события в контракте."""

    event_type: ClassVar[str] = "PoolEvent"

    model_config = {"frozen": True}

    def to_contract(self) -> Dict[str, Any]:
        """Плоский dict события для JSON Schema валидации и журналов."""
        return {"event": self.event_type, **self.model_dump(mode="json")}


# =============================================================================
# LIQUIDITY EVENTS
# =============================================================================


class LiquidityAdded(PoolEvent):
    """LiquidityAdded(provider, assetA, assetB, amountA, amountB, sharesMinted)."""

    event_type: ClassVar[str] = "LiquidityAdded"

    provider: str = Field(..., min_length=1)
    asset_a: str = Field(..., min_length=1)
    asset_b: str = Field(..., min_length=1)
    amount_a: int = Field(..., gt=0)
    amount_b: int = Field(..., gt=0)
    shares_minted: int = Field(..., gt=0)


class LiquidityRemoved(PoolEvent):
    """LiquidityRemoved(provider, assetA, assetB, amountA, amountB, sharesBurned)."""

    event_type: ClassVar[str] = "LiquidityRemoved"

    provider: str = Field(..., min_length=1)
    asset_a: str = Field(..., min_length=1)
    asset_b: str = Field(..., min_length=1)
    amount_a: int = Field(..., ge=0)
    amount_b: int = Field(..., ge=0)
    shares_burned: int = Field(..., gt=0)


# =============================================================================
# SWAP EVENT
# =============================================================================


class Swap(PoolEvent):
    """Swap(trader, assetIn, assetOut, amountIn, amountOut)."""

    event_type: ClassVar[str] = "Swap"

    trader: str = Field(..., min_length=1)
    asset_in: str = Field(..., min_length=1)
    asset_out: str = Field(..., min_length=1)
    amount_in: int = Field(..., gt=0)
    amount_out: int = Field(..., gt=0)


# =============================================================================
# ROLE EVENTS
# =============================================================================


class RoleGranted(PoolEvent):
    """Роль выдана account; sender — кто выдал."""

    event_type: ClassVar[str] = "RoleGranted"

    role: Role
    account: str = Field(..., min_length=1)
    sender: str = Field(..., min_length=1)


class RoleRevoked(PoolEvent):
    """Роль отозвана у account; sender — кто отозвал."""

    event_type: ClassVar[str] = "RoleRevoked"

    role: Role
    account: str = Field(..., min_length=1)
    sender: str = Field(..., min_length=1)


# =============================================================================
# EVENT LOG
# =============================================================================

E = TypeVar("E", bound=PoolEvent)


class EventLog:
    """
    Журнал событий (queryable log records).

    Args:
        maxlen: Ограничение длины журнала (None — без ограничения)
        validator: Проверка контракта события перед записью
    """

    def __init__(
        self,
        maxlen: Optional[int] = None,
        validator: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.events: deque = deque(maxlen=maxlen)
        self.validator = validator

    def check(self, event: E) -> E:
        """
        Проверка контракта события без записи в журнал.

        Операции пула вызывают check до любых мутаций, а append только
        после фиксации.
        """
        if self.validator is not None:
            self.validator(event.to_contract())
        return event

    def append(self, event: E) -> E:
        self.events.append(event)
        return event

    def emit(self, event: E) -> E:
        return self.append(self.check(event))

    def tail(self, n: int = 200) -> List[PoolEvent]:
        if n <= 0:
            return []
        if n >= len(self.events):
            return list(self.events)
        return list(self.events)[-n:]

    def of_type(self, event_cls: Type[E]) -> List[E]:
        return [e for e in self.events if isinstance(e, event_cls)]

    def last(self) -> Optional[PoolEvent]:
        return self.events[-1] if self.events else None

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[PoolEvent]:
        return iter(list(self.events))
