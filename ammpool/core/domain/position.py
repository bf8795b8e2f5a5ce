"""
LiquidityPosition — Модель позиции провайдера ликвидности

Ключ: (пул, провайдер). Позиция с нулём долей в хранилище не хранится.

Инвариант: сумма shares всех позиций пула равна total_liquidity пула.
"""

from pydantic import BaseModel, Field

from .pool import PairKey


# =============================================================================
# POSITION MODEL
# =============================================================================


class LiquidityPosition(BaseModel):
    """
    Позиция провайдера в пуле.

    Immutable модель (frozen=True). Порядок полей — часть схемы хранилища.
    """

    # Идентификация
    token0: str = Field(..., min_length=1, description="Канонический token0 пула")
    token1: str = Field(..., min_length=1, description="Канонический token1 пула")
    provider: str = Field(..., min_length=1, description="Principal провайдера")

    # Доли
    shares: int = Field(..., ge=0, description="Доли провайдера в пуле")

    model_config = {"frozen": True, "strict": True}

    @classmethod
    def of(cls, key: PairKey, provider: str, shares: int) -> "LiquidityPosition":
        return cls(token0=key.token0, token1=key.token1, provider=provider, shares=shares)

    @property
    def key(self) -> PairKey:
        return PairKey(token0=self.token0, token1=self.token1)
