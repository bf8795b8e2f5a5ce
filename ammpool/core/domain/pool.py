"""
Pool — Модель пула ликвидности

Пул идентифицируется неупорядоченной парой активов, нормализованной
в канонический порядок: PairKey.of(A, B) == PairKey.of(B, A).

Immutable Pydantic модели; любые изменения создают новый экземпляр
через updated(...), который повторно прогоняет валидаторы.
"""

from pydantic import BaseModel, Field, model_validator

from ammpool.core.errors import ValidationError


# =============================================================================
# PAIR KEY
# =============================================================================


class PairKey(BaseModel):
    """
    Канонический ключ пары активов (token0 < token1).

    Используется как ключ хранилища; frozen модель хешируема.
    """

    token0: str = Field(..., min_length=1, description="Меньший идентификатор актива")
    token1: str = Field(..., min_length=1, description="Больший идентификатор актива")

    model_config = {"frozen": True, "strict": True}

    @model_validator(mode="after")
    def validate_canonical_order(self) -> "PairKey":
        """Проверка канонического порядка (строго token0 < token1)."""
        if not self.token0 < self.token1:
            raise ValueError(
                f"PairKey must be canonical (token0 < token1), got {self.token0!r}, {self.token1!r}"
            )
        return self

    @classmethod
    def of(cls, asset_a: str, asset_b: str) -> "PairKey":
        """
        Нормализация пары в канонический порядок.

        Raises:
            ValidationError: Если asset_a == asset_b ("Identical tokens")
        """
        if asset_a == asset_b:
            raise ValidationError("Identical tokens")
        if asset_a < asset_b:
            return cls(token0=asset_a, token1=asset_b)
        return cls(token0=asset_b, token1=asset_a)

    def is_token0(self, asset: str) -> bool:
        """True если asset — token0 пары."""
        if asset == self.token0:
            return True
        if asset == self.token1:
            return False
        raise ValueError(f"Asset {asset!r} is not part of pair {self}")

    def __str__(self) -> str:
        return f"{self.token0}/{self.token1}"


# =============================================================================
# POOL RECORD
# =============================================================================


class PoolRecord(BaseModel):
    """
    Запись пула в хранилище.

    Инварианты:
    - reserve0 > 0 и reserve1 > 0, если total_liquidity > 0
    - reserve0 == reserve1 == 0, если total_liquidity == 0

    Порядок полей — часть схемы хранилища: новые поля только в конец.
    """

    token0: str = Field(..., min_length=1, description="Канонический token0")
    token1: str = Field(..., min_length=1, description="Канонический token1")
    reserve0: int = Field(0, ge=0, description="Резерв token0")
    reserve1: int = Field(0, ge=0, description="Резерв token1")
    total_liquidity: int = Field(0, ge=0, description="Всего выпущено долей")

    model_config = {"frozen": True, "strict": True}

    @model_validator(mode="after")
    def validate_reserves_match_liquidity(self) -> "PoolRecord":
        """Резервы положительны тогда и только тогда, когда есть доли."""
        if self.total_liquidity > 0:
            if self.reserve0 == 0 or self.reserve1 == 0:
                raise ValueError(
                    f"Pool {self.token0}/{self.token1} has {self.total_liquidity} shares "
                    f"but reserves ({self.reserve0}, {self.reserve1})"
                )
        elif self.reserve0 != 0 or self.reserve1 != 0:
            raise ValueError(
                f"Pool {self.token0}/{self.token1} has no shares "
                f"but reserves ({self.reserve0}, {self.reserve1})"
            )
        return self

    @property
    def key(self) -> PairKey:
        return PairKey(token0=self.token0, token1=self.token1)

    @property
    def is_empty(self) -> bool:
        return self.total_liquidity == 0

    def reserves_for(self, asset_a: str) -> tuple[int, int]:
        """
        Резервы в порядке (asset_a, другой актив).

        Args:
            asset_a: Один из активов пары

        Returns:
            (reserve_a, reserve_b)
        """
        if self.key.is_token0(asset_a):
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def with_oriented(self, asset_a: str, reserve_a: int, reserve_b: int, total_liquidity: int) -> "PoolRecord":
        """Новая запись с резервами, заданными в порядке (asset_a, другой)."""
        if self.key.is_token0(asset_a):
            reserve0, reserve1 = reserve_a, reserve_b
        else:
            reserve0, reserve1 = reserve_b, reserve_a
        return self.updated(reserve0=reserve0, reserve1=reserve1, total_liquidity=total_liquidity)

    def updated(self, **changes: int) -> "PoolRecord":
        # model_copy не вызывает валидаторы, поэтому запись пересобирается
        return type(self).model_validate({**self.model_dump(), **changes})

    def state_for(self, asset_a: str) -> "PoolState":
        """Представление пула в порядке аргументов вызывающей стороны."""
        reserve_a, reserve_b = self.reserves_for(asset_a)
        return PoolState(
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_liquidity_shares=self.total_liquidity,
        )


# =============================================================================
# POOL STATE (QUERY VIEW)
# =============================================================================


class PoolState(BaseModel):
    """Результат poolState(assetA, assetB)."""

    reserve_a: int = Field(..., ge=0, description="Резерв assetA")
    reserve_b: int = Field(..., ge=0, description="Резерв assetB")
    total_liquidity_shares: int = Field(..., ge=0, description="Всего долей пула")

    model_config = {"frozen": True}
