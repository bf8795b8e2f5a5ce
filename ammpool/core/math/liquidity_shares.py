"""
Liquidity Shares — Выпуск и погашение долей пула

Формулы:
- Первый депозит: shares = isqrt(amount_a * amount_b)
  (сбалансированный депозит N:N выпускает N долей)
- Последующие: shares = min(total * amount_a // reserve_a,
                            total * amount_b // reserve_b)
  (при совпадении пропорций равно total * amount_a // reserve_a;
  излишек несбалансированного депозита остаётся в пуле)
- Погашение: amount = reserve * shares // total
  (остаток от деления остаётся в пуле и не возвращается)
"""

from dataclasses import dataclass

from ammpool.core.math.numerical_safeguards import isqrt, mul_div


# =============================================================================
# РЕЗУЛЬТАТЫ
# =============================================================================


@dataclass(frozen=True)
class BurnAmounts:
    """Суммы, возвращаемые провайдеру при погашении долей."""

    amount0: int
    amount1: int
    shares: int


# =============================================================================
# ВЫПУСК
# =============================================================================


def initial_shares(amount0: int, amount1: int) -> int:
    """
    Доли первого депозита: геометрическое среднее сумм.

    Examples:
        >>> initial_shares(100, 100)
        100
        >>> initial_shares(100, 400)
        200
    """
    return isqrt(amount0 * amount1)


def proportional_shares(
    amount0: int,
    amount1: int,
    reserve0: int,
    reserve1: int,
    total_liquidity: int,
) -> int:
    """
    Доли последующего депозита, сохраняющие текущую цену пула.

    Берётся минимум по двум сторонам: провайдер не получает долю больше,
    чем обеспечивает менее весомая сторона депозита.

    Args:
        amount0: Депозит token0
        amount1: Депозит token1
        reserve0: Текущий резерв token0 (> 0)
        reserve1: Текущий резерв token1 (> 0)
        total_liquidity: Текущее число долей (> 0)

    Returns:
        Число выпускаемых долей (может быть 0 для пыли)

    Examples:
        >>> proportional_shares(50, 50, 100, 100, 100)
        50
        >>> proportional_shares(50, 10, 100, 100, 100)
        10
    """
    return min(
        mul_div(total_liquidity, amount0, reserve0),
        mul_div(total_liquidity, amount1, reserve1),
    )


def shares_to_mint(
    amount0: int,
    amount1: int,
    reserve0: int,
    reserve1: int,
    total_liquidity: int,
) -> int:
    """Выбор формулы выпуска по состоянию пула."""
    if total_liquidity == 0:
        return initial_shares(amount0, amount1)
    return proportional_shares(amount0, amount1, reserve0, reserve1, total_liquidity)


# =============================================================================
# ПОГАШЕНИЕ
# =============================================================================


def burn_amounts(shares: int, reserve0: int, reserve1: int, total_liquidity: int) -> BurnAmounts:
    """
    Пропорциональная доля резервов для погашения shares.

    Погашение всех долей возвращает резервы целиком, поэтому пустой пул
    всегда имеет нулевые резервы.

    Examples:
        >>> burn_amounts(50, 100, 100, 100)
        BurnAmounts(amount0=50, amount1=50, shares=50)
    """
    return BurnAmounts(
        amount0=mul_div(reserve0, shares, total_liquidity),
        amount1=mul_div(reserve1, shares, total_liquidity),
        shares=shares,
    )
