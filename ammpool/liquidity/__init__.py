"""Liquidity — депозит и вывод ликвидности пула."""

from .manager import LiquidityManager

__all__ = [
    "LiquidityManager",
]
