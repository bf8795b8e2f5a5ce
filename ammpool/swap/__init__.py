"""Swap — обмен активов по кривой постоянного произведения."""

from .engine import SwapEngine

__all__ = [
    "SwapEngine",
]
