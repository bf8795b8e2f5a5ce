"""
Constant Product — Ценообразование свопа x * y = k

Алгоритм:
    effective_in = amount_in * (10_000 - fee_bps) // 10_000
    amount_out   = reserve_out - reserve_in * reserve_out // (reserve_in + effective_in)

Целочисленное деление округляет вниз k / (reserve_in + effective_in), поэтому
amount_out может быть на единицу больше точного значения кривой. Комиссия
остаётся в резерве reserve_in (в пул зачисляется полный amount_in).
amount_out == reserve_out возможен для огромного входа; такой своп
отклоняет Swap Engine.
"""

from dataclasses import dataclass

from ammpool.core.math.numerical_safeguards import apply_fee_bps, mul_div


# =============================================================================
# РЕЗУЛЬТАТ
# =============================================================================


@dataclass(frozen=True)
class SwapQuote:
    """Котировка свопа (без побочных эффектов)."""

    amount_in: int
    effective_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    fee_bps: int

    @property
    def fee_amount(self) -> int:
        """Часть amount_in, удержанная комиссией."""
        return self.amount_in - self.effective_in

    @property
    def new_reserve_in(self) -> int:
        return self.reserve_in + self.amount_in

    @property
    def new_reserve_out(self) -> int:
        return self.reserve_out - self.amount_out


# =============================================================================
# РАСЧЁТ
# =============================================================================


def amount_out_for(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> int:
    """
    Выход свопа по формуле постоянного произведения.

    Args:
        amount_in: Вход (>= 0)
        reserve_in: Резерв входного актива
        reserve_out: Резерв выходного актива
        fee_bps: Комиссия в базисных пунктах, удерживаемая из amount_in

    Returns:
        amount_out (0 для пустого пула или пылевого входа)

    Examples:
        >>> amount_out_for(10, 1000, 1000)
        10
        >>> amount_out_for(100, 1000, 1000)
        91
        >>> amount_out_for(10, 0, 0)
        0
    """
    effective_in = apply_fee_bps(amount_in, fee_bps)
    denominator = reserve_in + effective_in
    if denominator == 0:
        return 0
    return reserve_out - mul_div(reserve_in, reserve_out, denominator)


def quote_swap(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> SwapQuote:
    """Полная котировка свопа для заданных резервов."""
    return SwapQuote(
        amount_in=amount_in,
        effective_in=apply_fee_bps(amount_in, fee_bps),
        amount_out=amount_out_for(amount_in, reserve_in, reserve_out, fee_bps),
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_bps=fee_bps,
    )
