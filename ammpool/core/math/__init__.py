"""
Core math modules для ammpool

Целочисленные примитивы пула: безопасная арифметика, выпуск долей,
ценообразование постоянного произведения.
"""

# Numerical Safeguards
from ammpool.core.math.numerical_safeguards import (
    BPS_DENOMINATOR,
    apply_fee_bps,
    checked_sub,
    is_amount,
    isqrt,
    mul_div,
    validate_amount_type,
    validate_non_negative,
)

# Liquidity Shares
from ammpool.core.math.liquidity_shares import (
    BurnAmounts,
    burn_amounts,
    initial_shares,
    proportional_shares,
    shares_to_mint,
)

# Constant Product
from ammpool.core.math.constant_product import (
    SwapQuote,
    amount_out_for,
    quote_swap,
)

__all__ = [
    # Numerical Safeguards
    "BPS_DENOMINATOR",
    "apply_fee_bps",
    "checked_sub",
    "is_amount",
    "isqrt",
    "mul_div",
    "validate_amount_type",
    "validate_non_negative",
    # Liquidity Shares
    "BurnAmounts",
    "burn_amounts",
    "initial_shares",
    "proportional_shares",
    "shares_to_mint",
    # Constant Product
    "SwapQuote",
    "amount_out_for",
    "quote_swap",
]
