"""
Numerical Safeguards — Integer Math Primitives

Модуль обеспечивает корректность целочисленной арифметики пула:
- Валидация сумм (только int, без bool и float)
- Умножение с делением (floor) без промежуточного округления
- Целочисленный квадратный корень
- Защищённое вычитание (underflow → исключение, а не отрицательный резерв)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Резервы и доли — только неотрицательные int произвольной точности
2. Float никогда не участвует в расчётах пула
3. Деление на ноль никогда не происходит молча
4. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Знаменатель для комиссий в базисных пунктах
BPS_DENOMINATOR: Final[int] = 10_000


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_amount(value: object) -> bool:
    """
    Проверка, является ли значение допустимой суммой (int, не bool).

    Examples:
        >>> is_amount(10)
        True
        >>> is_amount(True)
        False
        >>> is_amount(1.0)
        False
    """
    return isinstance(value, int) and not isinstance(value, bool)


def validate_amount_type(value: object, name: str = "amount") -> int:
    """
    Проверка типа суммы.

    Args:
        value: Проверяемое значение
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        TypeError: Если value не int (bool и float отклоняются)
    """
    if not is_amount(value):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def validate_non_negative(value: int, name: str = "value") -> int:
    """
    Проверка, что сумма неотрицательна.

    Raises:
        TypeError: Если value не int
        ValueError: Если value < 0
    """
    validate_amount_type(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


# =============================================================================
# БЕЗОПАСНАЯ АРИФМЕТИКА
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без потери точности.

    Args:
        a: Первый множитель (>= 0)
        b: Второй множитель (>= 0)
        denominator: Делитель (> 0)

    Returns:
        Целая часть частного (округление вниз)

    Raises:
        ZeroDivisionError: Если denominator == 0

    Examples:
        >>> mul_div(100, 50, 100)
        50
        >>> mul_div(7, 3, 2)
        10
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator


def isqrt(value: int) -> int:
    """
    Целочисленный квадратный корень floor(sqrt(value)).

    Raises:
        ValueError: Если value < 0

    Examples:
        >>> isqrt(10_000)
        100
        >>> isqrt(99)
        9
    """
    if value < 0:
        raise ValueError(f"isqrt of negative value: {value}")
    return math.isqrt(value)


def checked_sub(a: int, b: int, name: str = "value") -> int:
    """
    Вычитание с защитой от underflow.

    Резерв или счётчик долей никогда не становится отрицательным:
    underflow означает нарушение инварианта пула.

    Raises:
        ArithmeticError: Если a < b
    """
    if b > a:
        raise ArithmeticError(f"{name} underflow: {a} - {b}")
    return a - b


def apply_fee_bps(amount: int, fee_bps: int) -> int:
    """
    Сумма после вычета комиссии (округление в пользу пула).

    effective = amount * (10_000 - fee_bps) // 10_000

    Examples:
        >>> apply_fee_bps(1000, 0)
        1000
        >>> apply_fee_bps(1000, 30)
        997
    """
    if not 0 <= fee_bps < BPS_DENOMINATOR:
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}), got {fee_bps}")
    return mul_div(amount, BPS_DENOMINATOR - fee_bps, BPS_DENOMINATOR)
