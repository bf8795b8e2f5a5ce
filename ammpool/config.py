"""
AMMConfig — Конфигурация logic module

Параметры передаются в конструктор AMMPool; значения по умолчанию
соответствуют пулу без комиссии, сохраняющему опустевшие записи.
"""

from dataclasses import dataclass
from typing import Optional

from ammpool.core.math.numerical_safeguards import BPS_DENOMINATOR, is_amount


@dataclass(frozen=True)
class AMMConfig:
    """
    Конфигурация пула.

    Attributes:
        swap_fee_bps: Комиссия свопа в базисных пунктах, удерживается из amount_in
            и остаётся в резерве (0 — без комиссии)
        retain_empty_pools: Сохранять запись пула с нулевыми резервами после
            вывода всех долей (False — запись удаляется)
        validate_events: Проверять каждое событие по ammpool/contracts/schema/events.json
        event_log_maxlen: Ограничение длины журнала событий (None — без ограничения)
    """

    swap_fee_bps: int = 0
    retain_empty_pools: bool = True
    validate_events: bool = True
    event_log_maxlen: Optional[int] = None

    def __post_init__(self) -> None:
        if not is_amount(self.swap_fee_bps) or not 0 <= self.swap_fee_bps < BPS_DENOMINATOR:
            raise ValueError(
                f"swap_fee_bps must be an int in [0, {BPS_DENOMINATOR}), got {self.swap_fee_bps!r}"
            )
        if self.event_log_maxlen is not None and self.event_log_maxlen <= 0:
            raise ValueError(f"event_log_maxlen must be positive, got {self.event_log_maxlen}")
