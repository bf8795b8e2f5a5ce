"""
Swap Engine — обмен активов по кривой постоянного произведения

swap(trader, asset_in, asset_out, amount_in):
1. Валидация: различные активы, amount_in > 0
2. Котировка по резервам пула (комиссия удерживается из amount_in)
3. amount_out == 0 или amount_out >= reserve_out → InsufficientBalanceError
4. Событие Swap собирается и проверяется по контракту до мутаций
5. Transaction: забрать amount_in, обновить резервы, выплатить amount_out
6. Пост-условие: reserve_in строго растёт, reserve_out строго падает
"""

import logging
from typing import Mapping, Optional, Tuple

from ammpool.assets.ledger import AssetLedger, resolve_asset
from ammpool.config import AMMConfig
from ammpool.core.domain.events import EventLog, Swap
from ammpool.core.domain.pool import PairKey, PoolRecord
from ammpool.core.errors import InsufficientBalanceError, ValidationError
from ammpool.core.math.constant_product import SwapQuote, quote_swap
from ammpool.core.math.numerical_safeguards import validate_amount_type
from ammpool.storage.store import PersistentStore
from ammpool.storage.transaction import Transaction

logger = logging.getLogger(__name__)


class SwapEngine:
    """
    Обмен активов поверх PersistentStore.

    Args:
        store: Хранилище пулов
        assets: Коллабораторы активов по идентификатору
        custody: Principal, на котором хранятся средства пулов
        config: Конфигурация (swap_fee_bps)
        event_log: Журнал событий
    """

    def __init__(
        self,
        store: PersistentStore,
        assets: Mapping[str, AssetLedger],
        custody: str,
        config: Optional[AMMConfig] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.store = store
        self.assets = assets
        self.custody = custody
        self.config = config or AMMConfig()
        self.event_log = event_log if event_log is not None else EventLog()

    def quote(self, asset_in: str, asset_out: str, amount_in: int) -> SwapQuote:
        """
        Котировка свопа без изменения состояния.

        Raises:
            ValidationError: "Identical tokens", "Amount must be positive"
            InsufficientBalanceError: пустой пул или недостаточный выход
        """
        _, _, quote = self._prepare(asset_in, asset_out, amount_in)
        return quote

    def swap(self, trader: str, asset_in: str, asset_out: str, amount_in: int) -> Swap:
        """
        Обмен amount_in актива asset_in на asset_out.

        Returns:
            Опубликованное событие Swap
        """
        key, record, quote = self._prepare(asset_in, asset_out, amount_in)
        ledger_in = resolve_asset(self.assets, asset_in)
        ledger_out = resolve_asset(self.assets, asset_out)

        event = self.event_log.check(
            Swap(
                trader=trader,
                asset_in=asset_in,
                asset_out=asset_out,
                amount_in=amount_in,
                amount_out=quote.amount_out,
            )
        )

        def reserves_moved() -> bool:
            current = self.store.get_pool(key)
            reserve_in, reserve_out = current.reserves_for(asset_in)
            return reserve_in > quote.reserve_in and reserve_out < quote.reserve_out

        with Transaction(
            [self.store, ledger_in, ledger_out],
            name="swap",
            post_check=reserves_moved,
        ):
            ledger_in.transfer_from(self.custody, trader, self.custody, amount_in)
            self.store.put_pool(
                key,
                record.with_oriented(
                    asset_in,
                    quote.new_reserve_in,
                    quote.new_reserve_out,
                    record.total_liquidity,
                ),
            )
            ledger_out.transfer(self.custody, trader, quote.amount_out)

        self.event_log.append(event)
        logger.info(
            "Swap pool=%s trader=%s %s->%s in=%d out=%d fee=%d",
            key, trader, asset_in, asset_out, amount_in, quote.amount_out, quote.fee_amount,
        )
        return event

    def _prepare(self, asset_in: str, asset_out: str, amount_in: int) -> Tuple[PairKey, PoolRecord, SwapQuote]:
        key = PairKey.of(asset_in, asset_out)
        validate_amount_type(amount_in, "amount_in")
        if amount_in <= 0:
            raise ValidationError("Amount must be positive")

        record = self.store.get_pool(key)
        if record is None or record.is_empty:
            raise InsufficientBalanceError("Insufficient liquidity")

        reserve_in, reserve_out = record.reserves_for(asset_in)
        quote = quote_swap(amount_in, reserve_in, reserve_out, self.config.swap_fee_bps)
        logger.debug(
            "Quote pool=%s in=%d effective_in=%d out=%d reserves=(%d, %d)",
            key, quote.amount_in, quote.effective_in, quote.amount_out, reserve_in, reserve_out,
        )
        if quote.amount_out == 0 or quote.amount_out >= reserve_out:
            raise InsufficientBalanceError("Insufficient output amount")
        return key, record, quote
