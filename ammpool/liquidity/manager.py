"""
Liquidity Manager — депозит и вывод ликвидности

Операции:
- add_liquidity: забирает обе суммы у провайдера в custody, выпускает доли
- remove_liquidity: погашает доли, возвращает пропорциональную часть резервов

Порядок выполнения (check-then-act):
1. Валидация предусловий (пара, суммы, позиция) — без мутаций
2. Расчёт долей / сумм; событие собирается и проверяется по контракту
3. Transaction: переводы активов + запись пула и позиции; любое исключение
   откатывает хранилище и коллабораторов
4. Событие публикуется только после фиксации
"""

import logging
from typing import Mapping, Optional

from ammpool.assets.ledger import AssetLedger, resolve_asset
from ammpool.config import AMMConfig
from ammpool.core.domain.events import EventLog, LiquidityAdded, LiquidityRemoved
from ammpool.core.domain.pool import PairKey
from ammpool.core.errors import InsufficientBalanceError, ValidationError
from ammpool.core.math.liquidity_shares import burn_amounts, shares_to_mint
from ammpool.core.math.numerical_safeguards import checked_sub, validate_amount_type
from ammpool.storage.store import PersistentStore
from ammpool.storage.transaction import Transaction

logger = logging.getLogger(__name__)


class LiquidityManager:
    """
    Депозит и вывод ликвидности поверх PersistentStore.

    Args:
        store: Хранилище пулов и позиций
        assets: Коллабораторы активов по идентификатору
        custody: Principal, на котором хранятся средства пулов
        config: Конфигурация пула
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

    def add_liquidity(
        self,
        provider: str,
        asset_a: str,
        asset_b: str,
        amount_a: int,
        amount_b: int,
    ) -> LiquidityAdded:
        """
        Депозит пары активов.

        Returns:
            Опубликованное событие LiquidityAdded

        Raises:
            ValidationError: "Identical tokens", "Amounts must be positive",
                "Insufficient liquidity minted", неизвестный актив
            AssetTransferError: Коллаборатор не смог забрать средства
        """
        key = PairKey.of(asset_a, asset_b)
        validate_amount_type(amount_a, "amount_a")
        validate_amount_type(amount_b, "amount_b")
        if amount_a <= 0 or amount_b <= 0:
            raise ValidationError("Amounts must be positive")

        ledger_a = resolve_asset(self.assets, asset_a)
        ledger_b = resolve_asset(self.assets, asset_b)

        record = self.store.get_pool(key) or self.store.new_pool(key)
        reserve_a, reserve_b = record.reserves_for(asset_a)
        minted = shares_to_mint(amount_a, amount_b, reserve_a, reserve_b, record.total_liquidity)
        if minted == 0:
            raise ValidationError("Insufficient liquidity minted")

        event = self.event_log.check(
            LiquidityAdded(
                provider=provider,
                asset_a=asset_a,
                asset_b=asset_b,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=minted,
            )
        )

        with Transaction(
            [self.store, ledger_a, ledger_b],
            name="add_liquidity",
            post_check=lambda: self.store.pool_is_consistent(key),
        ):
            ledger_a.transfer_from(self.custody, provider, self.custody, amount_a)
            ledger_b.transfer_from(self.custody, provider, self.custody, amount_b)
            self.store.put_pool(
                key,
                record.with_oriented(
                    asset_a,
                    reserve_a + amount_a,
                    reserve_b + amount_b,
                    record.total_liquidity + minted,
                ),
            )
            self.store.put_position(key, provider, self.store.get_position(key, provider) + minted)

        self.event_log.append(event)
        logger.info(
            "LiquidityAdded pool=%s provider=%s amounts=(%d, %d) shares=%d",
            key, provider, amount_a, amount_b, minted,
        )
        return event

    def remove_liquidity(
        self,
        provider: str,
        asset_a: str,
        asset_b: str,
        shares: int,
    ) -> LiquidityRemoved:
        """
        Вывод ликвидности: погашение shares долей провайдера.

        Остаток целочисленного деления остаётся в пуле.

        Returns:
            Опубликованное событие LiquidityRemoved

        Raises:
            ValidationError: "Identical tokens", "Shares must be positive"
            InsufficientBalanceError: "Insufficient user liquidity"
            AssetTransferError: Коллаборатор не смог выплатить средства
        """
        key = PairKey.of(asset_a, asset_b)
        validate_amount_type(shares, "shares")
        if shares <= 0:
            raise ValidationError("Shares must be positive")

        held = self.store.get_position(key, provider)
        if held < shares:
            raise InsufficientBalanceError("Insufficient user liquidity")

        ledger_a = resolve_asset(self.assets, asset_a)
        ledger_b = resolve_asset(self.assets, asset_b)

        record = self.store.get_pool(key)
        reserve_a, reserve_b = record.reserves_for(asset_a)
        burned = burn_amounts(shares, reserve_a, reserve_b, record.total_liquidity)

        event = self.event_log.check(
            LiquidityRemoved(
                provider=provider,
                asset_a=asset_a,
                asset_b=asset_b,
                amount_a=burned.amount0,
                amount_b=burned.amount1,
                shares_burned=shares,
            )
        )

        with Transaction(
            [self.store, ledger_a, ledger_b],
            name="remove_liquidity",
            post_check=lambda: self.store.pool_is_consistent(key),
        ):
            updated = record.with_oriented(
                asset_a,
                checked_sub(reserve_a, burned.amount0, "reserve_a"),
                checked_sub(reserve_b, burned.amount1, "reserve_b"),
                checked_sub(record.total_liquidity, shares, "total_liquidity"),
            )
            if updated.is_empty and not self.config.retain_empty_pools:
                self.store.delete_pool(key)
            else:
                self.store.put_pool(key, updated)
            self.store.put_position(key, provider, held - shares)

            if burned.amount0:
                ledger_a.transfer(self.custody, provider, burned.amount0)
            if burned.amount1:
                ledger_b.transfer(self.custody, provider, burned.amount1)

        self.event_log.append(event)
        logger.info(
            "LiquidityRemoved pool=%s provider=%s amounts=(%d, %d) shares=%d",
            key, provider, burned.amount0, burned.amount1, shares,
        )
        return event
