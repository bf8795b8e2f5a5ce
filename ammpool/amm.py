"""
AMMPool — logic module пулового ядра

Logic module держит только ссылку на PersistentStore и никогда не хранит
собственную копию пулов, позиций или ролей. Внешний dispatcher может
заменить logic module, привязав к тому же store новый экземпляр
(например, подкласс с расширенными записями); накопленное состояние
сохраняется.

Перед привязкой нового logic module dispatcher обязан спросить
authorize_upgrade(principal). Сам модуль код не подменяет.

Схема записей объявляется атрибутом RECORD_TYPES; конструктор принимает её
в store (append-only, см. ammpool.storage.store).
"""

import logging
from typing import ClassVar, Dict, Mapping, Optional, Type

from pydantic import BaseModel

from ammpool.access.access_control import AccessControl
from ammpool.access.upgrade_gate import UpgradeGate, UpgradeGateResult
from ammpool.assets.ledger import AssetLedger
from ammpool.config import AMMConfig
from ammpool.core.contracts import validate_event
from ammpool.core.domain.events import EventLog, LiquidityAdded, LiquidityRemoved, Swap
from ammpool.core.domain.pool import PairKey, PoolRecord, PoolState
from ammpool.core.domain.position import LiquidityPosition
from ammpool.core.domain.roles import Role
from ammpool.core.errors import AuthorizationError
from ammpool.core.math.constant_product import SwapQuote
from ammpool.liquidity.manager import LiquidityManager
from ammpool.storage.store import POOL_RECORD, POSITION_RECORD, PersistentStore
from ammpool.swap.engine import SwapEngine

logger = logging.getLogger(__name__)


class AMMPool:
    """
    Публичная точка входа: роли, ликвидность, свопы, upgrade gate.

    Args:
        store: Хранилище состояния (общее для всех версий логики)
        assets: Коллабораторы активов по идентификатору
        custody: Principal, на котором хранятся средства пулов
        config: Конфигурация пула
        event_log: Журнал событий (по умолчанию создаётся по config)
    """

    VERSION: ClassVar[str] = "1"

    RECORD_TYPES: ClassVar[Dict[str, Type[BaseModel]]] = {
        POOL_RECORD: PoolRecord,
        POSITION_RECORD: LiquidityPosition,
    }

    DEFAULT_ADMIN_ROLE: ClassVar[Role] = Role.ADMIN
    UPGRADER_ROLE: ClassVar[Role] = Role.UPGRADER

    def __init__(
        self,
        store: PersistentStore,
        assets: Mapping[str, AssetLedger],
        custody: str = "amm",
        config: Optional[AMMConfig] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.store = store
        self.assets = assets
        self.custody = custody
        self.config = config or AMMConfig()
        if event_log is None:
            event_log = EventLog(
                maxlen=self.config.event_log_maxlen,
                validator=validate_event if self.config.validate_events else None,
            )
        self.event_log = event_log

        self.store.adopt_layout(self.RECORD_TYPES)

        self.access = AccessControl(store, self.event_log)
        self.upgrade_gate = UpgradeGate(self.access)
        self.liquidity = LiquidityManager(store, assets, custody, self.config, self.event_log)
        self.swaps = SwapEngine(store, assets, custody, self.config, self.event_log)

    # -------------------------------------------------------------------------
    # Initialization / roles
    # -------------------------------------------------------------------------

    def initialize(self, admin: str) -> None:
        """Однократная инициализация хранилища (AlreadyInitializedError повторно)."""
        self.access.initialize(admin)

    def has_role(self, role: Role, principal: str) -> bool:
        return self.access.has_role(role, principal)

    def grant_role(self, role: Role, principal: str, caller: str) -> bool:
        return self.access.grant_role(role, principal, caller)

    def revoke_role(self, role: Role, principal: str, caller: str) -> bool:
        return self.access.revoke_role(role, principal, caller)

    def renounce_role(self, role: Role, caller: str) -> bool:
        return self.access.renounce_role(role, caller)

    # -------------------------------------------------------------------------
    # Upgrade gate
    # -------------------------------------------------------------------------

    def upgrade_decision(self, principal: str) -> UpgradeGateResult:
        return self.upgrade_gate.evaluate(principal)

    def authorize_upgrade(self, principal: str) -> bool:
        """True только если principal состоит в UPGRADER."""
        return self.upgrade_gate.evaluate(principal).allowed

    def require_upgrade_authorized(self, principal: str) -> None:
        """
        Raises:
            AuthorizationError: Если upgrade не разрешён principal
        """
        decision = self.upgrade_gate.evaluate(principal)
        if not decision.allowed:
            raise AuthorizationError(f"Upgrade not authorized: {decision.details}")

    # -------------------------------------------------------------------------
    # Liquidity / swaps
    # -------------------------------------------------------------------------

    def add_liquidity(self, caller: str, asset_a: str, asset_b: str, amount_a: int, amount_b: int) -> LiquidityAdded:
        return self.liquidity.add_liquidity(caller, asset_a, asset_b, amount_a, amount_b)

    def remove_liquidity(self, caller: str, asset_a: str, asset_b: str, shares: int) -> LiquidityRemoved:
        return self.liquidity.remove_liquidity(caller, asset_a, asset_b, shares)

    def swap(self, caller: str, asset_in: str, asset_out: str, amount_in: int) -> Swap:
        return self.swaps.swap(caller, asset_in, asset_out, amount_in)

    def quote(self, asset_in: str, asset_out: str, amount_in: int) -> SwapQuote:
        return self.swaps.quote(asset_in, asset_out, amount_in)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def pool_state(self, asset_a: str, asset_b: str) -> PoolState:
        """
        Резервы в порядке аргументов и общее число долей.

        Несуществующий пул возвращается как нулевой.
        """
        key = PairKey.of(asset_a, asset_b)
        record = self.store.get_pool(key) or self.store.new_pool(key)
        return record.state_for(asset_a)

    def liquidity_pools(self, asset_a: str, asset_b: str) -> Optional[PoolRecord]:
        """Сырая запись пула (None, если пул не создан или удалён)."""
        return self.store.get_pool(PairKey.of(asset_a, asset_b))

    def liquidity_of(self, provider: str, asset_a: str, asset_b: str) -> int:
        return self.store.get_position(PairKey.of(asset_a, asset_b), provider)
