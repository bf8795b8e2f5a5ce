"""Upgrade Gate — предикат авторизации смены logic module

Внешний dispatcher спрашивает gate перед тем, как привязать хранилище
к новому logic module. Gate не переносит и не копирует состояние:
это вся ответственность ядра, связанная с upgrade.

Порядок проверок:
1. Хранилище инициализировано → иначе deny
2. principal состоит в UPGRADER → иначе deny
"""

import logging
from dataclasses import dataclass

from ammpool.access.access_control import AccessControl
from ammpool.core.domain.roles import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpgradeGateResult:
    """Результат Upgrade Gate."""

    allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    principal: str

    # Детали
    details: str

    def __bool__(self) -> bool:
        return self.allowed


class UpgradeGate:
    """authorizeUpgrade(principal) -> allow | deny."""

    def __init__(self, access_control: AccessControl):
        self.access_control = access_control

    def evaluate(self, principal: str) -> UpgradeGateResult:
        if not self.access_control.store.initialized:
            return UpgradeGateResult(
                allowed=False,
                block_reason="not_initialized",
                principal=principal,
                details="Store is not initialized: no upgrader exists",
            )

        if not self.access_control.has_role(Role.UPGRADER, principal):
            logger.warning("Upgrade denied for %s", principal)
            return UpgradeGateResult(
                allowed=False,
                block_reason="missing_upgrader_role",
                principal=principal,
                details=f"{principal} does not hold {Role.UPGRADER.value}",
            )

        logger.info("Upgrade authorized for %s", principal)
        return UpgradeGateResult(
            allowed=True,
            block_reason="",
            principal=principal,
            details=f"{principal} holds {Role.UPGRADER.value}",
        )
