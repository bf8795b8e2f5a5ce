"""
Access Control — таблица возможностей роль → множество principal

Проверка роли выполняется синхронно, guard clause до любой мутации.
События ролей проверяются по контракту до изменения таблицы членства.
Таблица членства хранится в PersistentStore, поэтому переживает смену
logic module.

Операции:
- initialize(admin): ADMIN + UPGRADER для admin, ровно один раз на хранилище
- has_role(role, principal)
- grant_role / revoke_role: только для ADMIN
- renounce_role: principal отказывается от собственной роли
"""

import logging
from typing import Optional

from ammpool.core.domain.events import EventLog, RoleGranted, RoleRevoked
from ammpool.core.domain.roles import Role
from ammpool.core.errors import AlreadyInitializedError, AuthorizationError
from ammpool.storage.store import PersistentStore

logger = logging.getLogger(__name__)


class AccessControl:
    """
    Ролевая авторизация поверх PersistentStore.

    Args:
        store: Хранилище с таблицей ролей
        event_log: Журнал для RoleGranted / RoleRevoked
    """

    def __init__(self, store: PersistentStore, event_log: Optional[EventLog] = None):
        self.store = store
        self.event_log = event_log if event_log is not None else EventLog()

    def initialize(self, admin: str) -> None:
        """
        Однократная инициализация: admin получает ADMIN и UPGRADER.

        Raises:
            AlreadyInitializedError: При повторном вызове на том же хранилище
        """
        if self.store.initialized:
            raise AlreadyInitializedError("Contract is already initialized")
        if not admin:
            raise ValueError("admin principal must be non-empty")

        events = [
            self.event_log.check(RoleGranted(role=role, account=admin, sender=admin))
            for role in (Role.ADMIN, Role.UPGRADER)
        ]

        self.store.initialized = True
        for event in events:
            self.store.add_role_member(event.role, admin)
            self.event_log.append(event)
        logger.info("Access control initialized, admin=%s", admin)

    def has_role(self, role: Role, principal: str) -> bool:
        return principal in self.store.role_members(Role(role))

    def require_role(self, role: Role, principal: str) -> None:
        """
        Guard clause для привилегированных операций.

        Raises:
            AuthorizationError: Если principal не состоит в роли
        """
        role = Role(role)
        if not self.has_role(role, principal):
            logger.warning("Authorization denied: %s lacks %s", principal, role.value)
            raise AuthorizationError(f"AccessControl: account {principal} is missing role {role.value}")

    def grant_role(self, role: Role, principal: str, caller: str) -> bool:
        """
        Выдача роли (только ADMIN).

        Returns:
            True если роль выдана, False если principal уже состоял в роли
        """
        role = Role(role)
        self.require_role(Role.ADMIN, caller)
        if self.has_role(role, principal):
            return False
        event = self.event_log.check(RoleGranted(role=role, account=principal, sender=caller))
        self.store.add_role_member(role, principal)
        self.event_log.append(event)
        logger.info("Role %s granted to %s by %s", role.value, principal, caller)
        return True

    def revoke_role(self, role: Role, principal: str, caller: str) -> bool:
        """
        Отзыв роли (только ADMIN).

        Returns:
            True если роль отозвана, False если principal в роли не состоял
        """
        role = Role(role)
        self.require_role(Role.ADMIN, caller)
        if not self.has_role(role, principal):
            return False
        event = self.event_log.check(RoleRevoked(role=role, account=principal, sender=caller))
        self.store.remove_role_member(role, principal)
        self.event_log.append(event)
        logger.info("Role %s revoked from %s by %s", role.value, principal, caller)
        return True

    def renounce_role(self, role: Role, caller: str) -> bool:
        """Отказ от собственной роли; ADMIN не требуется."""
        role = Role(role)
        if not self.has_role(role, caller):
            return False
        event = self.event_log.check(RoleRevoked(role=role, account=caller, sender=caller))
        self.store.remove_role_member(role, caller)
        self.event_log.append(event)
        logger.info("Role %s renounced by %s", role.value, caller)
        return True
