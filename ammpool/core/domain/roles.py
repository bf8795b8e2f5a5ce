"""
Roles — Идентификаторы ролей

Роли образуют отношение many-to-many с principal-идентификаторами;
таблица членства хранится в PersistentStore и переживает смену логики.
"""

from enum import Enum


class Role(str, Enum):
    """
    Роль доступа.

    - ADMIN: управляет ролями (grant/revoke)
    - UPGRADER: может авторизовать смену logic module
    """

    ADMIN = "DEFAULT_ADMIN_ROLE"
    UPGRADER = "UPGRADER_ROLE"
