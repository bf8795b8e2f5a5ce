"""Access — ролевая авторизация и Upgrade Gate."""

from .access_control import AccessControl
from .upgrade_gate import UpgradeGate, UpgradeGateResult

__all__ = [
    "AccessControl",
    "UpgradeGate",
    "UpgradeGateResult",
]
