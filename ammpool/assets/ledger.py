"""
Asset Ledger — коллаборатор взаимозаменяемого актива

Ядро пула не хранит балансы активов, только счётчики резервов. Перемещение
средств выполняет внешний коллаборатор с возможностями transfer,
transfer_from, approve и запроса баланса. Перевод либо выполняется целиком,
либо завершается исключением.

InMemoryAsset — эталонная реализация в памяти (mint/approve/transfer) для
тестов и локальных сценариев.
"""

import logging
from typing import Dict, Mapping, Protocol, Tuple, runtime_checkable

from ammpool.core.errors import AssetTransferError, ValidationError
from ammpool.core.math.numerical_safeguards import validate_non_negative

logger = logging.getLogger(__name__)


# =============================================================================
# PROTOCOL
# =============================================================================


@runtime_checkable
class AssetLedger(Protocol):
    """Возможности актива, которые использует ядро."""

    asset_id: str

    def balance_of(self, owner: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> None: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None: ...


def resolve_asset(assets: Mapping[str, AssetLedger], asset_id: str) -> AssetLedger:
    """
    Коллаборатор по идентификатору актива.

    Raises:
        ValidationError: Если актив не зарегистрирован
    """
    try:
        return assets[asset_id]
    except KeyError:
        raise ValidationError(f"Unknown asset: {asset_id}") from None


# =============================================================================
# IN-MEMORY ASSET
# =============================================================================


class InMemoryAsset:
    """
    Актив в памяти с семантикой ERC-20.

    Args:
        asset_id: Идентификатор актива
        symbol: Тикер (для логов)
    """

    def __init__(self, asset_id: str, symbol: str = "") -> None:
        self.asset_id = asset_id
        self.symbol = symbol or asset_id
        self.total_supply: int = 0
        self.balances: Dict[str, int] = {}
        self.allowances: Dict[Tuple[str, str], int] = {}

    def balance_of(self, owner: str) -> int:
        return self.balances.get(owner, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner, spender), 0)

    def mint(self, to: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        self.balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        self.allowances[(owner, spender)] = amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """
        Перевод от sender к recipient.

        Raises:
            AssetTransferError: Если баланс sender недостаточен
        """
        validate_non_negative(amount, "amount")
        balance = self.balance_of(sender)
        if balance < amount:
            raise AssetTransferError(
                f"{self.symbol}: transfer amount {amount} exceeds balance {balance} of {sender}"
            )
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        logger.debug("%s transfer %s -> %s: %d", self.symbol, sender, recipient, amount)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """
        Перевод от owner к recipient в пределах allowance для spender.

        Raises:
            AssetTransferError: Если allowance или баланс owner недостаточны
        """
        validate_non_negative(amount, "amount")
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise AssetTransferError(
                f"{self.symbol}: insufficient allowance {allowed} of {owner} for {spender}, need {amount}"
            )
        self.transfer(owner, recipient, amount)
        self.allowances[(owner, spender)] = allowed - amount
