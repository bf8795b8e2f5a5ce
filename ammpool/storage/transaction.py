"""
Transaction — атомарное выполнение операции пула

Снапшот __dict__ всех участвующих объектов (хранилище и коллабораторы
активов) при входе; при любом исключении внутри блока или провале post_check
все объекты восстанавливаются из снапшота, исключение пробрасывается дальше.

Снапшот делается через deepcopy всего состояния: пулов, позиций и ролей хранилища
и балансов с allowance каждого актива в блоке. Стоимость каждой
операции растёт линейно с числом пулов, позиций и держателей активов,
а не с размером изменения.

    with Transaction([store, asset_a, asset_b], name="add_liquidity"):
        ...
"""

import logging
from copy import deepcopy
from typing import Callable, Iterable, Optional

from ammpool.core.errors import AMMError

logger = logging.getLogger(__name__)


class TransactionError(AMMError):
    """Провал post_check: операция откатана."""

    pass


class Transaction:
    def __init__(
        self,
        objects: Iterable[object],
        name: Optional[str] = None,
        post_check: Optional[Callable[[], bool]] = None,
    ):
        # один и тот же объект снапшотится один раз
        unique = {}
        for obj in objects:
            unique.setdefault(id(obj), obj)
        self.objects = list(unique.values())
        self.name = name or "tx"
        self.post_check = post_check
        self._snapshots = {}

    def __enter__(self):
        self._snapshots = {id(obj): deepcopy(obj.__dict__) for obj in self.objects}
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self._rollback()
            logger.debug("Transaction %s rolled back: %s: %s", self.name, exc_type.__name__, exc)
            return False  # re-raise exception
        if self.post_check and not self.post_check():
            self._rollback()
            raise TransactionError(f"Post-check failed for transaction {self.name}")
        return False

    def _rollback(self):
        for obj in self.objects:
            snap = self._snapshots.get(id(obj))
            if snap is not None:
                obj.__dict__.clear()
                obj.__dict__.update(deepcopy(snap))
