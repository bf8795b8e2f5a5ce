"""
PersistentStore — Хранилище состояния пулов, отделённое от логики

Хранилище адресуется независимо от logic module, который с ним работает:
logic module держит только ссылку на store и никогда не копирует данные.
Смена логики (upgrade) сохраняет все накопленные записи.

Дисциплина схемы (append-only):
- Для каждого типа записи хранится упорядоченный кортеж имён полей
  (StorageLayout).
- Новый logic module объявляет свои модели записей; принятие схемы
  разрешено, только если старый кортеж полей — префикс нового.
- Переупорядочивание, переименование или удаление поля → StorageLayoutError,
  схема и записи хранилища не меняются.
- При принятии расширенной схемы существующие записи пересобираются новой
  моделью; дописанные поля получают значения по умолчанию.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel

from ammpool.core.contracts import validate_store_snapshot
from ammpool.core.domain.pool import PairKey, PoolRecord
from ammpool.core.domain.position import LiquidityPosition
from ammpool.core.domain.roles import Role
from ammpool.core.errors import StorageLayoutError

logger = logging.getLogger(__name__)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

SNAPSHOT_SCHEMA_VERSION = "1"

POOL_RECORD = "pool"
POSITION_RECORD = "position"


# =============================================================================
# STORAGE LAYOUT
# =============================================================================


@dataclass(frozen=True)
class StorageLayout:
    """
    Упорядоченные поля каждого типа записи.

    records: {"pool": ("token0", "token1", ...), "position": (...)}
    """

    records: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_models(cls, record_types: Mapping[str, Type[BaseModel]]) -> "StorageLayout":
        return cls(records={name: tuple(model.model_fields) for name, model in record_types.items()})

    def incompatibilities(self, newer: "StorageLayout") -> list[str]:
        """
        Нарушения append-only дисциплины при переходе self → newer.

        Returns:
            Список описаний нарушений (пустой, если newer совместим)
        """
        problems = []
        for name, old_fields in self.records.items():
            new_fields = newer.records.get(name)
            if new_fields is None:
                problems.append(f"record type {name!r} dropped")
                continue
            if tuple(new_fields[: len(old_fields)]) != tuple(old_fields):
                problems.append(
                    f"record type {name!r}: fields {list(old_fields)} are not a prefix of {list(new_fields)}"
                )
        return problems

    def to_dict(self) -> Dict[str, list]:
        return {name: list(fields) for name, fields in self.records.items()}


# =============================================================================
# PERSISTENT STORE
# =============================================================================


class PersistentStore:
    """
    Хранилище пулов, позиций и ролей.

    Контракт:
    - get_pool(key) -> PoolRecord | None, put_pool(key, record)
    - get_position(key, provider) -> int, put_position(key, provider, shares)
    - role_members(role), add_role_member, remove_role_member
    - initialized — флаг однократной инициализации
    """

    def __init__(self) -> None:
        self.initialized: bool = False
        self.record_types: Dict[str, Type[BaseModel]] = {
            POOL_RECORD: PoolRecord,
            POSITION_RECORD: LiquidityPosition,
        }
        self.layout: StorageLayout = StorageLayout.from_models(self.record_types)

        self._pools: Dict[PairKey, PoolRecord] = {}
        self._positions: Dict[PairKey, Dict[str, LiquidityPosition]] = {}
        self._roles: Dict[Role, set] = {role: set() for role in Role}

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def adopt_layout(self, record_types: Mapping[str, Type[BaseModel]]) -> StorageLayout:
        """
        Принятие схемы записей нового logic module.

        Args:
            record_types: {"pool": модель пула, "position": модель позиции}

        Returns:
            Принятая StorageLayout

        Raises:
            StorageLayoutError: Если новая схема не является append-only
                расширением текущей
        """
        merged = {**self.record_types, **record_types}
        newer = StorageLayout.from_models(merged)
        problems = self.layout.incompatibilities(newer)
        if problems:
            raise StorageLayoutError("; ".join(problems))

        if newer == self.layout and merged == self.record_types:
            return self.layout

        pool_model = merged[POOL_RECORD]
        position_model = merged[POSITION_RECORD]
        pools = {key: pool_model.model_validate(rec.model_dump()) for key, rec in self._pools.items()}
        positions = {
            key: {p: position_model.model_validate(pos.model_dump()) for p, pos in by_provider.items()}
            for key, by_provider in self._positions.items()
        }

        self._pools = pools
        self._positions = positions
        self.record_types = merged
        self.layout = newer
        logger.info("Storage layout adopted: %s", newer.to_dict())
        return newer

    # -------------------------------------------------------------------------
    # Pools
    # -------------------------------------------------------------------------

    def get_pool(self, key: PairKey) -> Optional[PoolRecord]:
        return self._pools.get(key)

    def put_pool(self, key: PairKey, record: PoolRecord) -> None:
        if record.key != key:
            raise ValueError(f"Pool record {record.key} stored under key {key}")
        self._pools[key] = record

    def delete_pool(self, key: PairKey) -> None:
        self._pools.pop(key, None)

    def iter_pools(self) -> Iterator[PoolRecord]:
        return iter(list(self._pools.values()))

    def new_pool(self, key: PairKey) -> PoolRecord:
        """Пустая запись пула в модели текущей схемы."""
        return self.record_types[POOL_RECORD](token0=key.token0, token1=key.token1)

    # -------------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------------

    def get_position(self, key: PairKey, provider: str) -> int:
        position = self._positions.get(key, {}).get(provider)
        return position.shares if position is not None else 0

    def put_position(self, key: PairKey, provider: str, shares: int) -> None:
        """Запись долей провайдера; shares == 0 удаляет позицию."""
        by_provider = self._positions.setdefault(key, {})
        if shares == 0:
            by_provider.pop(provider, None)
            if not by_provider:
                self._positions.pop(key, None)
            return
        existing = by_provider.get(provider)
        if existing is not None:
            by_provider[provider] = type(existing).model_validate({**existing.model_dump(), "shares": shares})
        else:
            model = self.record_types[POSITION_RECORD]
            by_provider[provider] = model(
                token0=key.token0, token1=key.token1, provider=provider, shares=shares
            )

    def iter_positions(self, key: PairKey) -> Iterator[Tuple[str, int]]:
        for provider, position in list(self._positions.get(key, {}).items()):
            yield provider, position.shares

    def total_position_shares(self, key: PairKey) -> int:
        return sum(shares for _, shares in self.iter_positions(key))

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def role_members(self, role: Role) -> FrozenSet[str]:
        return frozenset(self._roles[Role(role)])

    def add_role_member(self, role: Role, principal: str) -> bool:
        """Returns: True если principal добавлен (ранее не состоял в роли)."""
        members = self._roles[Role(role)]
        if principal in members:
            return False
        members.add(principal)
        return True

    def remove_role_member(self, role: Role, principal: str) -> bool:
        """Returns: True если principal удалён (ранее состоял в роли)."""
        members = self._roles[Role(role)]
        if principal not in members:
            return False
        members.discard(principal)
        return True

    # -------------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------------

    def pool_is_consistent(self, key: PairKey) -> bool:
        """Сумма долей позиций равна total_liquidity пула."""
        record = self.get_pool(key)
        total = record.total_liquidity if record is not None else 0
        return self.total_position_shares(key) == total

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """
        Сериализуемый снапшот хранилища.

        Записи выводятся в порядке полей схемы; снапшот проходит валидацию
        ammpool/contracts/schema/store_snapshot.json.
        """
        data = {
            "schema_version": SNAPSHOT_SCHEMA_VERSION,
            "initialized": self.initialized,
            "layout": self.layout.to_dict(),
            "pools": [rec.model_dump() for _, rec in sorted(self._pools.items(), key=lambda kv: str(kv[0]))],
            "positions": [
                pos.model_dump()
                for key in sorted(self._positions, key=str)
                for _, pos in sorted(self._positions[key].items())
            ],
            "roles": {role.value: sorted(members) for role, members in self._roles.items()},
        }
        validate_store_snapshot(data)
        return data

    @classmethod
    def from_snapshot(
        cls,
        data: Dict[str, Any],
        record_types: Optional[Mapping[str, Type[BaseModel]]] = None,
    ) -> "PersistentStore":
        """
        Восстановление хранилища из снапшота.

        Args:
            data: Снапшот (результат snapshot())
            record_types: Модели записей, если снапшот сделан расширенной схемой

        Raises:
            jsonschema.ValidationError: Если снапшот не соответствует контракту
            StorageLayoutError: Если схема снапшота несовместима с моделями
        """
        validate_store_snapshot(data)
        store = cls()
        if record_types:
            store.adopt_layout(record_types)

        stored = StorageLayout(records={name: tuple(fields) for name, fields in data["layout"].items()})
        problems = stored.incompatibilities(store.layout)
        if problems:
            raise StorageLayoutError("; ".join(problems))

        pool_model = store.record_types[POOL_RECORD]
        position_model = store.record_types[POSITION_RECORD]
        for raw in data["pools"]:
            record = pool_model.model_validate(raw)
            store._pools[record.key] = record
        for raw in data["positions"]:
            position = position_model.model_validate(raw)
            store._positions.setdefault(position.key, {})[position.provider] = position
        for role_name, members in data["roles"].items():
            store._roles[Role(role_name)] = set(members)
        store.initialized = data["initialized"]
        return store

    def save(self, path: Union[str, Path]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.snapshot(), f, indent=2)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        record_types: Optional[Mapping[str, Type[BaseModel]]] = None,
    ) -> "PersistentStore":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_snapshot(data, record_types)
