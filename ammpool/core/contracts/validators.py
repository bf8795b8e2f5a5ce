"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- events.json (LiquidityAdded, LiquidityRemoved, Swap, RoleGranted, RoleRevoked)
- store_snapshot.json (снапшот PersistentStore)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в ammpool/contracts/schema/ (package data).
    """

    def __init__(self):
        # Корень пакета ammpool (3 уровня вверх от этого файла)
        self._schema_dir = Path(__file__).parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'events')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class EventValidator(ContractValidator):
    """Валидатор для контракта событий пула."""

    def __init__(self):
        super().__init__("events")


class StoreSnapshotValidator(ContractValidator):
    """Валидатор для снапшота PersistentStore."""

    def __init__(self):
        super().__init__("store_snapshot")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_EVENT_VALIDATOR = EventValidator()
_STORE_SNAPSHOT_VALIDATOR = StoreSnapshotValidator()


def validate_event(data: Dict[str, Any]) -> None:
    """
    Валидация записи события (PoolEvent.to_contract()).

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    _EVENT_VALIDATOR.validate(data)


def validate_store_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация снапшота хранилища.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    _STORE_SNAPSHOT_VALIDATOR.validate(data)


__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "EventValidator",
    "StoreSnapshotValidator",
    "ValidationError",
    "validate_event",
    "validate_store_snapshot",
]
