"""
Errors — Таксономия ошибок пулового ядра

Все публичные операции fail-closed: любая ошибка прерывает операцию целиком,
состояние хранилища и коллабораторов не меняется.

Сообщения стабильны и используются вызывающей стороной для классификации:
- "Identical tokens"
- "Amounts must be positive" / "Amount must be positive"
- "Insufficient user liquidity"
"""


# =============================================================================
# BASE
# =============================================================================


class AMMError(Exception):
    """Базовое исключение пулового ядра."""

    pass


# =============================================================================
# TAXONOMY
# =============================================================================


class ValidationError(AMMError, ValueError):
    """
    Нарушение предусловий операции.

    Идентичная пара активов, неположительные суммы, нулевой выпуск долей.
    """

    pass


class InsufficientBalanceError(AMMError):
    """
    Недостаточно средств для операции.

    Вывод долей больше, чем у провайдера; выход свопа превышает резерв.
    """

    pass


class AuthorizationError(AMMError, PermissionError):
    """Привилегированная операция от principal без нужной роли."""

    pass


class AlreadyInitializedError(AMMError):
    """Повторный вызов initialize на том же хранилище."""

    pass


class StorageLayoutError(AMMError):
    """
    Несовместимая схема хранилища.

    Новый logic module может только дописывать поля в конец записи;
    переупорядочивание, переименование или удаление полей запрещено,
    иначе ранее сохранённые значения будут интерпретированы неверно.
    """

    pass


class AssetTransferError(AMMError):
    """Перевод актива не выполнен (баланс или allowance недостаточны)."""

    pass
