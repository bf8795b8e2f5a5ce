"""
Tests for Domain Models

Покрывает:
- PairKey: нормализация пары, канонический порядок, hashable
- PoolRecord: инварианты резервов/долей, ориентация, immutability
- LiquidityPosition
- Events: сериализация в контракт, EventLog
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from ammpool.core.domain import (
    EventLog,
    LiquidityAdded,
    LiquidityPosition,
    PairKey,
    PoolRecord,
    Role,
    RoleGranted,
    Swap,
)
from ammpool.core.errors import ValidationError


# =============================================================================
# PAIR KEY
# =============================================================================


class TestPairKey:
    """Тесты нормализации пары"""

    def test_unordered_pair_resolves_to_same_key(self) -> None:
        assert PairKey.of("token0", "token1") == PairKey.of("token1", "token0")

    def test_canonical_order(self) -> None:
        key = PairKey.of("zeta", "alpha")
        assert key.token0 == "alpha"
        assert key.token1 == "zeta"

    def test_identical_tokens_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Identical tokens"):
            PairKey.of("token0", "token0")

    def test_non_canonical_construction_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PairKey(token0="b", token1="a")

    def test_hashable_dict_key(self) -> None:
        pools = {PairKey.of("a", "b"): 1}
        assert pools[PairKey.of("b", "a")] == 1

    def test_is_token0(self) -> None:
        key = PairKey.of("a", "b")
        assert key.is_token0("a")
        assert not key.is_token0("b")
        with pytest.raises(ValueError, match="not part of pair"):
            key.is_token0("c")

    def test_str(self) -> None:
        assert str(PairKey.of("b", "a")) == "a/b"


# =============================================================================
# POOL RECORD
# =============================================================================


class TestPoolRecord:
    """Тесты записи пула"""

    def test_empty_pool(self) -> None:
        record = PoolRecord(token0="a", token1="b")
        assert record.is_empty
        assert (record.reserve0, record.reserve1, record.total_liquidity) == (0, 0, 0)

    def test_shares_without_reserves_rejected(self) -> None:
        """Инвариант: total_liquidity > 0 ⇒ оба резерва > 0"""
        with pytest.raises(PydanticValidationError, match="shares"):
            PoolRecord(token0="a", token1="b", reserve0=100, reserve1=0, total_liquidity=10)

    def test_reserves_without_shares_rejected(self) -> None:
        """Инвариант: total_liquidity == 0 ⇒ резервы нулевые"""
        with pytest.raises(PydanticValidationError, match="no shares"):
            PoolRecord(token0="a", token1="b", reserve0=1, reserve1=1, total_liquidity=0)

    def test_negative_reserve_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PoolRecord(token0="a", token1="b", reserve0=-1, reserve1=1, total_liquidity=1)

    def test_float_reserve_rejected_in_strict_mode(self) -> None:
        with pytest.raises(PydanticValidationError):
            PoolRecord(token0="a", token1="b", reserve0=1.0, reserve1=1, total_liquidity=1)

    def test_frozen(self) -> None:
        record = PoolRecord(token0="a", token1="b", reserve0=1, reserve1=1, total_liquidity=1)
        with pytest.raises(PydanticValidationError):
            record.reserve0 = 5

    def test_reserves_oriented_to_caller(self) -> None:
        record = PoolRecord(token0="a", token1="b", reserve0=100, reserve1=300, total_liquidity=50)
        assert record.reserves_for("a") == (100, 300)
        assert record.reserves_for("b") == (300, 100)

    def test_with_oriented_maps_back_to_canonical(self) -> None:
        record = PoolRecord(token0="a", token1="b")
        updated = record.with_oriented("b", 300, 100, 50)
        assert (updated.reserve0, updated.reserve1) == (100, 300)
        assert record.is_empty  # исходная запись не изменилась

    def test_updated_revalidates(self) -> None:
        record = PoolRecord(token0="a", token1="b", reserve0=1, reserve1=1, total_liquidity=1)
        with pytest.raises(PydanticValidationError):
            record.updated(total_liquidity=0)

    def test_state_for(self) -> None:
        record = PoolRecord(token0="a", token1="b", reserve0=100, reserve1=300, total_liquidity=50)
        state = record.state_for("b")
        assert (state.reserve_a, state.reserve_b, state.total_liquidity_shares) == (300, 100, 50)


# =============================================================================
# POSITION
# =============================================================================


class TestLiquidityPosition:
    def test_of_key(self) -> None:
        key = PairKey.of("b", "a")
        position = LiquidityPosition.of(key, "alice", 10)
        assert position.key == key
        assert position.shares == 10

    def test_negative_shares_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            LiquidityPosition(token0="a", token1="b", provider="alice", shares=-1)


# =============================================================================
# EVENTS
# =============================================================================


class TestEvents:
    """Тесты событий и журнала"""

    def test_to_contract(self) -> None:
        event = LiquidityAdded(
            provider="owner", asset_a="token0", asset_b="token1",
            amount_a=100, amount_b=100, shares_minted=100,
        )
        assert event.to_contract() == {
            "event": "LiquidityAdded",
            "provider": "owner",
            "asset_a": "token0",
            "asset_b": "token1",
            "amount_a": 100,
            "amount_b": 100,
            "shares_minted": 100,
        }

    def test_role_serialized_by_value(self) -> None:
        event = RoleGranted(role=Role.UPGRADER, account="bob", sender="owner")
        assert event.to_contract()["role"] == "UPGRADER_ROLE"

    def test_zero_swap_output_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            Swap(trader="t", asset_in="a", asset_out="b", amount_in=1, amount_out=0)

    def test_event_log_tail_and_filter(self) -> None:
        log = EventLog()
        for i in range(1, 4):
            log.emit(Swap(trader="t", asset_in="a", asset_out="b", amount_in=i, amount_out=i))
        log.emit(RoleGranted(role=Role.ADMIN, account="x", sender="y"))

        assert len(log) == 4
        assert [e.amount_in for e in log.of_type(Swap)] == [1, 2, 3]
        assert log.tail(1) == [log.last()]
        assert log.tail(0) == []
        assert len(log.tail(100)) == 4

    def test_event_log_maxlen(self) -> None:
        log = EventLog(maxlen=2)
        for i in range(1, 4):
            log.emit(Swap(trader="t", asset_in="a", asset_out="b", amount_in=i, amount_out=i))
        assert [e.amount_in for e in log] == [2, 3]

    def test_event_log_validator_rejects_before_append(self) -> None:
        def reject(data):
            raise ValueError(f"rejected {data['event']}")

        log = EventLog(validator=reject)
        with pytest.raises(ValueError, match="rejected Swap"):
            log.emit(Swap(trader="t", asset_in="a", asset_out="b", amount_in=1, amount_out=1))
        assert len(log) == 0

    def test_event_log_check_does_not_append(self) -> None:
        log = EventLog()
        event = Swap(trader="t", asset_in="a", asset_out="b", amount_in=1, amount_out=1)

        assert log.check(event) is event
        assert len(log) == 0
        assert log.append(event) is event
        assert log.last() == event
