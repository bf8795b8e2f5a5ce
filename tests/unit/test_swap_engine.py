"""
Тесты для Swap Engine

Проверяет:
1. Котировку и исполнение по кривой постоянного произведения
2. Комиссию (удерживается из amount_in, остаётся в резерве)
3. Отказы: пустой пул, нулевой выход, неположительная сумма
4. Отсутствие побочных эффектов у quote() и откат при отказе актива
5. Отказ контракта события до перевода средств
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from ammpool import AMMConfig, AMMPool, PersistentStore
from ammpool.assets import InMemoryAsset
from ammpool.core.domain import EventLog, Swap
from ammpool.core.errors import AssetTransferError, InsufficientBalanceError, ValidationError

CUSTODY = "amm"
FUNDING = 10**30


def make_pool(config=None, liquidity=(1000, 1000), event_log=None) -> AMMPool:
    assets = {"token0": InMemoryAsset("token0"), "token1": InMemoryAsset("token1")}
    for asset in assets.values():
        for principal in ("owner", "user1"):
            asset.mint(principal, FUNDING)
            asset.approve(principal, CUSTODY, FUNDING)
    pool = AMMPool(PersistentStore(), assets, custody=CUSTODY, config=config, event_log=event_log)
    pool.initialize("owner")
    if liquidity:
        pool.add_liquidity("owner", "token0", "token1", *liquidity)
    return pool


def reserves(pool: AMMPool, asset_a: str = "token0", asset_b: str = "token1"):
    state = pool.pool_state(asset_a, asset_b)
    return state.reserve_a, state.reserve_b


def reject_event(event_name: str):
    def validator(contract) -> None:
        if contract["event"] == event_name:
            raise ValidationError(f"{event_name} rejected")

    return validator


@pytest.fixture
def pool():
    return make_pool()


# =============================================================================
# SWAP
# =============================================================================


class TestSwap:
    """Тесты исполнения свопа"""

    def test_swap_output_matches_balance_increase(self, pool) -> None:
        """Пул 1000/1000, user1 меняет 10 token0 → 1000 - 1_000_000 // 1010 = 10 token1"""
        token1 = pool.assets["token1"]
        before = token1.balance_of("user1")

        event = pool.swap("user1", "token0", "token1", 10)

        assert event == Swap(trader="user1", asset_in="token0", asset_out="token1", amount_in=10, amount_out=10)
        assert token1.balance_of("user1") - before == event.amount_out
        assert reserves(pool) == (1010, 990)
        assert pool.event_log.last() == event

    def test_reverse_direction(self, pool) -> None:
        event = pool.swap("user1", "token1", "token0", 100)
        assert event.amount_out == 91
        assert reserves(pool) == (909, 1100)

    def test_reserves_move_strictly(self, pool) -> None:
        for amount_in in (1, 3, 10, 77, 500):
            reserve0, reserve1 = reserves(pool)
            pool.swap("user1", "token0", "token1", amount_in)
            assert reserves(pool)[0] == reserve0 + amount_in
            assert reserves(pool)[1] < reserve1

    def test_shares_unchanged(self, pool) -> None:
        pool.swap("user1", "token0", "token1", 10)
        assert pool.pool_state("token0", "token1").total_liquidity_shares == 1000
        assert pool.liquidity_of("owner", "token0", "token1") == 1000

    def test_custody_matches_reserves(self, pool) -> None:
        pool.swap("user1", "token0", "token1", 250)
        pool.swap("user1", "token1", "token0", 40)
        reserve0, reserve1 = reserves(pool)
        assert pool.assets["token0"].balance_of(CUSTODY) == reserve0
        assert pool.assets["token1"].balance_of(CUSTODY) == reserve1

    def test_fee_stays_in_pool(self) -> None:
        pool = make_pool(config=AMMConfig(swap_fee_bps=30), liquidity=(10_000, 10_000))
        event = pool.swap("user1", "token0", "token1", 1000)

        assert event.amount_out == 907
        assert reserves(pool) == (11_000, 9093)

    def test_fee_reduces_output(self) -> None:
        no_fee = make_pool(liquidity=(10_000, 10_000)).quote("token0", "token1", 1000)
        with_fee = make_pool(AMMConfig(swap_fee_bps=30), liquidity=(10_000, 10_000)).quote("token0", "token1", 1000)
        assert with_fee.amount_out < no_fee.amount_out


# =============================================================================
# REJECTIONS
# =============================================================================


class TestSwapRejections:
    """Тесты отказов"""

    def test_identical_tokens(self, pool) -> None:
        with pytest.raises(ValidationError, match="Identical tokens"):
            pool.swap("user1", "token0", "token0", 10)

    @pytest.mark.parametrize("amount_in", [0, -10])
    def test_non_positive_amount(self, pool, amount_in: int) -> None:
        with pytest.raises(ValidationError, match="Amount must be positive"):
            pool.swap("user1", "token0", "token1", amount_in)

    def test_float_amount(self, pool) -> None:
        with pytest.raises(TypeError):
            pool.swap("user1", "token0", "token1", 10.0)

    def test_missing_pool(self) -> None:
        pool = make_pool(liquidity=None)
        with pytest.raises(InsufficientBalanceError, match="Insufficient liquidity"):
            pool.swap("user1", "token0", "token1", 10)

    def test_emptied_pool(self, pool) -> None:
        pool.remove_liquidity("owner", "token0", "token1", 1000)
        with pytest.raises(InsufficientBalanceError, match="Insufficient liquidity"):
            pool.swap("user1", "token0", "token1", 10)

    def test_zero_output(self) -> None:
        """Комиссия 30 bps съедает вход 1: effective_in == 0"""
        pool = make_pool(AMMConfig(swap_fee_bps=30))
        with pytest.raises(InsufficientBalanceError, match="Insufficient output amount"):
            pool.swap("user1", "token0", "token1", 1)
        assert reserves(pool) == (1000, 1000)

    def test_output_draining_reserve_rejected(self, pool) -> None:
        """1_000_000 // (1000 + 10**20) == 0: выход равен всему резерву"""
        with pytest.raises(InsufficientBalanceError, match="Insufficient output amount"):
            pool.swap("user1", "token0", "token1", 10**20)
        assert reserves(pool) == (1000, 1000)

    def test_missing_allowance_rolls_back(self, pool) -> None:
        pool.assets["token0"].approve("user1", CUSTODY, 5)
        events_before = len(pool.event_log)

        with pytest.raises(AssetTransferError):
            pool.swap("user1", "token0", "token1", 10)

        assert reserves(pool) == (1000, 1000)
        assert pool.assets["token0"].balance_of("user1") == FUNDING
        assert len(pool.event_log) == events_before

    def test_empty_trader_rejected_before_transfer(self, pool) -> None:
        snapshot = pool.store.snapshot()
        events_before = len(pool.event_log)

        with pytest.raises(PydanticValidationError):
            pool.swap("", "token0", "token1", 10)

        assert pool.store.snapshot() == snapshot
        assert pool.assets["token0"].balance_of(CUSTODY) == 1000
        assert pool.assets["token1"].balance_of(CUSTODY) == 1000
        assert len(pool.event_log) == events_before

    def test_rejected_event_contract_leaves_state(self) -> None:
        pool = make_pool(event_log=EventLog(validator=reject_event("Swap")))
        events_before = len(pool.event_log)

        with pytest.raises(ValidationError, match="Swap rejected"):
            pool.swap("user1", "token0", "token1", 10)

        assert reserves(pool) == (1000, 1000)
        assert pool.assets["token0"].balance_of("user1") == FUNDING
        assert pool.assets["token1"].balance_of("user1") == FUNDING
        assert len(pool.event_log) == events_before


# =============================================================================
# QUOTE / QUERIES
# =============================================================================


class TestQuote:
    """Тесты котировки и запросов"""

    def test_quote_matches_swap(self, pool) -> None:
        quote = pool.quote("token0", "token1", 123)
        event = pool.swap("user1", "token0", "token1", 123)
        assert quote.amount_out == event.amount_out

    def test_quote_has_no_side_effects(self, pool) -> None:
        snapshot = pool.store.snapshot()
        events_before = len(pool.event_log)

        pool.quote("token0", "token1", 10)

        assert pool.store.snapshot() == snapshot
        assert len(pool.event_log) == events_before

    def test_output_monotonic_in_input(self, pool) -> None:
        outs = [pool.quote("token0", "token1", amount).amount_out for amount in (10, 50, 100, 500, 5000)]
        assert outs == sorted(outs)

    def test_pool_state_idempotent(self, pool) -> None:
        assert pool.pool_state("token0", "token1") == pool.pool_state("token0", "token1")

    def test_pool_state_of_missing_pool(self, pool) -> None:
        state = pool.pool_state("token0", "token9")
        assert (state.reserve_a, state.reserve_b, state.total_liquidity_shares) == (0, 0, 0)


# =============================================================================
# CONFIG
# =============================================================================


class TestConfig:
    """Тесты AMMConfig"""

    def test_defaults(self) -> None:
        config = AMMConfig()
        assert config.swap_fee_bps == 0
        assert config.retain_empty_pools

    @pytest.mark.parametrize("fee_bps", [-1, 10_000, 1.5])
    def test_invalid_fee(self, fee_bps) -> None:
        with pytest.raises(ValueError, match="swap_fee_bps"):
            AMMConfig(swap_fee_bps=fee_bps)

    def test_invalid_event_log_maxlen(self) -> None:
        with pytest.raises(ValueError, match="event_log_maxlen"):
            AMMConfig(event_log_maxlen=0)

    def test_event_log_maxlen_applied(self) -> None:
        pool = make_pool(AMMConfig(event_log_maxlen=2))
        pool.swap("user1", "token0", "token1", 10)
        assert len(pool.event_log) == 2
        assert isinstance(pool.event_log.last(), Swap)
