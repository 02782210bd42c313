"""Scenario and property tests for the volatility-burst strategy."""

import dataclasses

import numpy as np
import pytest

from conftest import make_candles
from vol_regime_bot.core.config import build_strategy_config
from vol_regime_bot.core.errors import EmptyInputError
from vol_regime_bot.core.types import PositionState, StrategyResult, StrategyStatus
from vol_regime_bot.strategies.summary import summarize_signal
from vol_regime_bot.strategies.vol_burst import (
    VolBurstStrategy,
    candles_to_frame,
    evaluate_strategy,
    evaluate_strategy_history,
)

BREAKOUT_BAR = 16


def _random_walk(n=400, seed=7):
    rng = np.random.default_rng(seed)
    sigma = np.where(np.arange(n) < 250, 0.005, 0.04)
    closes = 100 * np.exp(np.cumsum(rng.normal(0, sigma)))
    return make_candles([float(c) for c in closes], interval="4h")


def test_empty_input():
    with pytest.raises(EmptyInputError):
        evaluate_strategy([], build_strategy_config(3.0))
    with pytest.raises(EmptyInputError):
        evaluate_strategy_history([], build_strategy_config(3.0))


def test_single_candle():
    result = evaluate_strategy(make_candles([100.0]), build_strategy_config(3.0))
    assert result.status == StrategyStatus.FLAT
    assert result.rv is None and result.rv_pct is None and result.quiet_min is None
    assert result.breakout_direction == 0
    assert result.price == 100.0


def test_flat_prices_never_trade():
    candles = make_candles([100.0] * 50, interval="4h")
    history = evaluate_strategy_history(candles, build_strategy_config(3.0))
    assert len(history) == 50
    for r in history:
        assert r.rv is None or r.rv == 0.0
        assert r.status == StrategyStatus.FLAT
        assert r.target_leverage == 0.0
        assert r.breakout_direction == 0


def test_quiet_then_breakout_enters_long(breakout_candles, small_config):
    history = evaluate_strategy_history(breakout_candles, small_config)
    before, bar = history[BREAKOUT_BAR - 1], history[BREAKOUT_BAR]
    assert before.quiet_condition is True
    assert before.burst_condition is False
    assert before.status == StrategyStatus.FLAT
    assert bar.burst_condition is True
    assert bar.quiet_condition is True
    assert bar.rv_pct == 1.0
    assert bar.breakout_direction == 1
    assert bar.status == StrategyStatus.LONG
    assert bar.target_leverage == pytest.approx(0.5)
    assert bar.reasoning[-1] == "entered position"
    assert all(r.status == StrategyStatus.FLAT for r in history[:BREAKOUT_BAR])


def test_hold_cooldown_sequence(breakout_candles, small_config):
    history = evaluate_strategy_history(breakout_candles, small_config)
    path = [(r.status, r.target_leverage, r.cooldown_remaining) for r in history[BREAKOUT_BAR:BREAKOUT_BAR + 5]]
    assert path == [
        (StrategyStatus.LONG, pytest.approx(0.5), 0),
        (StrategyStatus.LONG, pytest.approx(1.0), 0),
        (StrategyStatus.COOLDOWN, 0.0, 2),
        (StrategyStatus.COOLDOWN, 0.0, 1),
        (StrategyStatus.FLAT, 0.0, 0),
    ]
    assert history[BREAKOUT_BAR + 4].reasoning[-1] == "cooldown finished"


def test_result_is_last_history_entry(breakout_candles, small_config):
    history = evaluate_strategy_history(breakout_candles, small_config)
    assert evaluate_strategy(breakout_candles, small_config) == history[-1]
    assert history[-1].timestamp == breakout_candles[-1].close_time


def test_deterministic(breakout_candles, small_config):
    assert evaluate_strategy(breakout_candles, small_config) == evaluate_strategy(breakout_candles, small_config)


def test_no_lookahead(breakout_candles, small_config):
    history = evaluate_strategy_history(breakout_candles, small_config)
    for i in range(len(breakout_candles)):
        assert evaluate_strategy(breakout_candles[: i + 1], small_config) == history[i]


def test_seed_resumes_position(breakout_candles, small_config):
    entry = evaluate_strategy(breakout_candles[: BREAKOUT_BAR + 1], small_config)
    tail = breakout_candles[BREAKOUT_BAR + 1: BREAKOUT_BAR + 2]
    resumed = evaluate_strategy(tail, small_config, seed=entry.position_state())
    assert resumed.status == StrategyStatus.LONG
    assert resumed.target_leverage == pytest.approx(1.0)
    assert resumed.bars_in_position == 2


def test_invariants_on_random_walk():
    cfg = build_strategy_config(3.0)
    history = evaluate_strategy_history(_random_walk(), cfg)
    for prev, cur in zip(history, history[1:]):
        assert cur.rv_pct is None or 0.0 <= cur.rv_pct <= 1.0
        assert abs(cur.target_leverage) <= cfg.max_leverage
        if prev.status == cur.status and cur.status in (StrategyStatus.LONG, StrategyStatus.SHORT):
            assert abs(cur.target_leverage) >= abs(prev.target_leverage)


def test_compute_indicators_columns(breakout_candles, small_config):
    df = VolBurstStrategy(small_config).compute_indicators(candles_to_frame(breakout_candles))
    for col in ("log_return", "rv", "rv_z", "rv_pct", "quiet_min", "donchian_upper", "donchian_lower", "breakout"):
        assert col in df.columns
    assert df["rv"].iloc[:3].isna().all()
    assert df["rv"].iloc[3:].notna().all()
    assert df["donchian_upper"].iloc[:5].isna().all()


def test_summarize_signal():
    result = StrategyResult(
        timestamp=0, price=50.0, rv=None, rv_z=None, rv_pct=None, quiet_min=None,
        quiet_condition=False, burst_condition=False, breakout_direction=0,
        status=StrategyStatus.SHORT, bars_in_position=2, cooldown_remaining=0,
        target_leverage=-1.2, direction=-1, reasoning=["entered position"],
    )
    summary = summarize_signal(result, 100.0)
    assert summary.target_base == pytest.approx(-2.4)
    assert summary.status == StrategyStatus.SHORT
    assert summary.reasoning == ["entered position"]
    assert summary.reasoning is not result.reasoning


def test_summarize_signal_zero_price():
    result = StrategyResult(
        timestamp=0, price=0.0, rv=None, rv_z=None, rv_pct=None, quiet_min=None,
        quiet_condition=False, burst_condition=False, breakout_direction=0,
        status=StrategyStatus.LONG, bars_in_position=1, cooldown_remaining=0,
        target_leverage=0.6,
    )
    assert summarize_signal(result, 10.0).target_base == 0.0


def test_to_dict_and_position_state(breakout_candles, small_config):
    result = evaluate_strategy(breakout_candles[: BREAKOUT_BAR + 1], small_config)
    data = result.to_dict()
    assert data["status"] == "long"
    assert data["target_leverage"] == pytest.approx(0.5)
    state = result.position_state()
    assert isinstance(state, PositionState)
    assert dataclasses.asdict(state)["bars_since_entry"] == 1
