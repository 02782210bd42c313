#!/usr/bin/env python3
"""
Volatility regime bot CLI: state | signal | trade
Usage:
  python main.py state [--config config.yaml]
  python main.py signal [--config config.yaml]
  python main.py trade [--config config.yaml]
"""

from __future__ import annotations
import argparse
import logging
import math
import sys
from datetime import datetime, timezone
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vol_regime_bot.core.config import Config, load_config
from vol_regime_bot.core.errors import EmptyInputError
from vol_regime_bot.core.logger import setup_logging, setup_logging_from_config
from vol_regime_bot.core.types import AccountState, SignalSummary
from vol_regime_bot.execution.base import ExecutionClient, fetch_interval_map
from vol_regime_bot.execution.binance_futures import BinanceFuturesClient
from vol_regime_bot.risk.manager import RiskManager
from vol_regime_bot.strategies.summary import summarize_signal
from vol_regime_bot.strategies.vol_burst import evaluate_strategy
from vol_regime_bot.utils.audit_log import append_log

logger = logging.getLogger("vol_regime_bot")
DEFAULT_AUDIT_LOG = Path("logs/trades.jsonl")


def _fmt(value, spec: str) -> str:
    return "n/a" if value is None else format(value, spec)


def compute_signal(config: Config, client: ExecutionClient) -> SignalSummary:
    """Fetch candles, evaluate on the primary interval, size against max notional."""
    strategy_config = config.strategy_config()
    candles_map = fetch_interval_map(client, config.symbol, strategy_config.intervals, strategy_config.limit)
    primary = strategy_config.primary_interval
    candles = candles_map.get(primary)
    if not candles:
        raise EmptyInputError(f"No candles returned for {primary}")
    result = evaluate_strategy(candles, strategy_config)
    summary = summarize_signal(result, config.max_notional_usdc)
    append_log(
        {
            "command": "signal_eval",
            "interval": primary,
            "extra_intervals": list(candles_map),
            "signal": summary,
        },
        config.audit_log,
    )
    return summary


def print_signal(signal: SignalSummary, config: Config) -> None:
    base_asset = config.symbol.replace("USDT", "")
    ts = datetime.fromtimestamp(signal.timestamp / 1000, tz=timezone.utc).isoformat()
    rv_pct = None if signal.rv_pct is None else signal.rv_pct * 100
    print(f"Signal Time: {ts}")
    print(
        f"Status: {signal.status.value} | target leverage {signal.target_leverage:.2f}"
        f" | target base {signal.target_base:.4f} {base_asset}"
    )
    print(
        f"Price: {signal.price:.3f} | RV {_fmt(signal.rv, '.4f')} | rv_z {_fmt(signal.rv_z, '.2f')}"
        f" | rv_pct {_fmt(rv_pct, '.1f')}%"
    )
    print(
        f"quiet {signal.quiet_condition} | burst {signal.burst_condition}"
        f" | breakout {signal.breakout_direction}"
    )
    print(f"Cooldown remaining: {signal.cooldown_remaining} | Bars in position: {signal.bars_in_position}")
    print(f"Max notional: {config.max_notional_usdc:.2f} USDC")
    print(f"Reasoning: {', '.join(signal.reasoning)}")


def print_state(state: AccountState, config: Config) -> None:
    print(f"Total collateral: {state.total_collateral:.3f} USDT")
    print(f"Free collateral: {state.free_collateral:.3f} USDT")
    print(f"{config.symbol} base: {state.position_base:.4f}")


def _make_client(config: Config) -> BinanceFuturesClient:
    return BinanceFuturesClient(config.binance_api_key, config.binance_api_secret, testnet=config.use_testnet)


def run_state(config: Config, client: ExecutionClient) -> int:
    state = client.get_account_state(config.symbol)
    print_state(state, config)
    append_log({"command": "state", "summary": state}, config.audit_log)
    return 0


def run_signal(config: Config, client: ExecutionClient) -> int:
    signal = compute_signal(config, client)
    print_signal(signal, config)
    return 0


def run_trade(config: Config, client: ExecutionClient) -> int:
    signal = compute_signal(config, client)
    state = client.get_account_state(config.symbol)
    risk_manager = RiskManager(
        max_notional=config.max_notional_usdc,
        min_trade_base=config.min_trade_base,
        symbol_info=client.get_symbol_info(config.symbol),
    )
    decision = risk_manager.plan_trade(signal, state.position_base, dry_run=config.dry_run)
    event = {"signal": signal, "state": state, "decision": decision}
    if not decision.should_trade:
        print("Delta below minimum trade threshold. Skipping.")
        append_log({"command": "trade_skip", **event}, config.audit_log)
        return 0
    if config.dry_run:
        print(f"[DRY_RUN] Would trade {decision.clipped_base:.4f} (delta {decision.delta_base:.4f})")
        append_log({"command": "trade_dry_run", **event}, config.audit_log)
        return 0
    client.set_leverage(config.symbol, math.ceil(config.max_leverage))
    result = client.submit_order(config.symbol, decision.clipped_base)
    if not result.success:
        logger.error("Order rejected: %s", result.message)
        append_log({"command": "trade_rejected", "message": result.message, **event}, config.audit_log)
        return 1
    print(f"Submitted order: {result.order_id}")
    append_log({"command": "trade", "order_id": result.order_id, **event}, config.audit_log)
    return 0


COMMANDS = {"state": run_state, "signal": run_signal, "trade": run_trade}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Volatility regime bot CLI")
    parser.add_argument("command", choices=sorted(COMMANDS), help="Account state, signal, or trade")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    args = parser.parse_args(argv)
    audit_log = DEFAULT_AUDIT_LOG
    try:
        config = load_config(args.config, ROOT)
        audit_log = config.audit_log
        setup_logging_from_config(config)
        if args.command in ("state", "trade") and not config.has_api_keys:
            logger.error("Missing BINANCE_API_KEY or BINANCE_API_SECRET in .env")
            return 1
        return COMMANDS[args.command](config, _make_client(config))
    except Exception as e:
        if not logger.handlers:
            setup_logging()
        logger.exception("Error running %s: %s", args.command, e)
        append_log({"command": "error", "message": str(e), "type": type(e).__name__}, audit_log)
        return 1


if __name__ == "__main__":
    sys.exit(main())
