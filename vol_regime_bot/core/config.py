"""
Load configuration from config.yaml and .env. API keys only from env.
Strategy parameters are built with build_strategy_config and validated on construction.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml
from dotenv import load_dotenv

from vol_regime_bot.core.errors import InvalidConfigError
from vol_regime_bot.utils.timeframes import interval_hours

logger = logging.getLogger("vol_regime_bot.config")


@dataclass(frozen=True)
class StrategyConfig:
    """Immutable parameter set for the volatility-burst strategy."""
    intervals: Tuple[str, ...]
    limit: int
    rv_window: int
    rv_z_window: int
    rv_pct_window: int
    quiet_lookback: int
    quiet_pct: float
    rv_z_entry: float
    rv_pct_entry: float
    donchian_lookback: int
    donchian_buffer: float
    hold_bars: int
    ramp_per_bar: float
    cooldown_bars: int
    base_interval_hours: float
    max_leverage: float

    def __post_init__(self) -> None:
        for name in (
            "limit", "rv_window", "rv_z_window", "rv_pct_window", "quiet_lookback",
            "donchian_lookback", "hold_bars", "cooldown_bars",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfigError(f"{name} must be a positive integer, got {value!r}")
        for name in ("quiet_pct", "rv_pct_entry"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(f"{name} must be within [0, 1], got {value!r}")
        if not 0.0 <= self.donchian_buffer < 1.0:
            raise InvalidConfigError(f"donchian_buffer must be within [0, 1), got {self.donchian_buffer!r}")
        if self.ramp_per_bar < 0:
            raise InvalidConfigError(f"ramp_per_bar must be >= 0, got {self.ramp_per_bar!r}")
        if self.base_interval_hours <= 0:
            raise InvalidConfigError(f"base_interval_hours must be > 0, got {self.base_interval_hours!r}")
        if self.max_leverage <= 0:
            raise InvalidConfigError(f"max_leverage must be > 0, got {self.max_leverage!r}")
        if not self.intervals:
            raise InvalidConfigError("intervals must include at least one interval")

    @property
    def primary_interval(self) -> str:
        return self.intervals[0]


def build_strategy_config(
    max_leverage: float,
    *,
    intervals: Tuple[str, ...] = ("4h",),
    limit: int = 500,
    rv_window: int = 42,
    rv_z_window: int = 42,
    rv_pct_window: int = 126,
    quiet_lookback: int = 24,
    quiet_pct: float = 0.25,
    rv_z_entry: float = 1.2,
    rv_pct_entry: float = 0.85,
    donchian_lookback: int = 30,
    donchian_buffer: float = 0.001,
    hold_bars: int = 6,
    ramp_per_bar: float = 0.6,
    cooldown_bars: int = 6,
    base_interval_hours: float = 4,
) -> StrategyConfig:
    """Build a StrategyConfig from max_leverage and optional parameter overrides."""
    return StrategyConfig(
        intervals=tuple(intervals),
        limit=limit,
        rv_window=rv_window,
        rv_z_window=rv_z_window,
        rv_pct_window=rv_pct_window,
        quiet_lookback=quiet_lookback,
        quiet_pct=quiet_pct,
        rv_z_entry=rv_z_entry,
        rv_pct_entry=rv_pct_entry,
        donchian_lookback=donchian_lookback,
        donchian_buffer=donchian_buffer,
        hold_bars=hold_bars,
        ramp_per_bar=ramp_per_bar,
        cooldown_bars=cooldown_bars,
        base_interval_hours=base_interval_hours,
        max_leverage=max_leverage,
    )


_STRATEGY_KEYS = frozenset(StrategyConfig.__dataclass_fields__) - {"max_leverage", "intervals", "limit"}


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: Any = "") -> str:
        return os.getenv(key, str(default)).strip()

    def env_bool(key: str, default: bool = False) -> bool:
        return env(key, default).lower() in ("true", "1", "yes")

    def env_int(key: str, default: int = 0) -> int:
        raw = env(key, default)
        try:
            return int(raw)
        except ValueError:
            raise InvalidConfigError(f"Invalid integer for {key}: {raw!r}") from None

    def env_float(key: str, default: float = 0.0) -> float:
        raw = env(key, default)
        try:
            return float(raw)
        except ValueError:
            raise InvalidConfigError(f"Invalid numeric value for {key}: {raw!r}") from None

    api = data.get("api", {})
    trading = data.get("trading", {})
    logging_cfg = data.get("logging", {})
    strategy = dict(data.get("strategy", {}) or {})
    unknown = set(strategy) - _STRATEGY_KEYS
    if unknown:
        raise InvalidConfigError(f"Unknown strategy parameter(s): {', '.join(sorted(unknown))}")

    use_testnet = env_bool("USE_TESTNET", api.get("use_testnet", True))
    # Dedicated testnet/mainnet keys win so both can live in .env
    if use_testnet:
        binance_api_key = env("BINANCE_TESTNET_API_KEY") or env("BINANCE_API_KEY")
        binance_api_secret = env("BINANCE_TESTNET_API_SECRET") or env("BINANCE_API_SECRET")
    else:
        binance_api_key = env("BINANCE_MAINNET_API_KEY") or env("BINANCE_API_KEY")
        binance_api_secret = env("BINANCE_MAINNET_API_SECRET") or env("BINANCE_API_SECRET")

    default_intervals = trading.get("intervals", ["4h"])
    if isinstance(default_intervals, str):
        default_intervals = default_intervals.split(",")
    intervals = [i.strip() for i in env("BINANCE_INTERVALS", ",".join(default_intervals)).split(",") if i.strip()]
    if not intervals:
        raise InvalidConfigError("BINANCE_INTERVALS must include at least one interval")

    return Config(
        binance_api_key=binance_api_key,
        binance_api_secret=binance_api_secret,
        use_testnet=use_testnet,
        symbol=env("SYMBOL", trading.get("symbol", "SOLUSDT")).upper(),
        intervals=intervals,
        kline_limit=env_int("KLINE_LIMIT", trading.get("kline_limit", 500)),
        max_notional_usdc=env_float("MAX_NOTIONAL_USDC", trading.get("max_notional_usdc", 10.0)),
        max_leverage=env_float("MAX_LEVERAGE", trading.get("max_leverage", 3.0)),
        dry_run=env_bool("DRY_RUN", trading.get("dry_run", True)),
        min_trade_base=env_float("MIN_TRADE_BASE", trading.get("min_trade_base", 0.01)),
        strategy_params=strategy,
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(env("LOG_DIR", logging_cfg.get("dir", "logs"))),
        log_file=env("LOG_FILE", logging_cfg.get("file", "vol_regime_bot.log")),
        audit_log=Path(env("AUDIT_LOG", logging_cfg.get("audit_log", "logs/trades.jsonl"))),
    )


class Config:
    """Runtime configuration (API, trading limits, logging, strategy overrides)."""

    def __init__(
        self,
        binance_api_key: str = "",
        binance_api_secret: str = "",
        use_testnet: bool = True,
        symbol: str = "SOLUSDT",
        intervals: Optional[list] = None,
        kline_limit: int = 500,
        max_notional_usdc: float = 10.0,
        max_leverage: float = 3.0,
        dry_run: bool = True,
        min_trade_base: float = 0.01,
        strategy_params: Optional[dict] = None,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "vol_regime_bot.log",
        audit_log: Path = None,
    ):
        self.binance_api_key = binance_api_key
        self.binance_api_secret = binance_api_secret
        self.use_testnet = use_testnet
        self.symbol = symbol
        self.intervals = list(intervals) if intervals else ["4h"]
        self.kline_limit = kline_limit
        self.max_notional_usdc = max_notional_usdc
        self.max_leverage = max_leverage
        self.dry_run = dry_run
        self.min_trade_base = min_trade_base
        self.strategy_params = dict(strategy_params or {})
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file
        self.audit_log = Path(audit_log) if audit_log else self.log_dir / "trades.jsonl"

    @property
    def has_api_keys(self) -> bool:
        return bool(self.binance_api_key and self.binance_api_secret)

    def strategy_config(self) -> StrategyConfig:
        """StrategyConfig from max_leverage, intervals, kline limit and YAML overrides."""
        try:
            cfg = build_strategy_config(
                self.max_leverage,
                intervals=tuple(self.intervals),
                limit=self.kline_limit,
                **self.strategy_params,
            )
        except TypeError as e:
            raise InvalidConfigError(str(e)) from e
        try:
            hours = interval_hours(cfg.primary_interval)
        except ValueError as e:
            raise InvalidConfigError(str(e)) from e
        if hours != cfg.base_interval_hours:
            logger.warning(
                "Primary interval %s is %.4gh but base_interval_hours=%.4g; RV scaling assumes the latter",
                cfg.primary_interval, hours, cfg.base_interval_hours,
            )
        return cfg
