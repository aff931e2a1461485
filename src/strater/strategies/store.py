from __future__ import annotations

"""
Strategy bookkeeping on top of a loaded configuration.

All functions are pure: they take a StraterConfig and return a new one, leaving
file persistence to the caller.
"""

from dataclasses import replace
from typing import Any, List, Optional

from ..config import (
    KEY_MONTH_PROFIT_TARGET_PCT,
    KEY_NAME,
    KEY_TRADE_RISK_PCT,
    STRATEGY_KEYS,
    StraterConfig,
    StrategyOverride,
    check_strategy_pct,
    parse_strategy_value,
)
from ..engine import StrategyNotFound


class StrategyExistsError(ValueError):
    """Raised when a strategy name is already taken."""


def _index_of(config: StraterConfig, name: str) -> int:
    for idx, strategy in enumerate(config.strategies):
        if strategy.name == name:
            return idx
    raise StrategyNotFound(name)


def get_strategy(config: StraterConfig, name: str) -> StrategyOverride:
    return config.strategies[_index_of(config, name)]


def _with_strategy(config: StraterConfig, idx: int, strategy: StrategyOverride) -> StraterConfig:
    strategies = list(config.strategies)
    strategies[idx] = strategy
    return replace(config, strategies=strategies)


def describe_strategies(config: StraterConfig) -> List[str]:
    lines = ["Available Strategies:"]
    for s in config.strategies:
        line = f"- {s.name}"
        if s.month_profit_target_pct is not None:
            line += f" (Profit Target: {s.month_profit_target_pct * 100:.1f}%)"
        if s.trade_risk_pct is not None:
            line += f" (Risk: {s.trade_risk_pct * 100:.1f}%)"
        lines.append(line)
    return lines


def add_strategy(config: StraterConfig, name: str, description: str = "") -> StraterConfig:
    if not name:
        raise ValueError("strategy name must not be empty")
    if config.find_strategy(name) is not None:
        raise StrategyExistsError(f"strategy '{name}' already exists")
    return replace(config, strategies=[*config.strategies, StrategyOverride(name=name, description=description)])


def remove_strategy(config: StraterConfig, name: str) -> StraterConfig:
    idx = _index_of(config, name)
    strategies = [s for i, s in enumerate(config.strategies) if i != idx]
    return replace(config, strategies=strategies)


def update_strategy(
    config: StraterConfig,
    name: str,
    profit_target: Optional[float] = None,
    risk_per_trade: Optional[float] = None,
) -> StraterConfig:
    """Update the profit target and/or risk of a strategy; ``None`` leaves a field untouched."""
    idx = _index_of(config, name)
    current = config.strategies[idx]
    changes = {}
    if profit_target is not None:
        changes[KEY_MONTH_PROFIT_TARGET_PCT] = check_strategy_pct(KEY_MONTH_PROFIT_TARGET_PCT, profit_target)
    if risk_per_trade is not None:
        changes[KEY_TRADE_RISK_PCT] = check_strategy_pct(KEY_TRADE_RISK_PCT, risk_per_trade)
    return _with_strategy(config, idx, replace(current, **changes))


def get_strategy_value(config: StraterConfig, name: str, key: str) -> Any:
    strategy = get_strategy(config, name)
    if key not in STRATEGY_KEYS:
        raise ValueError(f"Unknown config key: {key}\nAvailable keys: {list(STRATEGY_KEYS)}")
    return getattr(strategy, key)


def set_strategy_value(config: StraterConfig, name: str, key: str, value: str) -> StraterConfig:
    idx = _index_of(config, name)
    parsed = parse_strategy_value(key, value)
    if key == KEY_NAME:
        if not parsed:
            raise ValueError("strategy name must not be empty")
        if parsed != name and config.find_strategy(parsed) is not None:
            raise StrategyExistsError(f"strategy '{parsed}' already exists")
    return _with_strategy(config, idx, replace(config.strategies[idx], **{key: parsed}))
