from __future__ import annotations

"""
Configuration store for strater.

The module provides typed dataclasses that mirror the YAML schema of a
``.strater.yaml`` file, plus discovery, loading and saving helpers.  Every
overridable trading quantity is an ``Optional`` value: ``None`` means the field
was not configured, so an explicit ``0`` survives a round trip.
"""

import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

CONFIG_ENV_VAR = "STRATER_CONFIG"
DEFAULT_CONFIG_NAME = ".strater.yaml"
DEFAULT_CONFIG_PATHS = (
    ".strater.yaml",
    ".strater.json",
    "$HOME/.config/strater/.strater.yaml",
    "/etc/strater/.strater.yaml",
)
DEFAULT_OUTPUT_PATH = "strater_output"

# Keys shared between the defaults section and strategy entries.
KEY_NAME = "name"
KEY_DESCRIPTION = "description"
KEY_TRADE_RISK_PCT = "trade_risk_pct"
KEY_TRADE_REWARD_PCT = "trade_reward_pct"
KEY_MONTH_TRADES_NET_WINS = "month_trades_net_wins"
KEY_MONTH_PROFIT_TARGET_PCT = "month_profit_target_pct"

# Default-only keys.
KEY_CAPITAL_START = "capital_start"
KEY_MONTH_COUNT = "month_count"
KEY_OUTPUT_PATH = "output_path"

PARAMETER_KEYS = (
    KEY_TRADE_RISK_PCT,
    KEY_TRADE_REWARD_PCT,
    KEY_MONTH_TRADES_NET_WINS,
    KEY_MONTH_PROFIT_TARGET_PCT,
)
STRATEGY_KEYS = (KEY_NAME, KEY_DESCRIPTION, *PARAMETER_KEYS)
DEFAULT_KEYS = (
    KEY_CAPITAL_START,
    KEY_TRADE_RISK_PCT,
    KEY_TRADE_REWARD_PCT,
    KEY_MONTH_TRADES_NET_WINS,
    KEY_MONTH_PROFIT_TARGET_PCT,
    KEY_MONTH_COUNT,
    KEY_OUTPUT_PATH,
)


class ConfigNotFoundError(FileNotFoundError):
    """Raised when no configuration file can be located."""


def _require_keys(source: Dict[str, Any], allowed: Iterable[str], section: str) -> None:
    unknown = set(source) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown keys in {section}: {sorted(unknown)}")


def _checked_number(value: Any, key: str, section: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{section}.{key} must be a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise ValueError(f"{section}.{key} must be a finite number")
    if result < 0:
        raise ValueError(f"{section}.{key} must be non-negative")
    return result


def _optional_float(payload: Dict[str, Any], key: str, section: str) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    return _checked_number(value, key, section)


def _optional_int(payload: Dict[str, Any], key: str, section: str) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"{section}.{key} must be non-negative")
        return value
    number = _checked_number(value, key, section)
    if not number.is_integer():
        raise ValueError(f"{section}.{key} must be an integer, got {value!r}")
    return int(number)


def _drop_unset(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class Settings:
    output_path: str = DEFAULT_OUTPUT_PATH

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "Settings":
        payload = payload or {}
        _require_keys(payload, (KEY_OUTPUT_PATH,), "settings")
        return cls(output_path=str(payload.get(KEY_OUTPUT_PATH) or ""))

    def to_dict(self) -> Dict[str, Any]:
        return {KEY_OUTPUT_PATH: self.output_path}


@dataclass(frozen=True)
class GlobalDefaults:
    capital_start: int = 10000
    month_count: int = 12
    trade_risk_pct: Optional[float] = None
    trade_reward_pct: Optional[float] = None
    month_trades_net_wins: Optional[int] = None
    month_profit_target_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "GlobalDefaults":
        payload = payload or {}
        section = "strat.default"
        _require_keys(payload, (KEY_CAPITAL_START, KEY_MONTH_COUNT, *PARAMETER_KEYS), section)
        capital_start = _optional_int(payload, KEY_CAPITAL_START, section)
        month_count = _optional_int(payload, KEY_MONTH_COUNT, section)
        return cls(
            capital_start=10000 if capital_start is None else capital_start,
            month_count=12 if month_count is None else month_count,
            trade_risk_pct=_optional_float(payload, KEY_TRADE_RISK_PCT, section),
            trade_reward_pct=_optional_float(payload, KEY_TRADE_REWARD_PCT, section),
            month_trades_net_wins=_optional_int(payload, KEY_MONTH_TRADES_NET_WINS, section),
            month_profit_target_pct=_optional_float(payload, KEY_MONTH_PROFIT_TARGET_PCT, section),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_unset(
            {
                KEY_CAPITAL_START: self.capital_start,
                KEY_TRADE_RISK_PCT: self.trade_risk_pct,
                KEY_TRADE_REWARD_PCT: self.trade_reward_pct,
                KEY_MONTH_TRADES_NET_WINS: self.month_trades_net_wins,
                KEY_MONTH_PROFIT_TARGET_PCT: self.month_profit_target_pct,
                KEY_MONTH_COUNT: self.month_count,
            }
        )


@dataclass(frozen=True)
class StrategyOverride:
    name: str
    description: str = ""
    trade_risk_pct: Optional[float] = None
    trade_reward_pct: Optional[float] = None
    month_trades_net_wins: Optional[int] = None
    month_profit_target_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StrategyOverride":
        if not isinstance(payload, dict):
            raise ValueError("Each strategies entry must be a mapping")
        _require_keys(payload, STRATEGY_KEYS, "strategies")
        name = payload.get(KEY_NAME)
        if not name:
            raise ValueError("strategies entry must include a non-empty 'name'")
        section = f"strategies[{name}]"
        return cls(
            name=str(name),
            description=str(payload.get(KEY_DESCRIPTION) or ""),
            trade_risk_pct=_optional_float(payload, KEY_TRADE_RISK_PCT, section),
            trade_reward_pct=_optional_float(payload, KEY_TRADE_REWARD_PCT, section),
            month_trades_net_wins=_optional_int(payload, KEY_MONTH_TRADES_NET_WINS, section),
            month_profit_target_pct=_optional_float(payload, KEY_MONTH_PROFIT_TARGET_PCT, section),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = _drop_unset(
            {
                KEY_NAME: self.name,
                KEY_TRADE_RISK_PCT: self.trade_risk_pct,
                KEY_TRADE_REWARD_PCT: self.trade_reward_pct,
                KEY_MONTH_TRADES_NET_WINS: self.month_trades_net_wins,
                KEY_MONTH_PROFIT_TARGET_PCT: self.month_profit_target_pct,
            }
        )
        if self.description:
            payload[KEY_DESCRIPTION] = self.description
        return payload


@dataclass(frozen=True)
class StraterConfig:
    settings: Settings = field(default_factory=Settings)
    defaults: GlobalDefaults = field(default_factory=GlobalDefaults)
    strategies: List[StrategyOverride] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StraterConfig":
        _require_keys(payload, ("settings", "strat", "strategies"), "config")
        strat = payload.get("strat") or {}
        _require_keys(strat, ("default",), "strat")
        strategies = [StrategyOverride.from_dict(entry) for entry in payload.get("strategies") or []]
        names = [s.name for s in strategies]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate strategy names: {duplicates}")
        return cls(
            settings=Settings.from_dict(payload.get("settings")),
            defaults=GlobalDefaults.from_dict(strat.get("default")),
            strategies=strategies,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "strat": {"default": self.defaults.to_dict()},
            "strategies": [s.to_dict() for s in self.strategies],
        }

    def find_strategy(self, name: str) -> Optional[StrategyOverride]:
        for strategy in self.strategies:
            if strategy.name == name:
                return strategy
        return None

    def strategy_names(self) -> List[str]:
        return [s.name for s in self.strategies]


def default_config() -> StraterConfig:
    """Configuration written by ``strater init``."""
    return StraterConfig(
        settings=Settings(output_path=DEFAULT_OUTPUT_PATH),
        defaults=GlobalDefaults(
            capital_start=10000,
            month_count=12,
            trade_risk_pct=0.01,
            trade_reward_pct=0.01,
            month_trades_net_wins=10,
            month_profit_target_pct=0.10,
        ),
        strategies=[],
    )


def find_config_file() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path and Path(env_path).exists():
        return Path(env_path)
    for candidate in DEFAULT_CONFIG_PATHS:
        path = Path(os.path.expandvars(candidate))
        if path.exists():
            return path
    raise ConfigNotFoundError("No configuration file found. Run 'strater init' to create one")


def load_config(path: Path) -> StraterConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh) or {}
    if not isinstance(payload, dict):
        raise ValueError("Configuration root must be a mapping/object")
    return StraterConfig.from_dict(payload)


def save_config(config: StraterConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(config.to_dict(), fh, sort_keys=False)


def get_default_value(config: StraterConfig, key: str) -> Any:
    if key == KEY_OUTPUT_PATH:
        return config.settings.output_path
    if key not in DEFAULT_KEYS:
        raise ValueError(f"Unknown config key: {key}\nAvailable keys: {list(DEFAULT_KEYS)}")
    return getattr(config.defaults, key)


def _parse_number(key: str, value: str) -> float:
    try:
        result = float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {key}: {value} - must be a number") from exc
    if not math.isfinite(result):
        raise ValueError(f"Invalid value for {key}: {value} - must be a finite number")
    return result


def _parse_integer(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {key}: {value} - must be an integer") from exc


def set_default_value(config: StraterConfig, key: str, value: str) -> StraterConfig:
    """Return a copy of ``config`` with one default key updated from its text form."""
    if key == KEY_OUTPUT_PATH:
        return replace(config, settings=replace(config.settings, output_path=value))

    if key == KEY_CAPITAL_START:
        parsed: Any = int(_parse_number(key, value))
        if parsed < 0:
            raise ValueError("capital start must be non-negative")
    elif key == KEY_TRADE_RISK_PCT:
        parsed = _parse_number(key, value)
        if parsed < 0 or parsed > 1.0:
            raise ValueError("trade risk must be between 0 and 1 (100%)")
    elif key in (KEY_TRADE_REWARD_PCT, KEY_MONTH_PROFIT_TARGET_PCT):
        parsed = _parse_number(key, value)
        if parsed <= 0:
            raise ValueError(f"{key} must be positive")
    elif key == KEY_MONTH_COUNT:
        parsed = _parse_integer(key, value)
        if parsed <= 0:
            raise ValueError("month count must be positive")
    elif key == KEY_MONTH_TRADES_NET_WINS:
        parsed = _parse_integer(key, value)
        if parsed < 0:
            raise ValueError("month trades net wins must be non-negative")
    else:
        raise ValueError(f"Unknown config key: {key}\nAvailable keys: {list(DEFAULT_KEYS)}")
    return replace(config, defaults=replace(config.defaults, **{key: parsed}))


STRATEGY_PCT_KEYS = (KEY_TRADE_RISK_PCT, KEY_TRADE_REWARD_PCT, KEY_MONTH_PROFIT_TARGET_PCT)


def check_strategy_pct(key: str, value: float) -> float:
    """Strategy percentages must be positive, finite numbers."""
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{key} must be positive")
    return value


def parse_strategy_value(key: str, value: str) -> Any:
    """Validate a strategy-level value given as text."""
    if key in (KEY_NAME, KEY_DESCRIPTION):
        return value
    if key in STRATEGY_PCT_KEYS:
        return check_strategy_pct(key, _parse_number(key, value))
    if key == KEY_MONTH_TRADES_NET_WINS:
        parsed_int = _parse_integer(key, value)
        if parsed_int < 0:
            raise ValueError(f"{key} must be non-negative")
        return parsed_int
    raise ValueError(f"Unknown config key: {key}\nAvailable keys: {list(STRATEGY_KEYS)}")
