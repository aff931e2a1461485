from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TypeVar

from ..config import GlobalDefaults, StrategyOverride

T = TypeVar("T")

BUILTIN_TRADE_REWARD_PCT = 0.01
BUILTIN_TRADE_RISK_PCT = 0.01
BUILTIN_MONTH_TRADES_NET_WINS = 10
BUILTIN_MONTH_PROFIT_TARGET_PCT = 0.10


@dataclass(frozen=True)
class EffectiveParameters:
    trade_reward_pct: float
    trade_risk_pct: float
    month_trades_net_wins: int
    month_profit_target_pct: float


def _first_present(override: Optional[T], default: Optional[T], builtin: T) -> T:
    if override is not None:
        return override
    if default is not None:
        return default
    return builtin


def resolve(defaults: GlobalDefaults, override: StrategyOverride) -> EffectiveParameters:
    """Merge built-in constants < global defaults < strategy override, field by field."""
    return EffectiveParameters(
        trade_reward_pct=float(
            _first_present(override.trade_reward_pct, defaults.trade_reward_pct, BUILTIN_TRADE_REWARD_PCT)
        ),
        trade_risk_pct=float(
            _first_present(override.trade_risk_pct, defaults.trade_risk_pct, BUILTIN_TRADE_RISK_PCT)
        ),
        month_trades_net_wins=int(
            _first_present(
                override.month_trades_net_wins,
                defaults.month_trades_net_wins,
                BUILTIN_MONTH_TRADES_NET_WINS,
            )
        ),
        month_profit_target_pct=float(
            _first_present(
                override.month_profit_target_pct,
                defaults.month_profit_target_pct,
                BUILTIN_MONTH_PROFIT_TARGET_PCT,
            )
        ),
    )
