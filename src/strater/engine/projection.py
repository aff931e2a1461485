from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date as Date
from typing import List, Optional, Tuple

from ..config import StraterConfig, StrategyOverride
from .resolver import EffectiveParameters, resolve

logger = logging.getLogger(__name__)

TRADING_ACCOUNT = "Trading"
SAVINGS_ACCOUNT = "Savings"


class StrategyNotFound(LookupError):
    """Raised when a strategy name is not part of the configuration."""

    def __init__(self, name: str):
        super().__init__(f"strategy not found: {name}")
        self.name = name


@dataclass(frozen=True)
class Transaction:
    kind: str  # "profit", "withdrawal" or "reinvestment"
    amount: float
    balance: float
    description: str = ""
    date: Optional[Date] = None


@dataclass(frozen=True)
class Account:
    name: str
    balance: float = 0.0
    history: Tuple[Transaction, ...] = ()

    def record(self, kind: str, amount: float, balance: float, description: str = "") -> "Account":
        """Return the account with one more transaction and its resulting balance."""
        txn = Transaction(kind=kind, amount=amount, balance=balance, description=description)
        return replace(self, balance=balance, history=self.history + (txn,))


@dataclass(frozen=True)
class MonthlyResult:
    month: int
    starting_balance: float
    ending_balance: float
    profit_amount: float
    reward_per_trade_amount: float
    net_wins: int


@dataclass(frozen=True)
class Plan:
    strategy_name: str
    initial_capital: float
    trading_account: Account
    savings_account: Account
    monthly_results: Tuple[MonthlyResult, ...]
    parameters: EffectiveParameters

    @property
    def final_balance(self) -> float:
        return self.trading_account.balance


def project_with(
    parameters: EffectiveParameters,
    strategy_name: str,
    capital: float,
    months: int,
) -> Plan:
    """Compound ``capital`` for ``months`` months using already resolved parameters."""
    if isinstance(months, bool) or not isinstance(months, int) or months < 0:
        raise ValueError(f"months must be a non-negative integer, got {months!r}")

    initial = float(capital)
    trading = Account(name=TRADING_ACCOUNT, balance=initial)
    savings = Account(name=SAVINGS_ACCOUNT, balance=0.0)
    results: List[MonthlyResult] = []

    balance = initial
    net_wins = parameters.month_trades_net_wins
    for month in range(1, months + 1):
        reward_per_trade = balance * parameters.trade_reward_pct
        profit = reward_per_trade * net_wins
        new_balance = balance + profit
        results.append(
            MonthlyResult(
                month=month,
                starting_balance=balance,
                ending_balance=new_balance,
                profit_amount=profit,
                reward_per_trade_amount=reward_per_trade,
                net_wins=net_wins,
            )
        )
        balance = new_balance

    for result in results:
        trading = trading.record(
            "profit",
            result.profit_amount,
            result.ending_balance,
            f"Month {result.month}: {result.net_wins} net wins",
        )

    logger.debug(
        "Projected %s over %d months: %.2f -> %.2f", strategy_name, months, initial, trading.balance
    )
    return Plan(
        strategy_name=strategy_name,
        initial_capital=initial,
        trading_account=trading,
        savings_account=savings,
        monthly_results=tuple(results),
        parameters=parameters,
    )


class ProjectionEngine:
    def __init__(self, config: StraterConfig):
        self.config = config

    def _strategy(self, strategy_name: str) -> StrategyOverride:
        strategy = self.config.find_strategy(strategy_name)
        if strategy is None:
            raise StrategyNotFound(strategy_name)
        return strategy

    def effective_parameters(self, strategy_name: str) -> EffectiveParameters:
        return resolve(self.config.defaults, self._strategy(strategy_name))

    def project(self, strategy_name: str, months: int, capital: Optional[float] = None) -> Plan:
        """
        Project the trading account of ``strategy_name`` over ``months`` months.

        ``capital`` defaults to ``capital_start`` from the global defaults.
        Raises StrategyNotFound before any computation when the name is unknown.
        """
        parameters = self.effective_parameters(strategy_name)
        start = self.config.defaults.capital_start if capital is None else capital
        return project_with(parameters, strategy_name, start, months)

    def analyze_all(self, months: int, capital: Optional[float] = None) -> List[Plan]:
        return [self.project(name, months, capital) for name in self.config.strategy_names()]
