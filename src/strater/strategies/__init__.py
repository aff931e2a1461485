from .store import (
    StrategyExistsError,
    add_strategy,
    describe_strategies,
    get_strategy,
    get_strategy_value,
    remove_strategy,
    set_strategy_value,
    update_strategy,
)

__all__ = [
    "StrategyExistsError",
    "add_strategy",
    "describe_strategies",
    "get_strategy",
    "get_strategy_value",
    "remove_strategy",
    "set_strategy_value",
    "update_strategy",
]
