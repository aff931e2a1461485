"""
Strater: account growth projections for trading strategies.

The package resolves layered strategy parameters (built-in constants, global
defaults, per-strategy overrides) and compounds a starting capital month by
month. ``project_strategy`` is the convenience entrypoint; the ``strater``
command line tool wraps configuration management and report generation.
"""

from .config import StraterConfig, load_config
from .engine import Plan, ProjectionEngine, StrategyNotFound


def project_strategy(config: StraterConfig, strategy_name: str, months: int) -> Plan:
    return ProjectionEngine(config).project(strategy_name, months)


__all__ = [
    "Plan",
    "ProjectionEngine",
    "StraterConfig",
    "StrategyNotFound",
    "load_config",
    "project_strategy",
]
