from .projection import (
    Account,
    MonthlyResult,
    Plan,
    ProjectionEngine,
    StrategyNotFound,
    Transaction,
    project_with,
)
from .resolver import EffectiveParameters, resolve

__all__ = [
    "Account",
    "EffectiveParameters",
    "MonthlyResult",
    "Plan",
    "ProjectionEngine",
    "StrategyNotFound",
    "Transaction",
    "project_with",
    "resolve",
]
