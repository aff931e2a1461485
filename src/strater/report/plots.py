from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from ..engine import Plan  # noqa: E402


def plot_balance_curves(plans: Sequence[Plan], output_path: Path) -> Path:
    """Draw the projected trading balance of each plan, month 0 included."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(12, 5))
    for plan in plans:
        months = [0] + [r.month for r in plan.monthly_results]
        balances = [plan.initial_capital] + [r.ending_balance for r in plan.monthly_results]
        plt.plot(months, balances, marker="o", label=plan.strategy_name)
    plt.title("Projected trading balance")
    plt.xlabel("Month")
    plt.ylabel("Balance")
    plt.grid(True)
    if plans:
        plt.legend()
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    return output_path
