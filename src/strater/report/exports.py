from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd

from ..engine import Plan

RESULT_COLUMNS = [
    "Strategy",
    "Month",
    "Starting Balance",
    "Ending Balance",
    "Profit",
    "Reward Per Trade",
    "Net Wins",
]
MONEY_COLUMNS = ["Starting Balance", "Ending Balance", "Profit", "Reward Per Trade"]


def plans_to_frame(plans: Sequence[Plan]) -> pd.DataFrame:
    """Flatten the monthly results of every plan into one table."""
    rows: List[Dict[str, Any]] = []
    for plan in plans:
        for result in plan.monthly_results:
            rows.append(
                {
                    "Strategy": plan.strategy_name,
                    "Month": result.month,
                    "Starting Balance": result.starting_balance,
                    "Ending Balance": result.ending_balance,
                    "Profit": result.profit_amount,
                    "Reward Per Trade": result.reward_per_trade_amount,
                    "Net Wins": result.net_wins,
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_csv(plans: Sequence[Plan], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame = plans_to_frame(plans)
    for column in MONEY_COLUMNS:
        frame[column] = frame[column].map(lambda v: f"{v:.2f}")
    frame.to_csv(output_path, index=False, encoding="utf-8")
    return output_path


def plan_to_dict(plan: Plan) -> Dict[str, Any]:
    payload = asdict(plan)
    payload["monthly_results"] = list(payload["monthly_results"])
    for account in ("trading_account", "savings_account"):
        for txn in payload[account]["history"]:
            txn["date"] = txn["date"].isoformat() if txn["date"] is not None else None
    return payload


def export_json(plans: Sequence[Plan], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as fh:
        json.dump([plan_to_dict(p) for p in plans], fh, indent=4)
        fh.write("\n")
    return output_path
