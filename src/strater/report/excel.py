from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..engine import Plan
from .exports import MONEY_COLUMNS, RESULT_COLUMNS, plans_to_frame

RESULTS_SHEET = "Sheet1"
PARAMETERS_SHEET = "Parameters"


def _parameters_frame(plans: Sequence[Plan]) -> pd.DataFrame:
    rows = [
        {
            "Strategy": plan.strategy_name,
            "Initial Capital": plan.initial_capital,
            "Final Balance": plan.final_balance,
            "Trade Reward %": plan.parameters.trade_reward_pct,
            "Trade Risk %": plan.parameters.trade_risk_pct,
            "Month Trades Net Wins": plan.parameters.month_trades_net_wins,
            "Month Profit Target %": plan.parameters.month_profit_target_pct,
        }
        for plan in plans
    ]
    return pd.DataFrame(rows)


def export_excel(plans: Sequence[Plan], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    results = plans_to_frame(plans)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        results.to_excel(writer, index=False, sheet_name=RESULTS_SHEET)
        ws = writer.sheets[RESULTS_SHEET]
        ws.freeze_panes = "A2"
        for column in MONEY_COLUMNS:
            letter = get_column_letter(RESULT_COLUMNS.index(column) + 1)
            for cell in ws[letter][1:]:
                cell.number_format = "#,##0.00"

        _parameters_frame(plans).to_excel(writer, index=False, sheet_name=PARAMETERS_SHEET)
    return output_path
