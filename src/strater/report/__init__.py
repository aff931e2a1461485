from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..engine import Plan
from .excel import export_excel
from .exports import export_csv, export_json, plans_to_frame
from .plots import plot_balance_curves

WRITERS = {
    "csv": export_csv,
    "xlsx": export_excel,
    "json": export_json,
    "png": plot_balance_curves,
}


def generate(plans: Sequence[Plan], fmt: str, output_path: Path | str) -> Path:
    try:
        writer = WRITERS[fmt]
    except KeyError as exc:
        raise ValueError(f"unsupported format: {fmt} (choose from {sorted(WRITERS)})") from exc
    return writer(plans, Path(output_path))


__all__ = [
    "WRITERS",
    "export_csv",
    "export_excel",
    "export_json",
    "generate",
    "plans_to_frame",
    "plot_balance_curves",
]
