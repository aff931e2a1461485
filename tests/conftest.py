"""
Pytest configuration file.

Ensures src/ is on sys.path so that 'import strater' works without installing,
and provides configuration fixtures shared by the test modules.
"""
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from strater.config import GlobalDefaults, StraterConfig, StrategyOverride, default_config, save_config  # noqa: E402


@pytest.fixture
def base_config() -> StraterConfig:
    """Default config with two strategies: one bare, one overriding reward and wins."""
    cfg = default_config()
    return StraterConfig(
        settings=cfg.settings,
        defaults=cfg.defaults,
        strategies=[
            StrategyOverride(name="steady"),
            StrategyOverride(name="aggressive", trade_reward_pct=0.02, month_trades_net_wins=15),
        ],
    )


@pytest.fixture
def bare_config() -> StraterConfig:
    """Nothing configured beyond capital and month count."""
    return StraterConfig(
        defaults=GlobalDefaults(capital_start=5000, month_count=6),
        strategies=[StrategyOverride(name="plain")],
    )


@pytest.fixture
def config_file(tmp_path, base_config, monkeypatch) -> Path:
    path = tmp_path / ".strater.yaml"
    save_config(base_config, path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STRATER_CONFIG", raising=False)
    return path


@pytest.fixture
def scrub_env(monkeypatch):
    """Make sure variables injected by .env loading are removed after the test."""

    def _scrub(*names: str) -> None:
        for name in names:
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    return _scrub
