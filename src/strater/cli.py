from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .config import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_KEYS,
    KEY_DESCRIPTION,
    KEY_MONTH_PROFIT_TARGET_PCT,
    KEY_MONTH_TRADES_NET_WINS,
    KEY_NAME,
    KEY_TRADE_REWARD_PCT,
    KEY_TRADE_RISK_PCT,
    ConfigNotFoundError,
    StraterConfig,
    default_config,
    find_config_file,
    get_default_value,
    load_config,
    save_config,
    set_default_value,
)
from .engine import Plan, ProjectionEngine
from .report import WRITERS, generate
from .strategies import (
    add_strategy,
    describe_strategies,
    get_strategy,
    get_strategy_value,
    remove_strategy,
    set_strategy_value,
    update_strategy,
)
from .utils import load_env_file


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="strater",
        description="A trading strategy scaling calculator.",
    )
    parser.add_argument("--file", "-f", help="Override the configuration file location.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    init_cmd = commands.add_parser("init", help="Initialize a new configuration file.")
    init_cmd.add_argument("--path", default=DEFAULT_CONFIG_NAME, help="Where to write the file.")

    config_cmd = commands.add_parser(
        "config",
        help="Get or set configuration values ('config list' shows the keys).",
    )
    config_cmd.add_argument("key")
    config_cmd.add_argument("value", nargs="?")

    strat_cmd = commands.add_parser("strat", aliases=["strategy"], help="Manage trading strategies.")
    strat_commands = strat_cmd.add_subparsers(dest="strat_command", required=True)

    strat_commands.add_parser("list", help="List all strategies.")
    add_cmd = strat_commands.add_parser("add", help="Add a new strategy.")
    add_cmd.add_argument("name")
    add_cmd.add_argument("--description", "-d", default="")
    remove_cmd = strat_commands.add_parser("remove", help="Remove a strategy.")
    remove_cmd.add_argument("name")
    update_cmd = strat_commands.add_parser("update", help="Update profit target and/or risk.")
    update_cmd.add_argument("name")
    update_cmd.add_argument("--profit", type=float, help="Monthly profit target pct.")
    update_cmd.add_argument("--risk", type=float, help="Risk per trade pct.")

    sconfig_cmd = strat_commands.add_parser("config", help="Get or set strategy configuration values.")
    sconfig_cmd.add_argument("name")
    sconfig_cmd.add_argument("key", nargs="?")
    sconfig_cmd.add_argument("value", nargs="?")
    sconfig_cmd.add_argument("--list", "-l", action="store_true", help="Show effective values.")

    analyze_cmd = strat_commands.add_parser("analyze", help="Analyze a trading strategy.")
    analyze_cmd.add_argument("name")
    analyze_all_cmd = strat_commands.add_parser("analyze-all", help="Analyze every strategy.")
    for cmd in (analyze_cmd, analyze_all_cmd):
        cmd.add_argument("--months", "-m", type=int, help="Months to project (default from config).")
        cmd.add_argument("--output", "-o", default="csv", choices=sorted(WRITERS), help="Output format.")
        cmd.add_argument("--path", "-p", help="Output file path (default from config).")
    analyze_cmd.add_argument("--capital", "-c", type=float, help="Initial capital (default from config).")

    return parser.parse_args(argv)


def _config_path(explicit: Optional[str]) -> Path:
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Specified config file not found: {path}")
        return path
    return find_config_file()


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _output_path(config: StraterConfig, explicit: Optional[str], stem: str, fmt: str) -> Path:
    if explicit:
        return Path(explicit)
    filename = f"{stem}_analysis.{fmt}"
    if config.settings.output_path:
        return Path(config.settings.output_path) / filename
    return Path(filename)


def _print_projection(plan: Plan) -> None:
    print(
        f"[Strater] {plan.strategy_name}: {len(plan.monthly_results)} months, "
        f"{plan.initial_capital:.2f} -> {plan.final_balance:.2f}"
    )


def _run_init(args: argparse.Namespace) -> None:
    target = Path(args.path)
    if target.exists():
        raise FileExistsError(f"A configuration file already exists at {target}")
    if args.path == DEFAULT_CONFIG_NAME:
        try:
            existing = find_config_file()
        except ConfigNotFoundError:
            existing = None
        if existing is not None:
            raise FileExistsError(f"Configuration file already exists at {existing}")
    save_config(default_config(), target)
    print(f"[Strater] Created new configuration file: {target}")


def _run_config(args: argparse.Namespace) -> None:
    if args.key == "list" and args.value is None:
        for key in DEFAULT_KEYS:
            print(key)
        return
    path = _config_path(args.file)
    config = load_config(path)
    if args.value is None:
        print(_format_value(get_default_value(config, args.key)))
        return
    save_config(set_default_value(config, args.key, args.value), path)


def _run_strategy_config(args: argparse.Namespace, config: StraterConfig, path: Path) -> None:
    if args.list:
        strategy = get_strategy(config, args.name)
        effective = ProjectionEngine(config).effective_parameters(args.name)
        print(f"{KEY_NAME}: {strategy.name}")
        print(f"{KEY_DESCRIPTION}: {strategy.description}")
        print(f"{KEY_TRADE_RISK_PCT}: {effective.trade_risk_pct:.2f}")
        print(f"{KEY_TRADE_REWARD_PCT}: {effective.trade_reward_pct:.2f}")
        print(f"{KEY_MONTH_TRADES_NET_WINS}: {effective.month_trades_net_wins}")
        print(f"{KEY_MONTH_PROFIT_TARGET_PCT}: {effective.month_profit_target_pct:.2f}")
        return
    if args.key is None:
        raise ValueError("requires at least strategy name and key: strater strat config <strategy> <key> [value]")
    if args.value is None:
        print(_format_value(get_strategy_value(config, args.name, args.key)))
        return
    save_config(set_strategy_value(config, args.name, args.key, args.value), path)


def _run_analyze(args: argparse.Namespace, config: StraterConfig) -> List[Path]:
    months = args.months if args.months is not None else config.defaults.month_count
    engine = ProjectionEngine(config)
    if args.strat_command == "analyze":
        print(f"[Strater] Analyzing {args.name} over {months} months...")
        plans = [engine.project(args.name, months, args.capital)]
        stem = args.name
    else:
        print(f"[Strater] Analyzing {len(config.strategies)} strategies over {months} months...")
        plans = engine.analyze_all(months)
        stem = "all"
    for plan in plans:
        _print_projection(plan)
    output = generate(plans, args.output, _output_path(config, args.path, stem, args.output))
    print(f"[Strater] Analysis complete: {output}")
    return [output]


def _run_strategy(args: argparse.Namespace) -> None:
    path = _config_path(args.file)
    config = load_config(path)
    command = args.strat_command

    if command == "list":
        for line in describe_strategies(config):
            print(line)
    elif command == "add":
        save_config(add_strategy(config, args.name, args.description), path)
        print(f"[Strater] Added strategy {args.name}")
    elif command == "remove":
        save_config(remove_strategy(config, args.name), path)
        print(f"[Strater] Removed strategy {args.name}")
    elif command == "update":
        save_config(update_strategy(config, args.name, args.profit, args.risk), path)
    elif command == "config":
        _run_strategy_config(args, config, path)
    else:
        _run_analyze(args, config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_env_file(".env")
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - [%(levelname)s] - %(message)s")
    try:
        if args.command == "init":
            _run_init(args)
        elif args.command == "config":
            _run_config(args)
        else:
            _run_strategy(args)
    except (LookupError, ValueError, OSError) as exc:
        message = exc.args[0] if isinstance(exc, LookupError) and exc.args else exc
        print(f"Error: {message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
