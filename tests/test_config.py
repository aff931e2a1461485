import pytest
import yaml

from strater.config import (
    CONFIG_ENV_VAR,
    ConfigNotFoundError,
    GlobalDefaults,
    StraterConfig,
    StrategyOverride,
    default_config,
    find_config_file,
    get_default_value,
    load_config,
    save_config,
    set_default_value,
)


def test_save_and_load_preserves_explicit_zero(tmp_path):
    config = StraterConfig(
        defaults=GlobalDefaults(capital_start=2000, trade_reward_pct=0.01),
        strategies=[StrategyOverride(name="flat", trade_reward_pct=0.0, description="no reward")],
    )
    path = tmp_path / "cfg.yaml"

    save_config(config, path)
    loaded = load_config(path)

    assert loaded == config
    assert loaded.find_strategy("flat").trade_reward_pct == 0.0
    assert loaded.defaults.month_trades_net_wins is None


def test_load_json_config(tmp_path):
    path = tmp_path / ".strater.json"
    path.write_text(
        '{"settings": {"output_path": "out"},'
        ' "strat": {"default": {"capital_start": 10000, "trade_reward_pct": 0.01,'
        ' "month_trades_net_wins": 10, "month_count": 12}},'
        ' "strategies": [{"name": "ifunds", "trade_reward_pct": 0.02}]}',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.settings.output_path == "out"
    assert config.defaults.capital_start == 10000
    assert config.find_strategy("ifunds").trade_reward_pct == 0.02
    assert config.find_strategy("ifunds").month_trades_net_wins is None


def test_missing_sections_use_dataclass_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    config = load_config(path)

    assert config.defaults.capital_start == 10000
    assert config.defaults.month_count == 12
    assert config.strategies == []


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"strat": {"default": {"bogus": 1}}}, "Unknown keys"),
        ({"strat": {"default": {"trade_reward_pct": -0.1}}}, "non-negative"),
        ({"strategies": [{"trade_reward_pct": 0.1}]}, "name"),
        ({"strategies": [{"name": "a"}, {"name": "a"}]}, "Duplicate"),
        ({"other": {}}, "Unknown keys"),
    ],
)
def test_invalid_payloads_are_rejected(payload, message):
    with pytest.raises(ValueError, match=message):
        StraterConfig.from_dict(payload)


def test_root_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text(yaml.safe_dump([1, 2]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_find_config_prefers_env_var(tmp_path, monkeypatch):
    env_file = tmp_path / "custom.yaml"
    save_config(default_config(), env_file)
    monkeypatch.chdir(tmp_path)
    save_config(default_config(), tmp_path / ".strater.yaml")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(env_file))

    assert find_config_file() == env_file


def test_find_config_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    save_config(default_config(), tmp_path / ".strater.yaml")

    assert find_config_file().name == ".strater.yaml"


def test_find_config_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setattr("strater.config.DEFAULT_CONFIG_PATHS", (".strater.yaml", "$HOME/.strater.yaml"))

    with pytest.raises(ConfigNotFoundError):
        find_config_file()


def test_get_and_set_default_values():
    config = default_config()

    updated = set_default_value(config, "trade_reward_pct", "0.05")
    updated = set_default_value(updated, "month_count", "24")
    updated = set_default_value(updated, "capital_start", "2500.7")
    updated = set_default_value(updated, "output_path", "reports")

    assert get_default_value(updated, "trade_reward_pct") == 0.05
    assert get_default_value(updated, "month_count") == 24
    assert get_default_value(updated, "capital_start") == 2500
    assert get_default_value(updated, "output_path") == "reports"
    assert get_default_value(config, "trade_reward_pct") == 0.01


@pytest.mark.parametrize(
    "key,value",
    [
        ("trade_risk_pct", "1.5"),
        ("trade_reward_pct", "0"),
        ("month_profit_target_pct", "-1"),
        ("month_count", "0"),
        ("month_count", "1.5"),
        ("month_trades_net_wins", "abc"),
        ("capital_start", "lots"),
        ("unknown_key", "1"),
    ],
)
def test_set_default_value_validation(key, value):
    with pytest.raises(ValueError):
        set_default_value(default_config(), key, value)


def test_get_unknown_default_key():
    with pytest.raises(ValueError, match="Available keys"):
        get_default_value(default_config(), "name")


@pytest.mark.parametrize(
    "section,key,value",
    [
        ("default", "capital_start", float("inf")),
        ("default", "month_trades_net_wins", float("inf")),
        ("default", "trade_reward_pct", float("nan")),
        ("default", "trade_risk_pct", float("-inf")),
        ("strategy", "month_profit_target_pct", float("nan")),
        ("strategy", "trade_reward_pct", float("inf")),
    ],
)
def test_non_finite_values_are_rejected(section, key, value):
    if section == "default":
        payload = {"strat": {"default": {key: value}}, "strategies": [{"name": "a"}]}
    else:
        payload = {"strategies": [{"name": "a", key: value}]}

    with pytest.raises(ValueError, match="finite"):
        StraterConfig.from_dict(payload)


def test_yaml_infinity_and_nan_are_rejected(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "strat:\n  default:\n    month_trades_net_wins: .inf\nstrategies:\n  - name: a\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="finite"):
        load_config(path)

    path.write_text("strategies:\n  - name: a\n    trade_reward_pct: .nan\n", encoding="utf-8")
    with pytest.raises(ValueError, match="finite"):
        load_config(path)


@pytest.mark.parametrize("value", [2.9, "2.5", "many"])
def test_net_wins_must_be_integral(value):
    with pytest.raises(ValueError):
        StrategyOverride.from_dict({"name": "a", "month_trades_net_wins": value})


def test_integral_floats_and_strings_are_accepted():
    strategy = StrategyOverride.from_dict({"name": "a", "month_trades_net_wins": 12.0})
    defaults = GlobalDefaults.from_dict({"capital_start": "5000", "month_count": 6})

    assert strategy.month_trades_net_wins == 12
    assert isinstance(strategy.month_trades_net_wins, int)
    assert defaults.capital_start == 5000


@pytest.mark.parametrize(
    "key,value",
    [
        ("capital_start", "inf"),
        ("trade_reward_pct", "nan"),
        ("trade_risk_pct", "nan"),
        ("month_profit_target_pct", "inf"),
        ("month_count", "inf"),
    ],
)
def test_set_default_value_rejects_non_finite(key, value):
    with pytest.raises(ValueError):
        set_default_value(default_config(), key, value)
