from __future__ import annotations

import configparser
from pathlib import Path

import pytest

from mrmath.configs.paths import get_configs_dir, resolve_config_path
from mrmath.core.configuration import LineSearchSettings, load_settings, normalize_output_mode
from mrmath.core.validation import ConfigurationError
from mrmath.optim.quadratic_line_search import QuadraticLineSearch


def _cfg(**options: str) -> configparser.ConfigParser:
    cfg = configparser.ConfigParser()
    cfg["LINE_SEARCH"] = {"lower_bound": "0.0", "upper_bound": "4.0"}
    for key, value in options.items():
        cfg["LINE_SEARCH"][key] = value
    return cfg


def test_get_configs_dir_exists() -> None:
    p = get_configs_dir()
    assert isinstance(p, Path)
    assert p.exists()


def test_resolve_config_path_filename_only() -> None:
    for raw in ("LineSearch_Default.ini", "LineSearch_Default", "some/old/dir/LineSearch_Default.ini"):
        resolved = resolve_config_path(raw)
        assert Path(resolved).exists()
        assert Path(resolved).name == "LineSearch_Default.ini"


def test_resolve_config_path_unknown_is_unchanged() -> None:
    assert resolve_config_path("does_not_exist.ini") == "does_not_exist.ini"


def test_shipped_template_loads() -> None:
    settings = load_settings("LineSearch_Default.ini")
    assert settings == LineSearchSettings(
        lower_bound=0.0,
        upper_bound=4.0,
        init_estimate=1.0,
        value_tolerance=None,
        function_tolerance=0.0,
        exit_if_outside_bounds=True,
        max_iterations=50,
        message="",
        output_mode="standard",
    )


def test_settings_from_file(tmp_path: Path) -> None:
    ini = tmp_path / "search.ini"
    ini.write_text(
        "[GLOBAL]\noutput_mode = v\n"
        "[LINE_SEARCH]\nlower_bound = -1\nupper_bound = 1\nvalue_tolerance = 1e-5\n"
        "exit_if_outside_bounds = no\nmax_iterations = 10\nmessage = fitting\n",
        encoding="utf-8",
    )
    settings = load_settings(str(ini))
    assert settings.lower_bound == -1.0
    assert settings.init_estimate is None
    assert settings.value_tolerance == pytest.approx(1e-5)
    assert settings.exit_if_outside_bounds is False
    assert settings.max_iterations == 10
    assert settings.message == "fitting"
    assert settings.output_mode == "verbose"


def test_settings_build_optimizer() -> None:
    ls = QuadraticLineSearch.from_settings(load_settings(_cfg(max_iterations="5", exit_if_outside_bounds="false")))
    assert ls.lower_bound == 0.0 and ls.upper_bound == 4.0
    assert ls.init_estimate == pytest.approx(2.0)
    assert ls.value_tolerance == pytest.approx(0.004)
    assert ls.max_iterations == 5
    assert ls.exit_if_outside_bounds is False


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings(str(tmp_path / "missing.ini"))


def test_missing_section_raises() -> None:
    with pytest.raises(ConfigurationError, match=r"\[LINE_SEARCH\]"):
        load_settings(configparser.ConfigParser())


def test_missing_bound_raises() -> None:
    cfg = configparser.ConfigParser()
    cfg["LINE_SEARCH"] = {"lower_bound": "0.0"}
    with pytest.raises(ConfigurationError, match="upper_bound"):
        load_settings(cfg)


@pytest.mark.parametrize(
    "options",
    [
        {"lower_bound": "abc"},
        {"lower_bound": "5.0"},
        {"upper_bound": "nan"},
        {"init_estimate": "4.0"},
        {"init_estimate": "-1.0"},
        {"value_tolerance": "0"},
        {"function_tolerance": "-0.1"},
        {"exit_if_outside_bounds": "maybe"},
        {"max_iterations": "0"},
        {"max_iterations": "2.5"},
        {"max_iterations": "1000000"},
    ],
)
def test_invalid_values_raise(options) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(_cfg(**options))


def test_output_mode_normalization() -> None:
    assert normalize_output_mode(None) == "standard"
    assert normalize_output_mode(" Q ") == "quiet"
    assert normalize_output_mode("dbg") == "debug"
    with pytest.raises(ConfigurationError):
        normalize_output_mode("loud")
