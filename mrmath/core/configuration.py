"""Line-search configuration read from ``.ini`` files.

A configuration file carries a required ``[LINE_SEARCH]`` section and an
optional ``[GLOBAL]`` section::

    [GLOBAL]
    output_mode = standard

    [LINE_SEARCH]
    lower_bound = 0.0
    upper_bound = 4.0
    init_estimate = 1.0
    max_iterations = 50
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from mrmath.configs.paths import resolve_config_path
from mrmath.core.logfmt import DETAIL
from mrmath.core.validation import ConfigurationError, validate_bracket


SECTION = 'LINE_SEARCH'
MAX_ITERATIONS_LIMIT = 100000


@dataclass(frozen=True)
class LineSearchSettings:
    lower_bound: float
    upper_bound: float
    init_estimate: Optional[float] = None
    value_tolerance: Optional[float] = None
    function_tolerance: float = 0.0
    exit_if_outside_bounds: bool = True
    max_iterations: int = 50
    message: str = ''
    output_mode: str = 'standard'


def normalize_output_mode(value: str | None) -> str:
    if value is None:
        return 'standard'
    v = str(value).strip().lower()
    if v in {'quiet', 'q'}:
        return 'quiet'
    if v in {'standard', 'std', 'default', ''}:
        return 'standard'
    if v in {'verbose', 'v'}:
        return 'verbose'
    if v in {'debug', 'dbg'}:
        return 'debug'
    raise ConfigurationError(
        "Invalid output_mode value.\n"
        "Valid options: quiet | standard | verbose | debug\n"
        f"Current value: '{value}'"
    )


def read_config(path: str) -> configparser.ConfigParser:
    """Read an ``.ini`` file, resolving names of shipped templates."""
    resolved = resolve_config_path(path)
    if not os.path.exists(resolved):
        raise ConfigurationError(
            f"Configuration file not found: {path}\n"
            f"Please check the path and try again."
        )

    cfg = configparser.ConfigParser()
    try:
        cfg.read(resolved, encoding='utf-8')
    except configparser.Error as e:
        raise ConfigurationError(f"Could not parse configuration file {resolved}:\n{e}") from e
    return cfg


def _get_float(cfg: configparser.ConfigParser, key: str, required: bool = False) -> Optional[float]:
    if not cfg.has_option(SECTION, key) or not str(cfg[SECTION][key]).strip():
        if required:
            raise ConfigurationError(
                f"Missing required field '{key}' in [{SECTION}] section.\n"
                f"Add '{key} = <number>' to your configuration."
            )
        return None
    try:
        return float(cfg[SECTION][key])
    except ValueError:
        raise ConfigurationError(
            f"Invalid {key} value: must be a number.\n"
            f"Current value: '{cfg[SECTION][key]}'"
        )


def load_settings(cfg: Union[configparser.ConfigParser, str]) -> LineSearchSettings:
    """Validate a configuration and convert it to `LineSearchSettings`.

    `cfg` may be an already-populated ConfigParser or a path to an ``.ini``.
    """
    if not isinstance(cfg, configparser.ConfigParser):
        cfg = read_config(str(cfg))

    if not cfg.has_section(SECTION):
        raise ConfigurationError(
            f"Missing required section [{SECTION}] in configuration file.\n"
            f"Add a [{SECTION}] section with 'lower_bound' and 'upper_bound'."
        )

    lower = _get_float(cfg, 'lower_bound', required=True)
    upper = _get_float(cfg, 'upper_bound', required=True)
    init_estimate = _get_float(cfg, 'init_estimate')
    validate_bracket(lower, init_estimate, upper, name=SECTION)

    value_tolerance = _get_float(cfg, 'value_tolerance')
    if value_tolerance is not None and not value_tolerance > 0:
        raise ConfigurationError(
            f"Invalid value_tolerance: {value_tolerance}\n"
            f"Must be > 0.\n"
            f"Default: 0.001 * (upper_bound - lower_bound)"
        )

    function_tolerance = _get_float(cfg, 'function_tolerance')
    if function_tolerance is None:
        function_tolerance = 0.0
    elif function_tolerance < 0:
        raise ConfigurationError(
            f"Invalid function_tolerance: {function_tolerance}\n"
            f"Must be >= 0.\n"
            f"Default: 0.0 (disabled)"
        )

    exit_if_outside_bounds = True
    if cfg.has_option(SECTION, 'exit_if_outside_bounds'):
        try:
            exit_if_outside_bounds = cfg.getboolean(SECTION, 'exit_if_outside_bounds')
        except ValueError:
            raise ConfigurationError(
                "Invalid exit_if_outside_bounds value: must be a boolean (true/false).\n"
                f"Current value: '{cfg[SECTION]['exit_if_outside_bounds']}'"
            )

    max_iterations = 50
    if cfg.has_option(SECTION, 'max_iterations'):
        try:
            max_iterations = int(cfg[SECTION]['max_iterations'])
        except ValueError:
            raise ConfigurationError(
                "Invalid max_iterations value: must be an integer.\n"
                f"Current value: '{cfg[SECTION]['max_iterations']}'"
            )
        if max_iterations < 1 or max_iterations > MAX_ITERATIONS_LIMIT:
            raise ConfigurationError(
                f"Invalid max_iterations: {max_iterations}\n"
                f"Must be an integer in [1, {MAX_ITERATIONS_LIMIT}].\n"
                f"Default: 50"
            )

    message = str(cfg.get(SECTION, 'message', fallback='')).strip()
    output_mode = normalize_output_mode(cfg.get('GLOBAL', 'output_mode', fallback=None))

    logging.getLogger(__name__).log(DETAIL, "Configuration validation passed")

    return LineSearchSettings(
        lower_bound=lower,
        upper_bound=upper,
        init_estimate=init_estimate,
        value_tolerance=value_tolerance,
        function_tolerance=function_tolerance,
        exit_if_outside_bounds=exit_if_outside_bounds,
        max_iterations=max_iterations,
        message=message,
        output_mode=output_mode,
    )
