"""Command-line interface for the MRmath quadratic line search.

This module provides the `search` sub-command, which minimises a polynomial
cost function inside a bracket. Bracket and tolerances come from an optional
configuration file and may be overridden on the command line.

Example:
    MRmath search --coefficients 4 -4 1 --lower 0 --upper 4 --init 1
    MRmath search --cfg_path LineSearch_Default.ini --coefficients 4 -4 1 --trace
"""

from __future__ import annotations

import argparse
import configparser
import logging
import os

from mrmath.configs.paths import resolve_config_path
from mrmath.core.configuration import SECTION, load_settings, read_config
from mrmath.core.logfmt import STATUS, configure_logging, log_banner
from mrmath.core.validation import ConfigurationError
from mrmath.optim.cost_functions import PolynomialCost
from mrmath.optim.quadratic_line_search import QuadraticLineSearch


# command-line dest -> [LINE_SEARCH] option
_OVERRIDES = {
    'lower': 'lower_bound',
    'upper': 'upper_bound',
    'init': 'init_estimate',
    'tolerance': 'value_tolerance',
    'function_tolerance': 'function_tolerance',
    'max_iterations': 'max_iterations',
    'message': 'message',
}


class CLI:
    def __init__(self, subparsers) -> None:
        """Initializes the sub-command on the given subparsers

        :param subparsers: Subparser collection of the master parser
        :type subparsers: argparse._SubParsersAction
        """
        self.subparsers = subparsers

    def validate_args(self, args):
        """Validation step for parsed user input arguments

        :param args: Parsed user inputs
        :type args: dictionary
        :return: Parsed and validated arguments
        :rtype: dictionary
        """
        cfg_path = args.get('cfg_path', None)
        if cfg_path is not None:
            cfg_path = resolve_config_path(str(cfg_path))
            if not os.path.exists(cfg_path):
                raise FileNotFoundError(
                    f"Configuration file not found: {cfg_path}\n"
                    f"Please check the path and try again."
                )
            args['cfg_path'] = cfg_path
        elif args.get('lower') is None or args.get('upper') is None:
            raise ConfigurationError(
                "No bracket given.\n"
                "Pass --lower and --upper, or a configuration file via --cfg_path."
            )

        if not args.get('coefficients'):
            raise ConfigurationError("At least one polynomial coefficient is required (--coefficients).")

        return args

    def build_config(self, args) -> configparser.ConfigParser:
        """Merge the configuration file (if any) with command-line overrides."""
        if args.get('cfg_path'):
            cfg = read_config(args['cfg_path'])
        else:
            cfg = configparser.ConfigParser()

        if not cfg.has_section(SECTION):
            cfg.add_section(SECTION)
        for dest, option in _OVERRIDES.items():
            value = args.get(dest)
            if value is not None:
                cfg.set(SECTION, option, str(value))
        if args.get('expand'):
            cfg.set(SECTION, 'exit_if_outside_bounds', 'false')

        if args.get('output_mode'):
            if not cfg.has_section('GLOBAL'):
                cfg.add_section('GLOBAL')
            cfg.set('GLOBAL', 'output_mode', args['output_mode'])
        return cfg

    def run(self, args) -> int:
        """Run the line search using parsed user inputs

        :param args: User inputs for relevant parameters
        :type args: dictionary
        :return: Process exit code, 0 when the search succeeded
        :rtype: int
        """
        settings = load_settings(self.build_config(args))
        configure_logging(settings.output_mode)

        cost = PolynomialCost([float(c) for c in args['coefficients']])
        line_search = QuadraticLineSearch.from_settings(settings)

        log_banner('Quadratic Line Search')
        logging.info(f"  Cost function : {cost!r}")
        logging.info(f"  Bracket       : [{settings.lower_bound}, {settings.upper_bound}]")
        logging.info(f"  Initial guess : {line_search.init_estimate}")
        logging.info(f"  Tolerance     : {line_search.value_tolerance}")

        if args.get('trace'):
            result = line_search.verbose(cost)
        else:
            result = line_search(cost)

        logging.log(STATUS, f"value = {result.value}")
        logging.log(STATUS, f"status = {result.status.name}")
        logging.log(STATUS, f"iterations = {result.iterations}")
        logging.info(f"evaluations = {result.evaluations}")

        if not result.success:
            logging.warning(f"Line search did not succeed ({result.status.name})")
            return 1
        return 0

    def add_subparser_args(self) -> argparse:
        """Defines the `search` sub-command and its arguments.

        :return: argparse object containing the subparsers
        :rtype: argparse
        """

        subparser = self.subparsers.add_parser("search",
                                               description="minimise a polynomial cost with a quadratic line search",
                                               )

        subparser.add_argument("--coefficients", nargs='+', type=float, required=True,
                               help="Polynomial coefficients in order of increasing power")

        subparser.add_argument("--cfg_path", type=str, required=False, default=None,
                               help="The path to a line-search configuration file")

        subparser.add_argument("--lower", type=float, default=None, help="Lower bound of the bracket")
        subparser.add_argument("--upper", type=float, default=None, help="Upper bound of the bracket")
        subparser.add_argument("--init", type=float, default=None,
                               help="Initial estimate (default: bracket midpoint)")
        subparser.add_argument("--tolerance", type=float, default=None,
                               help="Value tolerance (default: 0.1%% of the bracket width)")
        subparser.add_argument("--function_tolerance", type=float, default=None,
                               help="Relative function-value tolerance (default: disabled)")
        subparser.add_argument("--max_iterations", type=int, default=None,
                               help="Maximum number of iterations (default: 50)")
        subparser.add_argument("--message", type=str, default=None,
                               help="Show a progress bar with this message")
        subparser.add_argument("--expand", action="store_true",
                               help="Widen the bracket instead of failing when the minimum lies outside it")
        subparser.add_argument("--trace", action="store_true",
                               help="Write a trace of every bracket update to stderr")

        subparser.add_argument(
            "--output_mode",
            type=str,
            required=False,
            default=None,
            choices=["quiet", "standard", "verbose", "debug"],
            help="Terminal output mode (overrides config): quiet | standard | verbose | debug",
        )

        return self.subparsers
