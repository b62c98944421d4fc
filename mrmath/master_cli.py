"""Package-scoped CLI entrypoint.

This is the console entry target for installed MRmath.
"""

from __future__ import annotations

import sys
import argparse

from mrmath.cli import CLI as searchCLI


def main() -> int:
    TOOL_DICT = {'search': searchCLI}

    parser = argparse.ArgumentParser(
        prog='MRmath',
        description='MRmath command line interface',
        epilog='See online documentation for more information about each function.',
    )
    subparsers = parser.add_subparsers(dest='command', help='sub-command help')

    # Register subcommands up front so help output is complete.
    commands = {}
    for name, factory in TOOL_DICT.items():
        cli = factory(subparsers)
        cli.add_subparser_args()
        commands[name] = cli

    argv = sys.argv[1:]
    if not argv:
        parser.print_help()
        return 0

    ns = parser.parse_args(argv)
    command = getattr(ns, 'command', None)
    if not command:
        parser.print_help()
        return 0

    cli = commands[command]
    args = cli.validate_args(vars(ns))
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
