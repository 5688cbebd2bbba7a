#!/usr/bin/env python3
"""
GasLens: gas optimization analysis for Solidity contracts

Main entry point for the CLI interface.
"""

import argparse
import logging
import sys

from cli.main import GasLensCLI
from gaslens.config_manager import DEFAULT_CONFIG_FILE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gaslens",
        description="GasLens: find gas optimization opportunities in Solidity contracts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gaslens analyze contracts/MyToken.sol
  gaslens analyze contracts/ --no-compiler --json out/gas.json
        """
    )
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE, help='YAML configuration file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Global options may also follow the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', default=argparse.SUPPRESS, help='YAML configuration file')
    common.add_argument('--verbose', '-v', action='store_true', default=argparse.SUPPRESS, help='Verbose output')

    analyze_parser = subparsers.add_parser('analyze', parents=[common],
                                           help='Analyze a Solidity file or directory')
    analyze_parser.add_argument('contract', help='Path to Solidity file or directory')
    analyze_parser.add_argument('--no-compiler', action='store_true', help='Skip solc and use the built-in parser')
    analyze_parser.add_argument('--solc-version', help='solc version to compile with')
    analyze_parser.add_argument('--json', dest='json_output', help='Write reports as JSON to this path')

    subparsers.add_parser('version', help='Show version information')
    return parser


def main(argv=None) -> int:
    """Main entry point for GasLens CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cli = GasLensCLI(config_file=args.config)

    if args.command == 'analyze':
        return cli.run_analysis(
            args.contract,
            use_compiler=False if args.no_compiler else None,
            solc_version=args.solc_version,
            json_output=args.json_output,
        )
    if args.command == 'version':
        cli.show_version()
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
