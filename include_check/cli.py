"""
Include Check - Command Line Interface.

============================================================
ENTRY POINTS
============================================================
validate-settings-includes
    Checks canonical settings includes on header-enabled
    pages under the corpus root (current directory).

validate-pages
    Checks the shared chrome on every page under the root.

Both print a summary report and exit 0 when every checked
page is valid, 1 otherwise. Configuration errors exit 2.

============================================================
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from core.config import ShellConfig
from core.exceptions import ConfigurationError
from core.logging_setup import setup_logging
from .pages import ChromePageChecker
from .report import CheckReport
from .validator import StaticOrderValidator


CONFIG_ERROR_EXIT_CODE = 2


def create_parser(prog: str, description: str) -> argparse.ArgumentParser:
    """Create the argument parser shared by both checkers."""
    parser = argparse.ArgumentParser(
        prog=prog,
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Check the current directory
  %(prog)s --root site/             # Check another corpus
  %(prog)s --json > report.json     # Machine-readable report
        """,
    )

    # --------------------------------------------------------
    # Input Options
    # --------------------------------------------------------
    input_group = parser.add_argument_group("Input Options")

    input_group.add_argument(
        "--root",
        type=Path,
        default=None,
        metavar="PATH",
        help="Corpus root to scan (default: SHELL_CORPUS_ROOT or current directory)",
    )

    input_group.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML config file (default: environment variables)",
    )

    # --------------------------------------------------------
    # Output Options
    # --------------------------------------------------------
    output_group = parser.add_argument_group("Output Options")

    output_group.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    output_group.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: WARNING)",
    )

    output_group.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Log line format (default: text)",
    )

    return parser


def load_config(args: argparse.Namespace) -> ShellConfig:
    """Build the effective config: file or environment, then flags."""
    if args.config is not None:
        config = ShellConfig.from_yaml(args.config)
    else:
        config = ShellConfig.from_env()

    if args.root is not None:
        config.corpus_root = args.root
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format
    return config


def emit(report: CheckReport, as_json: bool) -> int:
    """Print a report and get its exit code."""
    print(report.render_json() if as_json else report.render_text())
    return report.exit_code


def _prepare(parser: argparse.ArgumentParser, argv: Optional[List[str]]):
    args = parser.parse_args(argv)
    try:
        config = load_config(args)
    except (ConfigurationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return args, None

    if not config.corpus_root.is_dir():
        print(f"Error: corpus root {config.corpus_root} is not a directory", file=sys.stderr)
        return args, None

    setup_logging(level=config.log_level, log_format=config.log_format, command=parser.prog)
    return args, config


def main_includes(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for validate-settings-includes.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser(
        "validate-settings-includes",
        "Validate canonical settings includes on header-enabled pages",
    )
    args, config = _prepare(parser, argv)
    if config is None:
        return CONFIG_ERROR_EXIT_CODE

    validator = StaticOrderValidator(
        config.corpus_root,
        excluded_dir=config.excluded_dir,
        header_marker=config.header_marker,
    )
    return emit(validator.run(), args.json)


def main_pages(argv: Optional[List[str]] = None) -> int:
    """Entry point for validate-pages."""
    parser = create_parser(
        "validate-pages",
        "Validate sidebar, header and breadcrumb chrome on every page",
    )
    args, config = _prepare(parser, argv)
    if config is None:
        return CONFIG_ERROR_EXIT_CODE

    return emit(ChromePageChecker(config.corpus_root).run(), args.json)


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main_includes())
