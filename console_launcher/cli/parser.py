# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Command-Line Options Parser

Turns raw arguments into ``LaunchOptions``. Parsing never exits the process:
every problem is raised as ``OptionsParseError`` so that the launcher can
report it together with the help text.
"""

import argparse
import logging
import re
from typing import List, Optional, Sequence, TextIO

from .help_system import HelpTopic, LauncherHelpSystem
from .options import (
    Details,
    ExecutionParameters,
    LaunchMode,
    LaunchOptions,
    OptionsParseError,
)
from .ux_config import (
    DETAILS_CHOICES,
    LauncherPreferences,
    VerbosityLevel,
    load_preferences,
)

logger = logging.getLogger(__name__)

PROG = "console-launcher"


class _RaisingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message):
        raise OptionsParseError(message)


def create_argument_parser() -> argparse.ArgumentParser:
    parser = _RaisingArgumentParser(
        prog=PROG,
        add_help=False,  # We handle help ourselves
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    commands = parser.add_argument_group("commands")
    commands.add_argument(
        "-h",
        "--help",
        nargs="?",
        const=HelpTopic.MAIN.value,
        choices=[topic.value for topic in HelpTopic],
        metavar="TOPIC",
        help="Show help and exit. Topics: "
        + ", ".join(topic.value for topic in HelpTopic),
    )
    commands.add_argument(
        "--list-engines",
        action="store_true",
        help="List all registered test engines and exit",
    )
    commands.add_argument(
        "--list-tests",
        action="store_true",
        help="List all discovered tests without executing them",
    )

    display = parser.add_argument_group("display")
    display.add_argument(
        "--disable-banner",
        action="store_true",
        help="Do not print the welcome banner",
    )
    display.add_argument(
        "--disable-ansi-colors",
        action="store_true",
        help="Disable ANSI colors in output",
    )
    display.add_argument(
        "--details",
        choices=DETAILS_CHOICES,
        default=None,
        help="Output detail while tests run (default: tree)",
    )
    display.add_argument(
        "--verbosity",
        choices=[level.value for level in VerbosityLevel],
        default=None,
        help="Logging verbosity (default: minimal)",
    )
    display.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory containing preferences.json",
    )

    selectors = parser.add_argument_group(
        "selectors", "Without any selector the current directory is scanned."
    )
    selectors.add_argument(
        "--scan-path", action="append", default=[], metavar="DIR",
        help="Scan a directory for tests (repeatable)",
    )
    selectors.add_argument(
        "-f", "--select-file", action="append", default=[], metavar="PATH",
        help="Select a test file (repeatable)",
    )
    selectors.add_argument(
        "-m", "--select-module", action="append", default=[], metavar="NAME",
        help="Select a module or package by dotted name (repeatable)",
    )
    selectors.add_argument(
        "-t", "--select-test", action="append", default=[], metavar="ID",
        help="Select a test by dotted unittest id or pytest node id (repeatable)",
    )
    selectors.add_argument(
        "test_ids", nargs="*", metavar="TEST_ID",
        help="Additional test ids, same as --select-test",
    )

    filters = parser.add_argument_group("filters")
    filters.add_argument(
        "-n", "--include-name", action="append", default=[], metavar="REGEX",
        help="Only run tests whose id matches the pattern (repeatable)",
    )
    filters.add_argument(
        "-N", "--exclude-name", action="append", default=[], metavar="REGEX",
        help="Skip tests whose id matches the pattern (repeatable)",
    )
    filters.add_argument(
        "-e", "--include-engine", action="append", default=[], metavar="ID",
        help="Only use the given engine (repeatable)",
    )
    filters.add_argument(
        "-E", "--exclude-engine", action="append", default=[], metavar="ID",
        help="Never use the given engine (repeatable)",
    )
    filters.add_argument(
        "--fail-if-no-tests",
        action="store_true",
        help="Fail with a distinct exit code when no tests are found",
    )

    return parser


def _validate_patterns(option: str, patterns: List[str]):
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise OptionsParseError(f"invalid {option} pattern {pattern!r}: {e}") from e


class ArgparseOptionsParser:
    """Parses command-line arguments and renders the matching help text."""

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = config_dir
        self.argument_parser = create_argument_parser()
        self.help_system = LauncherHelpSystem(self.argument_parser)

    def _preferences(self, args: argparse.Namespace) -> LauncherPreferences:
        return load_preferences(args.config_dir or self.config_dir)

    def parse(self, argv: Sequence[str]) -> LaunchOptions:
        args = self.argument_parser.parse_intermixed_args(list(argv))

        _validate_patterns("--include-name", args.include_name)
        _validate_patterns("--exclude-name", args.exclude_name)
        both = sorted(set(args.include_engine) & set(args.exclude_engine))
        if both:
            raise OptionsParseError(
                f"engine(s) both included and excluded: {', '.join(both)}"
            )

        preferences = self._preferences(args)
        include_engines = args.include_engine or [
            engine for engine in preferences.include_engines
            if engine not in args.exclude_engine
        ]

        mode = LaunchMode.resolve(
            list_engines=args.list_engines,
            list_tests=args.list_tests,
            show_help=args.help is not None,
        )
        options = LaunchOptions(
            mode=mode,
            banner_disabled=args.disable_banner or preferences.disable_banner,
            ansi_color_output_disabled=(
                args.disable_ansi_colors or preferences.disable_ansi_colors
            ),
            fail_if_no_tests=args.fail_if_no_tests or preferences.fail_if_no_tests,
            details=Details(args.details or preferences.details),
            help_topic=HelpTopic(args.help or HelpTopic.MAIN.value),
            verbosity=(
                VerbosityLevel(args.verbosity)
                if args.verbosity
                else preferences.verbosity
            ),
            parameters=ExecutionParameters(
                scan_paths=tuple(args.scan_path),
                files=tuple(args.select_file),
                modules=tuple(args.select_module),
                test_ids=tuple(args.select_test + args.test_ids),
                include_names=tuple(args.include_name),
                exclude_names=tuple(args.exclude_name),
                include_engines=tuple(include_engines),
                exclude_engines=tuple(args.exclude_engine),
            ),
        )
        logger.debug(f"Parsed options: {options}")
        return options

    def print_help(
        self,
        out: TextIO,
        ansi_color_output_disabled: bool = False,
        topic: HelpTopic = HelpTopic.MAIN,
    ):
        self.help_system.print_help(out, ansi_color_output_disabled, topic)


__all__ = ["PROG", "create_argument_parser", "ArgparseOptionsParser"]
