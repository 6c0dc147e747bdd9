# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher Help System

Renders the help text shown by ``--help`` and on every failure path. The
full help is the argparse option reference followed by the exit codes and a
few copy-paste examples. ``--help TOPIC`` narrows it down to one section.
"""

from enum import Enum
from typing import Dict, List, TextIO

from ..core.outcome import ExitCode
from ..core.output import Colors, Painter

TITLE = "Console Launcher - run tests on a pluggable test engine platform"


class HelpTopic(Enum):
    """Help sections that can be requested on their own."""

    MAIN = "main"
    EXAMPLES = "examples"
    EXIT_CODES = "exit-codes"
    CONFIGURATION = "configuration"


EXIT_CODE_DESCRIPTIONS: Dict[ExitCode, str] = {
    ExitCode.SUCCESS: "tests passed, or a listing or help was printed",
    ExitCode.TESTS_FAILED: "at least one test or container failed",
    ExitCode.NO_TESTS_FOUND: "no tests were found and --fail-if-no-tests is set",
    ExitCode.INTERNAL_ERROR: "test discovery or execution raised an unexpected error",
    ExitCode.CONFIGURATION_ERROR: "the command line could not be parsed",
}

EXAMPLES: List[str] = [
    "console-launcher --scan-path tests",
    "console-launcher --select-module myproject.tests.test_models",
    "console-launcher -t tests/test_api.py::test_login --details flat",
    "console-launcher --include-engine pytest --include-name 'login|logout'",
    "console-launcher --list-tests --scan-path tests",
    "console-launcher --list-engines",
]

CONFIGURATION_HELP = """\
Defaults can be stored in preferences.json inside the configuration
directory (--config-dir, $CONSOLE_LAUNCHER_CONFIG_DIR or ~/.console-launcher):

  {
    "disable_banner": true,
    "disable_ansi_colors": false,
    "fail_if_no_tests": true,
    "details": "summary",
    "verbosity": "minimal",
    "include_engines": ["pytest"]
  }

Command-line flags always take precedence.
"""


class LauncherHelpSystem:
    """Formats help text around an argparse parser."""

    def __init__(self, parser):
        self.parser = parser

    def _heading(self, text: str, painter: Painter) -> str:
        return painter.paint(text, Colors.BOLD)

    def _reference(self, painter: Painter) -> str:
        lines = []
        for line in self.parser.format_help().rstrip().splitlines():
            # argparse section titles: "usage: ...", "options:", "selectors:"
            if line and not line.startswith(" ") and ":" in line:
                head, _, rest = line.partition(":")
                line = self._heading(f"{head}:", painter) + rest
            lines.append(line)
        return "\n".join(lines)

    def _exit_codes(self, painter: Painter) -> str:
        lines = [self._heading("exit codes:", painter)]
        for code, description in EXIT_CODE_DESCRIPTIONS.items():
            lines.append(f"  {int(code):<3}{description}")
        return "\n".join(lines)

    def _examples(self, painter: Painter) -> str:
        lines = [self._heading("examples:", painter)]
        lines.extend(f"  {example}" for example in EXAMPLES)
        return "\n".join(lines)

    def _configuration(self, painter: Painter) -> str:
        return self._heading("configuration:", painter) + "\n" + CONFIGURATION_HELP.rstrip()

    def format_help(self, topic: HelpTopic = HelpTopic.MAIN, color: bool = False) -> str:
        painter = Painter(color)
        if topic is HelpTopic.EXAMPLES:
            sections = [self._examples(painter)]
        elif topic is HelpTopic.EXIT_CODES:
            sections = [self._exit_codes(painter)]
        elif topic is HelpTopic.CONFIGURATION:
            sections = [self._configuration(painter)]
        else:
            sections = [
                painter.paint(TITLE, Colors.CYAN),
                self._reference(painter),
                self._exit_codes(painter),
                self._examples(painter),
            ]
        return "\n\n".join(sections) + "\n"

    def print_help(
        self,
        out: TextIO,
        ansi_color_output_disabled: bool = False,
        topic: HelpTopic = HelpTopic.MAIN,
    ):
        color = Painter.for_stream(out, ansi_color_output_disabled).enabled
        out.write(self.format_help(topic, color))


__all__ = [
    "TITLE",
    "HelpTopic",
    "EXIT_CODE_DESCRIPTIONS",
    "EXAMPLES",
    "LauncherHelpSystem",
]
