# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""Expected outputs for validation."""

# Expected help output patterns
HELP_MAIN_KEYWORDS = [
    "Console Launcher",
    "usage: console-launcher",
    "commands:",
    "selectors:",
    "filters:",
    "exit codes:",
    "examples:",
]

HELP_EXIT_CODE_LINES = [
    "  0  tests passed",
    "  1  at least one test or container failed",
    "  2  no tests were found",
    "  3  test discovery or execution raised",
    "  4  the command line could not be parsed",
]

# Banner printed before every mode except --list-engines
BANNER_PATTERN = r"^\nConsole Launcher \d+\.\d+\.\d+: run `console-launcher --help`"

SUMMARY_LINE_PATTERN = r"\[\s+{count} {label}\s+\]"
