# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher: command-line front end for a pluggable test platform

The launcher parses the command line, selects exactly one mode and turns the
outcome of that mode into a process exit code:
1. List the registered test engines
2. List the discovered tests
3. Show help
4. Execute the discovered tests

Main components:
- core: Engine model, registry, executor and outcome classification
- cli: Argument parsing, help, preferences and the process entry point
"""

from typing import Any

# Version information
__version__ = "1.0.0"

__all__ = [
    # Package info
    "__version__",
    # Core functionality
    "ExitCode",
    "ExecutionOutcome",
    "ConsoleTestExecutor",
    "ServiceEngineRegistry",
    "TestEngine",
    # Launcher
    "ConsoleLauncher",
    "execute",
]

# Lazy loading keeps `--help` and `--list-engines` fast
_CORE_IMPORTS = {
    "ExitCode",
    "ExecutionOutcome",
    "ConsoleTestExecutor",
    "ServiceEngineRegistry",
    "TestEngine",
}
_CLI_IMPORTS = {"ConsoleLauncher", "execute"}


def __getattr__(name: str) -> Any:
    """Lazy loading of core and launcher functionality."""
    if name in _CORE_IMPORTS:
        from . import core

        return getattr(core, name)
    if name in _CLI_IMPORTS:
        from .cli import launcher

        return getattr(launcher, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
