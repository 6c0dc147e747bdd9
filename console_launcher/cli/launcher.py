# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher

Decides which single mode an invocation runs in, delegates to the engine
registry or the test executor, and returns the one ``ExecutionOutcome`` of the
invocation. Modes are checked in a fixed order, first match wins:

1. parse errors      -> message and help on err, configuration error
2. --list-engines    -> engine listing, no banner
3. (banner unless --disable-banner)
4. --list-tests      -> discovery
5. --help            -> help on out
6. otherwise         -> execution

Both streams are flushed on every way out of ``execute``.
"""

import logging
from typing import Callable, Optional, Sequence, TextIO

from .. import __version__
from ..core.executor import ConsoleTestExecutor
from ..core.outcome import (
    ExecutionOutcome,
    ExitCode,
    OutcomeClassifier,
    attempt,
)
from ..core.registry import EngineRegistry, ServiceEngineRegistry, engine_listing
from .options import LaunchMode, LaunchOptions, OptionsParseError
from .parser import ArgparseOptionsParser
from .ux_config import configure_logging_for_verbosity

logger = logging.getLogger(__name__)

BANNER = (
    f"Console Launcher {__version__}: "
    "run `console-launcher --help` for selectors, filters and exit codes"
)

ExecutorFactory = Callable[[LaunchOptions, EngineRegistry], ConsoleTestExecutor]


class ConsoleLauncher:
    """Mode dispatcher for one command-line invocation."""

    def __init__(
        self,
        parser: ArgparseOptionsParser,
        out: TextIO,
        err: TextIO,
        registry: Optional[EngineRegistry] = None,
        executor_factory: Optional[ExecutorFactory] = None,
        configure_logging: bool = False,
    ):
        self.parser = parser
        self.out = out
        self.err = err
        self.registry = registry or ServiceEngineRegistry()
        self.executor_factory = executor_factory or ConsoleTestExecutor
        self.configure_logging = configure_logging

    def execute(self, args: Sequence[str]) -> ExecutionOutcome:
        try:
            try:
                options = self.parser.parse(args)
            except OptionsParseError as e:
                return self._configuration_error(e)
            if self.configure_logging:
                configure_logging_for_verbosity(options.verbosity)
            logger.debug(f"Launch mode: {options.mode.value}")

            if options.mode is LaunchMode.LIST_ENGINES:
                self.display_engines()
                return ExecutionOutcome.success()
            if not options.banner_disabled:
                self.display_banner()
            if options.mode is LaunchMode.LIST_TESTS:
                return self._list_tests(options)
            if options.mode is LaunchMode.SHOW_HELP:
                self.parser.print_help(
                    self.out, options.ansi_color_output_disabled, options.help_topic
                )
                return ExecutionOutcome.success()
            return self._execute_tests(options)
        finally:
            self.out.flush()
            self.err.flush()

    def _configuration_error(self, error: OptionsParseError) -> ExecutionOutcome:
        logger.debug(f"Invalid command line: {error}")
        self.err.write(f"{error}\n\n")
        self.parser.print_help(self.err)
        return ExecutionOutcome.failed_internally(ExitCode.CONFIGURATION_ERROR)

    def display_banner(self):
        self.out.write(f"\n{BANNER}\n\n")

    def display_engines(self):
        """Print the registered engines sorted by id.

        Registry errors are deliberately not caught here.
        """
        for line in engine_listing(self.registry):
            self.out.write(f"{line}\n")

    def _classifier(self, options: LaunchOptions) -> OutcomeClassifier:
        return OutcomeClassifier(
            self.err,
            lambda stream: self.parser.print_help(
                stream, options.ansi_color_output_disabled
            ),
        )

    def _list_tests(self, options: LaunchOptions) -> ExecutionOutcome:
        result = attempt(
            lambda: self.executor_factory(options, self.registry).discover(self.out)
        )
        return self._classifier(options).classify_discovery(result, options)

    def _execute_tests(self, options: LaunchOptions) -> ExecutionOutcome:
        result = attempt(
            lambda: self.executor_factory(options, self.registry).execute(self.out)
        )
        return self._classifier(options).classify_execution(result, options)


def execute(out: TextIO, err: TextIO, args: Sequence[str]) -> ExecutionOutcome:
    """Run the launcher with the default parser and engine registry."""
    launcher = ConsoleLauncher(ArgparseOptionsParser(), out, err)
    return launcher.execute(args)


__all__ = ["BANNER", "ConsoleLauncher", "execute"]
