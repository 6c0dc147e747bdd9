# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Test Executor

Façade over the engine platform used by the launcher. It exposes exactly two
blocking operations, ``discover`` and ``execute``; both print their progress
to the given output stream and both may raise. Turning those exceptions into
exit codes is the caller's job.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, TextIO

from .engine import (
    CompositeListener,
    ExecutionListener,
    TestDescriptor,
    TestEngine,
    TestExecutionResult,
)
from .exceptions import PlatformError
from .output import (
    Details,
    FlatPrintingListener,
    Painter,
    Theme,
    TreePrintingListener,
    TreeRenderer,
)
from .registry import EngineRegistry, ServiceEngineRegistry
from .summary import DiscoveryReport, ExecutionSummary, SummaryGeneratingListener

if TYPE_CHECKING:
    from ..cli.options import LaunchOptions

logger = logging.getLogger(__name__)


class ConsoleTestExecutor:
    """Discovers and executes tests for one set of launch options."""

    def __init__(
        self, options: "LaunchOptions", registry: Optional[EngineRegistry] = None
    ):
        self.options = options
        self.registry = registry or ServiceEngineRegistry()

    def _painter(self, out: TextIO) -> Painter:
        return Painter.for_stream(out, self.options.ansi_color_output_disabled)

    def select_engines(self) -> List[TestEngine]:
        """Apply the include/exclude engine filters to the registered engines."""
        parameters = self.options.parameters
        engines = {engine.engine_id: engine for engine in self.registry.load_all()}
        unknown = [e for e in parameters.include_engines if e not in engines]
        if unknown:
            raise PlatformError(
                f"Unknown test engine(s): {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(engines)) or 'none'}"
            )
        selected = [
            engine
            for engine_id, engine in sorted(engines.items())
            if (not parameters.include_engines or engine_id in parameters.include_engines)
            and engine_id not in parameters.exclude_engines
        ]
        logger.debug(f"Selected engines: {[engine.engine_id for engine in selected]}")
        return selected

    def _discover_roots(self, engines: List[TestEngine]) -> List[TestDescriptor]:
        request = self.options.parameters.to_discovery_request()
        roots = []
        for engine in engines:
            root = engine.discover(request)
            root.prune()
            logger.info(f"{engine.engine_id}: {root.count_tests()} tests discovered")
            roots.append(root)
        return roots

    def discover(self, out: TextIO) -> DiscoveryReport:
        report = DiscoveryReport(self._discover_roots(self.select_engines()))
        if self.options.details is not Details.NONE:
            TreeRenderer(out, self._painter(out), Theme.for_stream(out)).render(report.roots)
            report.print_to(out)
        return report

    def _details_listener(self, out: TextIO) -> Optional[ExecutionListener]:
        details = self.options.details
        if details is Details.TREE:
            return TreePrintingListener(out, self._painter(out))
        if details is Details.FLAT:
            return FlatPrintingListener(out, self._painter(out))
        return None

    def execute(self, out: TextIO) -> ExecutionSummary:
        engines = self.select_engines()
        roots = self._discover_roots(engines)

        summary_listener = SummaryGeneratingListener()
        listeners: List[ExecutionListener] = [summary_listener]
        details_listener = self._details_listener(out)
        if details_listener is not None:
            listeners.append(details_listener)
        listener = CompositeListener(listeners)

        listener.testplan_execution_started(roots)
        for engine, root in zip(engines, roots):
            self._execute_engine(engine, root, listener)
        listener.testplan_execution_finished(roots)

        summary = summary_listener.summary
        if self.options.details is not Details.NONE or summary.total_failure_count > 0:
            summary.print_failures_to(out)
            summary.print_to(out)
        return summary

    def _execute_engine(
        self, engine: TestEngine, root: TestDescriptor, listener: ExecutionListener
    ):
        listener.execution_started(root)
        engine.execute(root, listener)
        listener.execution_finished(root, TestExecutionResult.successful())


__all__ = ["ConsoleTestExecutor"]
