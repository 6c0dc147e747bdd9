# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher Core Module

This package contains the test platform the launcher drives:
- Test descriptors, discovery requests and execution listeners
- The engine registry and the built-in unittest and pytest engines
- Discovery and execution summaries, console output
- Exit codes and outcome classification

Uses lazy loading so that engine modules are imported only when needed.
"""

import importlib
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import (
        DescriptorType,
        DiscoveryRequest,
        ExecutionListener,
        TestDescriptor,
        TestEngine,
        TestExecutionResult,
        TestStatus,
    )
    from .exceptions import EngineExecutionError, LauncherError, PlatformError
    from .executor import ConsoleTestExecutor
    from .outcome import (
        Completed,
        ExecutionOutcome,
        ExitCode,
        Faulted,
        OutcomeClassifier,
        OutcomeKind,
        attempt,
    )
    from .registry import (
        EngineDescriptor,
        EngineRegistry,
        ServiceEngineRegistry,
        StaticEngineRegistry,
        engine_listing,
    )
    from .summary import DiscoveryReport, ExecutionSummary, SummaryGeneratingListener


__all__ = [
    # Engine model
    "DescriptorType",
    "DiscoveryRequest",
    "ExecutionListener",
    "TestDescriptor",
    "TestEngine",
    "TestExecutionResult",
    "TestStatus",
    # Errors
    "LauncherError",
    "PlatformError",
    "EngineExecutionError",
    # Executor
    "ConsoleTestExecutor",
    # Outcome
    "Completed",
    "Faulted",
    "attempt",
    "ExecutionOutcome",
    "ExitCode",
    "OutcomeClassifier",
    "OutcomeKind",
    # Registry
    "EngineDescriptor",
    "EngineRegistry",
    "ServiceEngineRegistry",
    "StaticEngineRegistry",
    "engine_listing",
    # Summaries
    "DiscoveryReport",
    "ExecutionSummary",
    "SummaryGeneratingListener",
]

_MODULE_MAP = {
    "DescriptorType": "engine",
    "DiscoveryRequest": "engine",
    "ExecutionListener": "engine",
    "TestDescriptor": "engine",
    "TestEngine": "engine",
    "TestExecutionResult": "engine",
    "TestStatus": "engine",
    "LauncherError": "exceptions",
    "PlatformError": "exceptions",
    "EngineExecutionError": "exceptions",
    "ConsoleTestExecutor": "executor",
    "Completed": "outcome",
    "Faulted": "outcome",
    "attempt": "outcome",
    "ExecutionOutcome": "outcome",
    "ExitCode": "outcome",
    "OutcomeClassifier": "outcome",
    "OutcomeKind": "outcome",
    "EngineDescriptor": "registry",
    "EngineRegistry": "registry",
    "ServiceEngineRegistry": "registry",
    "StaticEngineRegistry": "registry",
    "engine_listing": "registry",
    "DiscoveryReport": "summary",
    "ExecutionSummary": "summary",
    "SummaryGeneratingListener": "summary",
}


def __getattr__(name: str) -> Any:
    """Lazy import of core components."""
    module_name = _MODULE_MAP.get(name)
    if module_name is None:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    module = importlib.import_module(f".{module_name}", __name__)
    return getattr(module, name)
