# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Execution Outcomes

Maps what happened during one invocation to the exit code that build tools
and CI see. Computing the outcome is pure; printing diagnostics for faults is
the classifier's only side effect, and terminating the process is left to the
entry point.

Delegated discovery and execution calls are wrapped by ``attempt`` into either
``Completed`` or ``Faulted``; ``OutcomeClassifier`` handles both variants and
nothing else.
"""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Optional, TextIO, Union

from .summary import DiscoveryReport, ExecutionSummary

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Process exit codes. Values are part of the public contract."""

    SUCCESS = 0
    TESTS_FAILED = 1
    NO_TESTS_FOUND = 2
    INTERNAL_ERROR = 3
    CONFIGURATION_ERROR = 4


class OutcomeKind(Enum):
    SUCCEEDED = "succeeded"
    FAILED_WITH_SUMMARY = "failed-with-summary"
    FAILED_INTERNALLY = "failed-internally"


@dataclass(frozen=True)
class ExecutionOutcome:
    """The single, final result of an invocation."""

    kind: OutcomeKind
    exit_code: int
    summary: Optional[ExecutionSummary] = None

    @classmethod
    def success(cls) -> "ExecutionOutcome":
        return cls(OutcomeKind.SUCCEEDED, ExitCode.SUCCESS)

    @classmethod
    def failed_internally(
        cls, exit_code: ExitCode = ExitCode.INTERNAL_ERROR
    ) -> "ExecutionOutcome":
        return cls(OutcomeKind.FAILED_INTERNALLY, exit_code)

    @classmethod
    def for_summary(cls, summary: ExecutionSummary, options) -> "ExecutionOutcome":
        """Strictness is checked before failures: an empty run has no failures."""
        if options.fail_if_no_tests and summary.tests_found == 0:
            return cls(OutcomeKind.FAILED_WITH_SUMMARY, ExitCode.NO_TESTS_FOUND, summary)
        if summary.total_failure_count > 0:
            return cls(OutcomeKind.FAILED_WITH_SUMMARY, ExitCode.TESTS_FAILED, summary)
        return cls(OutcomeKind.SUCCEEDED, ExitCode.SUCCESS, summary)

    @classmethod
    def for_discovery(cls, report: DiscoveryReport, options) -> "ExecutionOutcome":
        if options.fail_if_no_tests and report.tests_found == 0:
            return cls(OutcomeKind.FAILED_WITH_SUMMARY, ExitCode.NO_TESTS_FOUND)
        return cls.success()

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.SUCCEEDED


@dataclass(frozen=True)
class Completed:
    value: Any


@dataclass(frozen=True)
class Faulted:
    error: Exception


Result = Union[Completed, Faulted]


def attempt(operation: Callable[..., Any], *args, **kwargs) -> Result:
    """Run a delegated operation and capture any exception as ``Faulted``."""
    try:
        return Completed(operation(*args, **kwargs))
    except Exception as e:
        logger.debug(f"Delegated operation failed: {e!r}")
        return Faulted(e)


class OutcomeClassifier:
    """Turns delegated results into outcomes.

    Every fault is treated the same way: full traceback and a help rendering
    on the error stream, then the internal-error exit code.
    """

    def __init__(self, err: TextIO, print_help: Callable[[TextIO], None]):
        self.err = err
        self.print_help = print_help

    def _fault(self, faulted: Faulted) -> ExecutionOutcome:
        error = faulted.error
        traceback.print_exception(type(error), error, error.__traceback__, file=self.err)
        self.err.write("\n")
        self.print_help(self.err)
        return ExecutionOutcome.failed_internally()

    def classify_execution(self, result: Result, options) -> ExecutionOutcome:
        if isinstance(result, Faulted):
            return self._fault(result)
        return ExecutionOutcome.for_summary(result.value, options)

    def classify_discovery(self, result: Result, options) -> ExecutionOutcome:
        if isinstance(result, Faulted):
            return self._fault(result)
        return ExecutionOutcome.for_discovery(result.value, options)


__all__ = [
    "ExitCode",
    "OutcomeKind",
    "ExecutionOutcome",
    "Completed",
    "Faulted",
    "Result",
    "attempt",
    "OutcomeClassifier",
]
