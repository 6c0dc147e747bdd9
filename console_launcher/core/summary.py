# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Discovery Reports and Execution Summaries

``DiscoveryReport`` is what the list-tests mode produces, ``ExecutionSummary``
what the execute mode produces. The summary is filled in by a
``SummaryGeneratingListener`` while the test plan runs and is read-only
afterwards.
"""

import time
import traceback
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .engine import (
    ExecutionListener,
    TestDescriptor,
    TestExecutionResult,
    TestStatus,
)


@dataclass
class DiscoveryReport:
    """Roots discovered by every selected engine."""

    roots: List[TestDescriptor] = field(default_factory=list)

    @property
    def containers_found(self) -> int:
        return sum(root.count_containers() for root in self.roots)

    @property
    def tests_found(self) -> int:
        return sum(root.count_tests() for root in self.roots)

    def print_to(self, out: TextIO):
        out.write("\n")
        out.write(f"[{self.containers_found:>10} containers found      ]\n")
        out.write(f"[{self.tests_found:>10} tests found           ]\n")
        out.write("\n")


@dataclass(frozen=True)
class Failure:
    descriptor: TestDescriptor
    throwable: Optional[BaseException]


@dataclass
class ExecutionSummary:
    """Aggregate counts of a test plan execution."""

    time_started: float = 0.0
    time_finished: float = 0.0
    containers_found: int = 0
    containers_started: int = 0
    containers_succeeded: int = 0
    containers_failed: int = 0
    containers_aborted: int = 0
    containers_skipped: int = 0
    tests_found: int = 0
    tests_started: int = 0
    tests_succeeded: int = 0
    tests_failed: int = 0
    tests_aborted: int = 0
    tests_skipped: int = 0
    failures: List[Failure] = field(default_factory=list)

    @property
    def total_failure_count(self) -> int:
        return self.tests_failed + self.containers_failed

    @property
    def duration_ms(self) -> int:
        return int(round((self.time_finished - self.time_started) * 1000))

    def print_to(self, out: TextIO):
        rows = [
            (self.containers_found, "containers found"),
            (self.containers_skipped, "containers skipped"),
            (self.containers_started, "containers started"),
            (self.containers_aborted, "containers aborted"),
            (self.containers_succeeded, "containers successful"),
            (self.containers_failed, "containers failed"),
            (self.tests_found, "tests found"),
            (self.tests_skipped, "tests skipped"),
            (self.tests_started, "tests started"),
            (self.tests_aborted, "tests aborted"),
            (self.tests_succeeded, "tests successful"),
            (self.tests_failed, "tests failed"),
        ]
        out.write("\n")
        out.write(f"Test run finished after {self.duration_ms} ms\n")
        for count, label in rows:
            out.write(f"[{count:>10} {label:<22}]\n")
        out.write("\n")

    def print_failures_to(self, out: TextIO):
        if not self.failures:
            return
        out.write("\n")
        out.write(f"Failures ({len(self.failures)}):\n")
        for failure in self.failures:
            out.write(f"  {failure.descriptor.unique_id}\n")
            out.write(f"    => {_describe(failure.throwable)}\n")
            for line in _trace_lines(failure.throwable):
                out.write(f"       {line}\n")


def _describe(throwable: Optional[BaseException]) -> str:
    if throwable is None:
        return "<no exception>"
    message = str(throwable).strip().splitlines()
    first = message[0] if message else ""
    return f"{type(throwable).__name__}: {first}" if first else type(throwable).__name__


def _trace_lines(throwable: Optional[BaseException]) -> List[str]:
    if throwable is None:
        return []
    if throwable.__traceback__ is None:
        return str(throwable).strip().splitlines()[1:]
    formatted = traceback.format_exception(
        type(throwable), throwable, throwable.__traceback__
    )
    return "".join(formatted).rstrip().splitlines()


class SummaryGeneratingListener(ExecutionListener):
    """Counts execution events into an ``ExecutionSummary``."""

    def __init__(self):
        self.summary = ExecutionSummary()

    def testplan_execution_started(self, roots):
        self.summary.time_started = time.time()
        self.summary.containers_found = sum(root.count_containers() for root in roots)
        self.summary.tests_found = sum(root.count_tests() for root in roots)

    def testplan_execution_finished(self, roots):
        self.summary.time_finished = time.time()

    def execution_skipped(self, descriptor: TestDescriptor, reason: str):
        for node in descriptor.walk():
            if node.is_test:
                self.summary.tests_skipped += 1
            else:
                self.summary.containers_skipped += 1

    def execution_started(self, descriptor: TestDescriptor):
        if descriptor.is_test:
            self.summary.tests_started += 1
        else:
            self.summary.containers_started += 1

    def execution_finished(self, descriptor: TestDescriptor, result: TestExecutionResult):
        is_test = descriptor.is_test
        if result.status is TestStatus.SUCCESSFUL:
            if is_test:
                self.summary.tests_succeeded += 1
            else:
                self.summary.containers_succeeded += 1
        elif result.status is TestStatus.ABORTED:
            if is_test:
                self.summary.tests_aborted += 1
            else:
                self.summary.containers_aborted += 1
        else:
            if is_test:
                self.summary.tests_failed += 1
            else:
                self.summary.containers_failed += 1
            self.summary.failures.append(Failure(descriptor, result.throwable))


__all__ = [
    "DiscoveryReport",
    "ExecutionSummary",
    "Failure",
    "SummaryGeneratingListener",
]
