# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
pytest Test Engine

Runs pytest in-process twice per execution: once with ``--collect-only`` to
build the descriptor tree, once on the collected node ids to run them. Both
runs disable the terminal reporter and the cache provider, and all results
come back through the small plugins defined here.

``unittest.TestCase`` subclasses are left to the unittest engine so that no
test is executed by two engines.

Tree layout: engine -> file -> class (nested classes allowed) -> test.
"""

import logging
import unittest
from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest

from ..engine import (
    DescriptorType,
    DiscoveryRequest,
    ExecutionListener,
    TestDescriptor,
    TestEngine,
    TestExecutionResult,
)
from ..exceptions import EngineExecutionError
from .unittest_engine import is_pytest_node_id

logger = logging.getLogger(__name__)

BASE_ARGS = ["-p", "no:terminal", "-p", "no:cacheprovider"]

_FATAL_EXIT_CODES = (pytest.ExitCode.INTERNAL_ERROR, pytest.ExitCode.USAGE_ERROR)


class ReportedFailure(Exception):
    """Failure text reported by pytest for a test or a collection error."""


@dataclass(frozen=True)
class PytestItemRef:
    """Where a collected item lives: node id plus an absolute run spec."""

    nodeid: str
    spec: str


def _owned_by_unittest(item) -> bool:
    cls = getattr(item, "cls", None)
    return cls is not None and issubclass(cls, unittest.TestCase)


def _skip_reason(report) -> str:
    longrepr = report.longrepr
    if isinstance(longrepr, tuple) and len(longrepr) == 3:
        reason = str(longrepr[2])
    else:
        reason = str(longrepr)
    if reason.startswith("Skipped: "):
        reason = reason[len("Skipped: "):]
    return reason


class _CollectorPlugin:
    """Records collected items and collection errors."""

    def __init__(self, request: DiscoveryRequest):
        self.request = request
        self.items: List[PytestItemRef] = []
        self.collection_errors: Dict[str, str] = {}
        self.rootdir: Optional[str] = None

    def pytest_collection_modifyitems(self, session, config, items):
        selected, deselected = [], []
        for item in items:
            if _owned_by_unittest(item) or not self.request.matches_name(item.nodeid):
                deselected.append(item)
            else:
                selected.append(item)
        if deselected:
            config.hook.pytest_deselected(items=deselected)
            items[:] = selected

    def pytest_collectreport(self, report):
        if report.failed:
            self.collection_errors[report.nodeid] = report.longreprtext

    def pytest_collection_finish(self, session):
        self.rootdir = str(session.config.rootpath)
        for item in session.items:
            location = item.nodeid.split("::", 1)
            spec = str(item.path)
            if len(location) == 2:
                spec = f"{spec}::{location[1]}"
            self.items.append(PytestItemRef(item.nodeid, spec))


class _ReportingPlugin:
    """Forwards pytest run reports to an ExecutionListener."""

    def __init__(self, engine_root: TestDescriptor, listener: ExecutionListener):
        self.root = engine_root
        self.listener = listener
        self.tests: Dict[str, TestDescriptor] = {
            test.payload.nodeid: test for test in engine_root.tests()
        }
        self.open_containers: List[TestDescriptor] = []
        self.container_errors: Dict[str, BaseException] = {}
        self._outcomes: Dict[str, object] = {}

    def _ancestors(self, descriptor: TestDescriptor) -> List[TestDescriptor]:
        chain = []
        parent = descriptor.parent
        while parent is not None and parent is not self.root:
            chain.append(parent)
            parent = parent.parent
        return list(reversed(chain))

    def _enter(self, descriptor: TestDescriptor):
        chain = self._ancestors(descriptor)
        while self.open_containers and self.open_containers[-1] not in chain:
            self._close(self.open_containers.pop())
        for container in chain:
            if container not in self.open_containers:
                self.open_containers.append(container)
                self.listener.execution_started(container)

    def _close(self, container: TestDescriptor):
        error = self.container_errors.get(container.unique_id)
        self.listener.execution_finished(
            container,
            TestExecutionResult.failed(error) if error else TestExecutionResult.successful(),
        )

    def close_all(self):
        while self.open_containers:
            self._close(self.open_containers.pop())

    def pytest_runtest_logstart(self, nodeid, location):
        descriptor = self.tests.get(nodeid)
        if descriptor is not None:
            self._enter(descriptor)
            self._outcomes[nodeid] = TestExecutionResult.successful()

    def pytest_runtest_logreport(self, report):
        current = self._outcomes.get(report.nodeid)
        if current is None:
            return
        if report.failed:
            if isinstance(current, TestExecutionResult) and current.throwable is None:
                self._outcomes[report.nodeid] = TestExecutionResult.failed(
                    ReportedFailure(f"[{report.when}] {report.longreprtext}")
                )
        elif report.skipped and not hasattr(report, "wasxfail"):
            self._outcomes[report.nodeid] = _skip_reason(report)

    def pytest_runtest_logfinish(self, nodeid, location):
        descriptor = self.tests.get(nodeid)
        outcome = self._outcomes.pop(nodeid, None)
        if descriptor is None or outcome is None:
            return
        if isinstance(outcome, str):
            self.listener.execution_skipped(descriptor, outcome)
            return
        self.listener.execution_started(descriptor)
        self.listener.execution_finished(descriptor, outcome)


class PytestEngine(TestEngine):
    """Engine backed by an in-process pytest session."""

    engine_id = "pytest"
    artifact_id = "pytest"

    def __init__(self, extra_args: Optional[List[str]] = None):
        self.extra_args = list(extra_args or [])
        self.version = pytest.__version__
        self.rootdir: Optional[str] = None

    def _collection_args(self, request: DiscoveryRequest) -> List[str]:
        args = list(request.scan_paths) + list(request.files)
        args += [test_id for test_id in request.test_ids if is_pytest_node_id(test_id)]
        if request.modules:
            args = ["--pyargs"] + list(request.modules) + args
        return args

    def _run(self, args: List[str], plugin) -> pytest.ExitCode:
        full_args = BASE_ARGS + self.extra_args + args
        logger.debug(f"pytest: running with {' '.join(full_args)}")
        exit_code = pytest.main(full_args, plugins=[plugin])
        if exit_code in _FATAL_EXIT_CODES:
            raise EngineExecutionError(
                self.engine_id, f"pytest exited with {pytest.ExitCode(exit_code).name}"
            )
        return exit_code

    def discover(self, request: DiscoveryRequest) -> TestDescriptor:
        root = self.create_root()
        args = self._collection_args(request)
        if not args:
            return root
        collector = _CollectorPlugin(request)
        self._run(["--collect-only"] + args, collector)
        self.rootdir = collector.rootdir
        for ref in collector.items:
            self._add_item(root, ref)
        for nodeid, text in collector.collection_errors.items():
            file_node = root.find_or_add_container("file", nodeid, nodeid or "<collection>")
            file_node.payload = ReportedFailure(text)
        logger.debug(f"pytest: discovered {root.count_tests()} tests")
        return root

    def _add_item(self, root: TestDescriptor, ref: PytestItemRef):
        parts = ref.nodeid.split("::")
        node = root.find_or_add_container("file", parts[0], parts[0], source=parts[0])
        for class_name in parts[1:-1]:
            node = node.find_or_add_container("class", class_name, class_name)
        name = parts[-1]
        node.add_child(
            TestDescriptor(
                node.child_id("test", name),
                name,
                DescriptorType.TEST,
                source=ref.nodeid,
                payload=ref,
            )
        )

    def execute(self, root: TestDescriptor, listener: ExecutionListener):
        for child in root.children:
            if isinstance(child.payload, ReportedFailure):
                listener.execution_started(child)
                listener.execution_finished(child, TestExecutionResult.failed(child.payload))

        specs = [test.payload.spec for test in root.tests()]
        if not specs:
            return
        reporter = _ReportingPlugin(root, listener)
        args = list(specs)
        if self.rootdir:
            args = ["--rootdir", self.rootdir] + args
        try:
            self._run(args, reporter)
        finally:
            reporter.close_all()


__all__ = ["PytestEngine", "PytestItemRef", "ReportedFailure"]
