# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
unittest Test Engine

Discovers ``unittest.TestCase`` tests with the standard ``TestLoader`` and runs
them module by module so that module and class fixtures behave exactly as they
do under ``python -m unittest``.

Tree layout: engine -> module -> TestCase class -> test method.
"""

import logging
import os
import platform
import re
import sys
import unittest
from typing import Dict, Iterator, List, Optional

from ..engine import (
    DescriptorType,
    DiscoveryRequest,
    ExecutionListener,
    TestDescriptor,
    TestEngine,
    TestExecutionResult,
)

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "test*.py"

# "setUpClass (pkg.mod.Class)", "tearDownModule (pkg.mod)", ...
_FIXTURE_ERROR_RE = re.compile(r"^(?P<fixture>\w+) \((?P<parent>[^)]+)\)")


def _iter_tests(suite) -> Iterator[unittest.TestCase]:
    for test in suite:
        if isinstance(test, unittest.TestSuite):
            yield from _iter_tests(test)
        else:
            yield test


def is_pytest_node_id(test_id: str) -> bool:
    """Node ids and paths belong to pytest, dotted names to unittest."""
    return "::" in test_id or "/" in test_id or os.sep in test_id or test_id.endswith(".py")


class UnittestEngine(TestEngine):
    """Engine backed by the standard library ``unittest`` module."""

    engine_id = "unittest"
    artifact_id = "unittest"

    def __init__(self, pattern: str = DEFAULT_PATTERN):
        self.pattern = pattern
        self.version = platform.python_version()

    # Discovery

    def _load_suites(self, request: DiscoveryRequest) -> List[unittest.TestSuite]:
        suites = []
        for path in request.scan_paths:
            start_dir = os.path.abspath(path)
            logger.debug(f"unittest: scanning {start_dir}")
            suites.append(
                unittest.TestLoader().discover(
                    start_dir, pattern=self.pattern, top_level_dir=start_dir
                )
            )
        for file_path in request.files:
            start_dir, file_name = os.path.split(os.path.abspath(file_path))
            suites.append(
                unittest.TestLoader().discover(
                    start_dir, pattern=file_name, top_level_dir=start_dir
                )
            )
        names = list(request.modules) + [
            test_id for test_id in request.test_ids if not is_pytest_node_id(test_id)
        ]
        for name in names:
            logger.debug(f"unittest: loading {name}")
            suites.append(unittest.TestLoader().loadTestsFromName(name))
        return suites

    def discover(self, request: DiscoveryRequest) -> TestDescriptor:
        root = self.create_root()
        seen = set()
        for suite in self._load_suites(request):
            for test in _iter_tests(suite):
                test_id = test.id()
                if test_id in seen or not request.matches_name(test_id):
                    continue
                seen.add(test_id)
                self._add_test(root, test)
        logger.debug(f"unittest: discovered {root.count_tests()} tests")
        return root

    def _add_failed_import(self, root: TestDescriptor, test: unittest.TestCase):
        # unittest reports the name it could not load as the test method name
        name = test._testMethodName
        module_node = root.find_or_add_container("module", name, name)
        module_node.add_child(
            TestDescriptor(
                module_node.child_id("test", name), name, DescriptorType.TEST, payload=test
            )
        )

    def _add_test(self, root: TestDescriptor, test: unittest.TestCase):
        if isinstance(test, unittest.loader._FailedTest):
            self._add_failed_import(root, test)
            return
        test_class = type(test)
        module_name = test_class.__module__
        module = sys.modules.get(module_name)
        module_node = root.find_or_add_container(
            "module", module_name, module_name, getattr(module, "__file__", None)
        )
        class_name = f"{module_name}.{test_class.__qualname__}"
        class_node = module_node.find_or_add_container(
            "class", class_name, test_class.__qualname__
        )
        method_name = test.id().rsplit(".", 1)[-1]
        class_node.add_child(
            TestDescriptor(
                class_node.child_id("test", method_name),
                method_name,
                DescriptorType.TEST,
                payload=test,
            )
        )

    # Execution

    def execute(self, root: TestDescriptor, listener: ExecutionListener):
        for module_node in root.children:
            self._execute_module(module_node, listener)

    def _execute_module(self, module_node: TestDescriptor, listener: ExecutionListener):
        listener.execution_started(module_node)
        result = ForwardingTestResult(module_node, listener)
        suite = unittest.TestSuite(
            test.payload for test in module_node.tests() if test.payload is not None
        )
        suite(result)
        result.finish_current_class()
        error = result.container_errors.get(module_node.unique_id)
        listener.execution_finished(
            module_node,
            TestExecutionResult.failed(error) if error else TestExecutionResult.successful(),
        )


class ForwardingTestResult(unittest.TestResult):
    """``unittest.TestResult`` that forwards outcomes to an ExecutionListener.

    Test events are emitted when a test stops, so that skipped tests are
    reported as skipped without ever being started. Fixture errors are
    reported by unittest against an ``_ErrorHolder`` and are mapped back to
    the owning class or module container.
    """

    def __init__(self, module_node: TestDescriptor, listener: ExecutionListener):
        super().__init__()
        self.listener = listener
        self.module_node = module_node
        self.tests: Dict[str, TestDescriptor] = {
            test.payload.id(): test for test in module_node.tests()
        }
        self.classes: Dict[str, TestDescriptor] = {
            f"{module_node.display_name}.{child.display_name}": child
            for child in module_node.children
            if child.is_container
        }
        self.container_errors: Dict[str, BaseException] = {}
        self.finished_classes = set()
        self.current_class: Optional[TestDescriptor] = None
        self._outcomes: Dict[str, object] = {}

    # Class bookkeeping

    def _enter_class(self, class_node: TestDescriptor):
        if class_node is self.current_class:
            return
        self.finish_current_class()
        self.current_class = class_node
        self.listener.execution_started(class_node)

    def finish_current_class(self):
        class_node = self.current_class
        if class_node is None:
            return
        self.current_class = None
        self.finished_classes.add(class_node.unique_id)
        error = self.container_errors.get(class_node.unique_id)
        self.listener.execution_finished(
            class_node,
            TestExecutionResult.failed(error) if error else TestExecutionResult.successful(),
        )

    def _container_for(self, test) -> Optional[TestDescriptor]:
        match = _FIXTURE_ERROR_RE.match(str(test))
        if not match:
            return None
        parent = match.group("parent")
        if parent in self.classes:
            return self.classes[parent]
        return self.module_node

    def _container_failed(self, test, err):
        container = self._container_for(test) or self.module_node
        exc = err[1]
        self.container_errors.setdefault(container.unique_id, exc)
        if (
            container is not self.module_node
            and container is not self.current_class
            and container.unique_id not in self.finished_classes
        ):
            # setUpClass failed: none of the class's tests will start
            self.finish_current_class()
            self.finished_classes.add(container.unique_id)
            self.listener.execution_started(container)
            self.listener.execution_finished(container, TestExecutionResult.failed(exc))

    # unittest.TestResult hooks

    def startTest(self, test):
        super().startTest(test)
        descriptor = self.tests.get(test.id())
        if descriptor is not None:
            if descriptor.parent is self.module_node:
                self.finish_current_class()
            else:
                self._enter_class(descriptor.parent)
            self._outcomes[test.id()] = TestExecutionResult.successful()

    def stopTest(self, test):
        super().stopTest(test)
        descriptor = self.tests.get(test.id())
        outcome = self._outcomes.pop(test.id(), None)
        if descriptor is None or outcome is None:
            return
        if isinstance(outcome, str):
            self.listener.execution_skipped(descriptor, outcome)
            return
        self.listener.execution_started(descriptor)
        self.listener.execution_finished(descriptor, outcome)

    def _record_failure(self, test, err):
        # keep the first failure of a test with several failing subtests
        current = self._outcomes.get(test.id())
        if isinstance(current, TestExecutionResult) and current.throwable is None:
            self._outcomes[test.id()] = TestExecutionResult.failed(err[1])

    def addError(self, test, err):
        super().addError(test, err)
        if test.id() in self.tests:
            self._record_failure(test, err)
        else:
            self._container_failed(test, err)

    def addFailure(self, test, err):
        super().addFailure(test, err)
        self._record_failure(test, err)

    def addSubTest(self, test, subtest, err):
        super().addSubTest(test, subtest, err)
        if err is not None:
            self._record_failure(test, err)

    def addSkip(self, test, reason):
        super().addSkip(test, reason)
        if test.id() in self._outcomes:
            self._outcomes[test.id()] = reason
            return
        container = self._container_for(test)
        if container is not None and container is not self.module_node:
            self.finished_classes.add(container.unique_id)
            self.listener.execution_skipped(container, reason)

    def addUnexpectedSuccess(self, test):
        super().addUnexpectedSuccess(test)
        if test.id() in self._outcomes:
            self._outcomes[test.id()] = TestExecutionResult.failed(
                AssertionError("unexpected success")
            )


__all__ = ["UnittestEngine", "ForwardingTestResult", "is_pytest_node_id"]
