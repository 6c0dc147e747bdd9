# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Test Engine Contracts

This module defines the types shared between the launcher and the pluggable
test engines:

- TestEngine: base class every engine derives from
- TestDescriptor: node in the tree of discovered containers and tests
- DiscoveryRequest: selectors and filters passed to every engine
- ExecutionListener: receives execution events while an engine runs
- TestExecutionResult: terminal result reported for a finished descriptor

Engines never print anything themselves; all console output is produced by
listeners attached by the executor.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Pattern, Tuple


class DescriptorType(Enum):
    """Kind of node in a test tree."""

    CONTAINER = "container"
    TEST = "test"


class TestStatus(Enum):
    """Terminal status of an executed descriptor."""

    __test__ = False

    SUCCESSFUL = "successful"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class TestExecutionResult:
    """Result reported when a container or test finishes."""

    __test__ = False

    status: TestStatus
    throwable: Optional[BaseException] = None

    @classmethod
    def successful(cls) -> "TestExecutionResult":
        return cls(TestStatus.SUCCESSFUL)

    @classmethod
    def failed(cls, throwable: Optional[BaseException]) -> "TestExecutionResult":
        return cls(TestStatus.FAILED, throwable)

    @classmethod
    def aborted(cls, throwable: Optional[BaseException]) -> "TestExecutionResult":
        return cls(TestStatus.ABORTED, throwable)


@dataclass(eq=False)
class TestDescriptor:
    """A discovered container or test.

    Unique ids are built from bracketed segments, e.g.
    ``[engine:unittest]/[class:pkg.test_mod.FooTests]/[test:test_bar]``.
    The ``payload`` slot holds whatever the owning engine needs to run the
    node later (a ``unittest.TestCase`` instance, a pytest node id, ...).
    """

    __test__ = False

    unique_id: str
    display_name: str
    type: DescriptorType
    source: Optional[str] = None
    payload: Any = field(default=None, repr=False)
    parent: Optional["TestDescriptor"] = field(default=None, repr=False)
    children: List["TestDescriptor"] = field(default_factory=list, repr=False)

    @property
    def is_test(self) -> bool:
        return self.type is DescriptorType.TEST

    @property
    def is_container(self) -> bool:
        return self.type is DescriptorType.CONTAINER

    def child_id(self, kind: str, value: str) -> str:
        return f"{self.unique_id}/[{kind}:{value}]"

    def add_child(self, child: "TestDescriptor") -> "TestDescriptor":
        child.parent = self
        self.children.append(child)
        return child

    def find_or_add_container(
        self, kind: str, value: str, display_name: str, source: Optional[str] = None
    ) -> "TestDescriptor":
        unique_id = self.child_id(kind, value)
        for child in self.children:
            if child.unique_id == unique_id:
                return child
        return self.add_child(
            TestDescriptor(unique_id, display_name, DescriptorType.CONTAINER, source)
        )

    def walk(self) -> Iterator["TestDescriptor"]:
        """Yield this descriptor and all of its descendants depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def tests(self) -> List["TestDescriptor"]:
        return [descriptor for descriptor in self.walk() if descriptor.is_test]

    def count_containers(self) -> int:
        return sum(1 for descriptor in self.walk() if descriptor.is_container)

    def count_tests(self) -> int:
        return sum(1 for descriptor in self.walk() if descriptor.is_test)

    def prune(self):
        """Drop nested containers that ended up without any tests."""
        for child in list(self.children):
            if child.is_container:
                child.prune()
                if not child.children and child.payload is None:
                    self.children.remove(child)


@dataclass(frozen=True)
class DiscoveryRequest:
    """Selectors and filters handed to every engine during discovery."""

    scan_paths: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()
    modules: Tuple[str, ...] = ()
    test_ids: Tuple[str, ...] = ()
    include_patterns: Tuple[Pattern, ...] = ()
    exclude_patterns: Tuple[Pattern, ...] = ()

    @property
    def has_selectors(self) -> bool:
        return bool(self.scan_paths or self.files or self.modules or self.test_ids)

    def matches_name(self, test_id: str) -> bool:
        """Apply include/exclude name patterns to a test id."""
        if self.include_patterns and not any(
            pattern.search(test_id) for pattern in self.include_patterns
        ):
            return False
        return not any(pattern.search(test_id) for pattern in self.exclude_patterns)

    @classmethod
    def build(
        cls,
        scan_paths=(),
        files=(),
        modules=(),
        test_ids=(),
        include_names=(),
        exclude_names=(),
    ) -> "DiscoveryRequest":
        return cls(
            scan_paths=tuple(scan_paths),
            files=tuple(files),
            modules=tuple(modules),
            test_ids=tuple(test_ids),
            include_patterns=tuple(re.compile(p) for p in include_names),
            exclude_patterns=tuple(re.compile(p) for p in exclude_names),
        )


class ExecutionListener:
    """Receives events while a test plan executes. All hooks are optional."""

    def testplan_execution_started(self, roots: List[TestDescriptor]):
        pass

    def testplan_execution_finished(self, roots: List[TestDescriptor]):
        pass

    def execution_started(self, descriptor: TestDescriptor):
        pass

    def execution_skipped(self, descriptor: TestDescriptor, reason: str):
        pass

    def execution_finished(
        self, descriptor: TestDescriptor, result: TestExecutionResult
    ):
        pass


class CompositeListener(ExecutionListener):
    """Fans every event out to a list of listeners, in order."""

    def __init__(self, listeners: List[ExecutionListener]):
        self.listeners = list(listeners)

    def testplan_execution_started(self, roots):
        for listener in self.listeners:
            listener.testplan_execution_started(roots)

    def testplan_execution_finished(self, roots):
        for listener in self.listeners:
            listener.testplan_execution_finished(roots)

    def execution_started(self, descriptor):
        for listener in self.listeners:
            listener.execution_started(descriptor)

    def execution_skipped(self, descriptor, reason):
        for listener in self.listeners:
            listener.execution_skipped(descriptor, reason)

    def execution_finished(self, descriptor, result):
        for listener in self.listeners:
            listener.execution_finished(descriptor, result)


class TestEngine(ABC):
    """Base class for pluggable test engines.

    Subclasses set ``engine_id`` and may set the optional provenance
    attributes ``group_id``, ``artifact_id`` and ``version``.
    """

    __test__ = False

    engine_id: str = ""
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None

    def create_root(self) -> TestDescriptor:
        return TestDescriptor(
            f"[engine:{self.engine_id}]", self.engine_id, DescriptorType.CONTAINER
        )

    @abstractmethod
    def discover(self, request: DiscoveryRequest) -> TestDescriptor:
        """Return the engine root descriptor populated with matching tests."""

    @abstractmethod
    def execute(self, root: TestDescriptor, listener: ExecutionListener):
        """Run everything below ``root`` and report events to ``listener``.

        The executor reports the start and finish of ``root`` itself.
        """


__all__ = [
    "DescriptorType",
    "TestStatus",
    "TestExecutionResult",
    "TestDescriptor",
    "DiscoveryRequest",
    "ExecutionListener",
    "CompositeListener",
    "TestEngine",
]
