# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Test Engine Registry

Engines are looked up fresh on every invocation. The built-in engines
(``unittest`` and ``pytest``) are always available; third-party distributions
contribute more through entry points in the ``console_launcher.engines``
group, each pointing at a ``TestEngine`` subclass or a zero-argument factory.
"""

import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Callable, Iterable, List, Optional

from .engine import TestEngine
from .exceptions import PlatformError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "console_launcher.engines"


@dataclass(frozen=True)
class EngineDescriptor:
    """Identifier and optional provenance of a registered engine."""

    identifier: str
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def of(cls, engine: TestEngine) -> "EngineDescriptor":
        return cls(engine.engine_id, engine.group_id, engine.artifact_id, engine.version)

    def render(self) -> str:
        details = [
            part
            for part in (self.group_id, self.artifact_id, self.version)
            if part is not None
        ]
        if not details:
            return self.identifier
        return f"{self.identifier} ({':'.join(details)})"


class EngineRegistry:
    """Capability interface: something that can load all registered engines."""

    def load_all(self) -> List[TestEngine]:
        raise NotImplementedError


class StaticEngineRegistry(EngineRegistry):
    """Registry backed by a fixed collection of engines."""

    def __init__(self, engines: Iterable[TestEngine]):
        self.engines = list(engines)

    def load_all(self) -> List[TestEngine]:
        return list(self.engines)


def _builtin_engine_factories() -> List[Callable[[], TestEngine]]:
    # Imported here so that help and parse errors never pay for pytest.
    from .engines.pytest_engine import PytestEngine
    from .engines.unittest_engine import UnittestEngine

    return [UnittestEngine, PytestEngine]


class ServiceEngineRegistry(EngineRegistry):
    """Registry combining the built-in engines with entry point engines."""

    def __init__(self, group: str = ENTRY_POINT_GROUP, include_builtins: bool = True):
        self.group = group
        self.include_builtins = include_builtins

    def _factories(self) -> List[Callable[[], TestEngine]]:
        factories = _builtin_engine_factories() if self.include_builtins else []
        for entry_point in entry_points(group=self.group):
            logger.debug(f"Loading test engine entry point: {entry_point.value}")
            factories.append(entry_point.load())
        return factories

    def load_all(self) -> List[TestEngine]:
        engines = {}
        for factory in self._factories():
            engine = factory()
            if not engine.engine_id:
                raise PlatformError(f"Test engine {factory!r} has no engine_id")
            if engine.engine_id in engines:
                raise PlatformError(
                    f"Cannot register multiple test engines with the same ID "
                    f"'{engine.engine_id}'"
                )
            engines[engine.engine_id] = engine
        logger.debug(f"Loaded test engines: {', '.join(engines) or 'none'}")
        return list(engines.values())


def engine_listing(registry: EngineRegistry) -> List[str]:
    """Render one line per engine, sorted by identifier."""
    descriptors = sorted(
        (EngineDescriptor.of(engine) for engine in registry.load_all()),
        key=lambda descriptor: descriptor.identifier,
    )
    return [descriptor.render() for descriptor in descriptors]


__all__ = [
    "ENTRY_POINT_GROUP",
    "EngineDescriptor",
    "EngineRegistry",
    "StaticEngineRegistry",
    "ServiceEngineRegistry",
    "engine_listing",
]
