# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""Engine registry tests."""

from unittest.mock import MagicMock, patch

import pytest

from console_launcher.core.exceptions import PlatformError
from console_launcher.core.registry import (
    ENTRY_POINT_GROUP,
    EngineDescriptor,
    ServiceEngineRegistry,
    StaticEngineRegistry,
    engine_listing,
)

from tests.fixtures import ScriptedEngine


def fake_entry_point(factory, name="plugin"):
    entry_point = MagicMock()
    entry_point.name = name
    entry_point.value = f"plugin_pkg:{name}"
    entry_point.load.return_value = factory
    return entry_point


class TestEngineDescriptor:
    @pytest.mark.fast
    @pytest.mark.parametrize(
        "descriptor, expected",
        [
            (EngineDescriptor("behave"), "behave"),
            (EngineDescriptor("behave", "org.example", "behave-engine", "1.2"), "behave (org.example:behave-engine:1.2)"),
            (EngineDescriptor("behave", None, "behave-engine", None), "behave (behave-engine)"),
            (EngineDescriptor("behave", "org.example", None, "1.2"), "behave (org.example:1.2)"),
        ],
    )
    def test_render(self, descriptor, expected):
        assert descriptor.render() == expected

    @pytest.mark.fast
    def test_of_engine(self):
        engine = ScriptedEngine("x", group_id="g", artifact_id="a", version="1")
        assert EngineDescriptor.of(engine) == EngineDescriptor("x", "g", "a", "1")


class TestEngineListing:
    @pytest.mark.fast
    def test_sorted_by_identifier(self):
        registry = StaticEngineRegistry(
            [ScriptedEngine("pytest"), ScriptedEngine("custom"), ScriptedEngine("unittest")]
        )
        assert engine_listing(registry) == ["custom", "pytest", "unittest"]

    @pytest.mark.fast
    def test_empty_registry(self):
        assert engine_listing(StaticEngineRegistry([])) == []


class TestServiceEngineRegistry:
    """Built-in engines plus entry point engines."""

    @pytest.mark.fast
    def test_builtin_engines(self):
        with patch("console_launcher.core.registry.entry_points", return_value=[]) as mocked:
            engines = ServiceEngineRegistry().load_all()

        mocked.assert_called_once_with(group=ENTRY_POINT_GROUP)
        assert sorted(engine.engine_id for engine in engines) == ["pytest", "unittest"]

    @pytest.mark.fast
    def test_entry_point_engines(self):
        entry_point = fake_entry_point(lambda: ScriptedEngine("custom"))
        with patch("console_launcher.core.registry.entry_points", return_value=[entry_point]):
            engines = ServiceEngineRegistry(include_builtins=False).load_all()

        assert [engine.engine_id for engine in engines] == ["custom"]

    @pytest.mark.fast
    def test_duplicate_ids_are_rejected(self):
        entry_point = fake_entry_point(lambda: ScriptedEngine("unittest"))
        with patch("console_launcher.core.registry.entry_points", return_value=[entry_point]):
            with pytest.raises(PlatformError, match="same ID 'unittest'"):
                ServiceEngineRegistry().load_all()

    @pytest.mark.fast
    def test_engine_without_id_is_rejected(self):
        entry_point = fake_entry_point(lambda: ScriptedEngine(""))
        with patch("console_launcher.core.registry.entry_points", return_value=[entry_point]):
            with pytest.raises(PlatformError, match="has no engine_id"):
                ServiceEngineRegistry(include_builtins=False).load_all()

    @pytest.mark.fast
    def test_broken_entry_point_propagates(self):
        entry_point = fake_entry_point(None)
        entry_point.load.side_effect = ImportError("plugin_pkg not installed")
        with patch("console_launcher.core.registry.entry_points", return_value=[entry_point]):
            with pytest.raises(ImportError):
                ServiceEngineRegistry().load_all()

    @pytest.mark.fast
    def test_listing_of_builtins(self):
        with patch("console_launcher.core.registry.entry_points", return_value=[]):
            lines = engine_listing(ServiceEngineRegistry())

        assert lines[0].startswith("pytest (pytest:")
        assert lines[1].startswith("unittest (unittest:")
