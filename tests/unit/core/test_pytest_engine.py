# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""pytest engine tests.

Full pytest sessions are exercised through the command line in
``tests/cli``; here the plugins are fed hand-made reports.
"""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from console_launcher.core.engine import DiscoveryRequest, TestStatus
from console_launcher.core.engines.pytest_engine import (
    BASE_ARGS,
    PytestEngine,
    PytestItemRef,
    ReportedFailure,
    _CollectorPlugin,
    _ReportingPlugin,
)
from console_launcher.core.exceptions import EngineExecutionError

from tests.fixtures import RecordingListener


def build_root(*nodeids):
    engine = PytestEngine()
    root = engine.create_root()
    for nodeid in nodeids:
        engine._add_item(root, PytestItemRef(nodeid, f"/abs/{nodeid}"))
    return root


def report(nodeid, when="call", outcome="passed", longrepr=None, **extra):
    return SimpleNamespace(
        nodeid=nodeid,
        when=when,
        failed=outcome == "failed",
        skipped=outcome == "skipped",
        passed=outcome == "passed",
        longrepr=longrepr,
        longreprtext=str(longrepr or ""),
        **extra,
    )


def run_test(plugin, nodeid, *reports):
    plugin.pytest_runtest_logstart(nodeid, None)
    for item in reports:
        plugin.pytest_runtest_logreport(item)
    plugin.pytest_runtest_logfinish(nodeid, None)


class TestCollectionArgs:
    @pytest.mark.fast
    def test_no_pytest_selectors(self):
        request = DiscoveryRequest.build(test_ids=["pkg.mod.Tests.test_a"])
        assert PytestEngine()._collection_args(request) == []

    @pytest.mark.fast
    def test_paths_and_node_ids(self):
        request = DiscoveryRequest.build(
            scan_paths=["tests"],
            files=["tests/test_a.py"],
            test_ids=["pkg.mod.Tests.test_a", "tests/test_b.py::test_x"],
        )
        assert PytestEngine()._collection_args(request) == [
            "tests", "tests/test_a.py", "tests/test_b.py::test_x",
        ]

    @pytest.mark.fast
    def test_modules_use_pyargs(self):
        request = DiscoveryRequest.build(modules=["pkg.tests"], scan_paths=["more"])
        assert PytestEngine()._collection_args(request) == ["--pyargs", "pkg.tests", "more"]

    @pytest.mark.fast
    def test_discover_without_selectors_skips_pytest(self):
        with patch("console_launcher.core.engines.pytest_engine.pytest.main") as main:
            root = PytestEngine().discover(DiscoveryRequest.build(test_ids=["a.b.c"]))

        main.assert_not_called()
        assert root.children == []


class TestRun:
    @pytest.mark.fast
    def test_arguments(self):
        with patch(
            "console_launcher.core.engines.pytest_engine.pytest.main",
            return_value=pytest.ExitCode.OK,
        ) as main:
            PytestEngine(extra_args=["-x"])._run(["tests"], "plugin")

        main.assert_called_once_with(BASE_ARGS + ["-x", "tests"], plugins=["plugin"])

    @pytest.mark.fast
    @pytest.mark.parametrize("exit_code", [pytest.ExitCode.INTERNAL_ERROR, pytest.ExitCode.USAGE_ERROR])
    def test_fatal_exit_codes(self, exit_code):
        with patch("console_launcher.core.engines.pytest_engine.pytest.main", return_value=exit_code):
            with pytest.raises(EngineExecutionError, match=exit_code.name):
                PytestEngine()._run([], None)

    @pytest.mark.fast
    @pytest.mark.parametrize(
        "exit_code",
        [pytest.ExitCode.TESTS_FAILED, pytest.ExitCode.NO_TESTS_COLLECTED, pytest.ExitCode.INTERRUPTED],
    )
    def test_other_exit_codes_are_results(self, exit_code):
        with patch("console_launcher.core.engines.pytest_engine.pytest.main", return_value=exit_code):
            assert PytestEngine()._run([], None) == exit_code


class TestTreeLayout:
    @pytest.mark.fast
    def test_file_class_test(self):
        root = build_root("tests/test_a.py::test_x", "tests/test_a.py::Outer::Inner::test_y")
        ids = [test.unique_id for test in root.tests()]

        assert ids == [
            "[engine:pytest]/[file:tests/test_a.py]/[test:test_x]",
            "[engine:pytest]/[file:tests/test_a.py]/[class:Outer]/[class:Inner]/[test:test_y]",
        ]
        assert root.tests()[1].payload.spec == "/abs/tests/test_a.py::Outer::Inner::test_y"


class TestCollectorPlugin:
    """Collection hooks."""

    def item(self, nodeid, cls=None):
        return SimpleNamespace(nodeid=nodeid, cls=cls)

    @pytest.mark.fast
    def test_deselects_unittest_cases_and_filtered_names(self):
        class Legacy(unittest.TestCase):
            def test_old(self):
                pass

        plugin = _CollectorPlugin(DiscoveryRequest.build(exclude_names=["slow"]))
        items = [
            self.item("t.py::test_fast"),
            self.item("t.py::test_slow"),
            self.item("t.py::Legacy::test_old", cls=Legacy),
        ]
        config = MagicMock()

        plugin.pytest_collection_modifyitems(None, config, items)

        assert [item.nodeid for item in items] == ["t.py::test_fast"]
        deselected = config.hook.pytest_deselected.call_args.kwargs["items"]
        assert [item.nodeid for item in deselected] == ["t.py::test_slow", "t.py::Legacy::test_old"]

    @pytest.mark.fast
    def test_nothing_deselected(self):
        plugin = _CollectorPlugin(DiscoveryRequest())
        items = [self.item("t.py::test_a")]
        config = MagicMock()

        plugin.pytest_collection_modifyitems(None, config, items)

        assert len(items) == 1
        config.hook.pytest_deselected.assert_not_called()

    @pytest.mark.fast
    def test_collection_errors(self):
        plugin = _CollectorPlugin(DiscoveryRequest())
        plugin.pytest_collectreport(report("tests/test_bad.py", outcome="failed", longrepr="SyntaxError"))
        plugin.pytest_collectreport(report("tests/test_ok.py"))

        assert plugin.collection_errors == {"tests/test_bad.py": "SyntaxError"}

    @pytest.mark.fast
    def test_collection_finish(self, tmp_path):
        plugin = _CollectorPlugin(DiscoveryRequest())
        test_file = tmp_path / "test_a.py"
        session = SimpleNamespace(
            config=SimpleNamespace(rootpath=tmp_path),
            items=[
                SimpleNamespace(nodeid="test_a.py::test_x", path=test_file),
                SimpleNamespace(nodeid="test_a.py", path=test_file),
            ],
        )
        plugin.pytest_collection_finish(session)

        assert plugin.rootdir == str(tmp_path)
        assert plugin.items == [
            PytestItemRef("test_a.py::test_x", f"{test_file}::test_x"),
            PytestItemRef("test_a.py", str(test_file)),
        ]


class TestReportingPlugin:
    """Reports are translated into listener events."""

    def setup_method(self):
        self.root = build_root(
            "t.py::Suite::test_pass",
            "t.py::Suite::test_fail",
            "t.py::test_skip",
            "t.py::test_xfail",
            "t.py::test_teardown",
        )
        self.listener = RecordingListener()
        self.plugin = _ReportingPlugin(self.root, self.listener)

    def uid(self, name):
        return next(t.unique_id for t in self.root.tests() if t.display_name == name)

    @pytest.mark.fast
    def test_full_run(self):
        plugin = self.plugin
        run_test(plugin, "t.py::Suite::test_pass", report("t.py::Suite::test_pass", "setup"), report("t.py::Suite::test_pass"))
        run_test(plugin, "t.py::Suite::test_fail", report("t.py::Suite::test_fail", outcome="failed", longrepr="assert 1 == 2"))
        run_test(plugin, "t.py::test_skip", report("t.py::test_skip", "setup", "skipped", ("t.py", 3, "Skipped: later")))
        run_test(plugin, "t.py::test_xfail", report("t.py::test_xfail", outcome="skipped", longrepr="xfail", wasxfail=""))
        run_test(
            plugin,
            "t.py::test_teardown",
            report("t.py::test_teardown"),
            report("t.py::test_teardown", "teardown", "failed", "fixture cleanup"),
        )
        plugin.close_all()

        failed = self.listener.finished(TestStatus.FAILED)
        assert failed == [self.uid("test_fail"), self.uid("test_teardown")]
        assert self.listener.skipped() == [self.uid("test_skip")]
        skipped_reason = [detail for event, _, detail in self.listener.events if event == "skipped"]
        assert skipped_reason == ["later"]

        successful = self.listener.finished(TestStatus.SUCCESSFUL)
        assert self.uid("test_pass") in successful
        assert self.uid("test_xfail") in successful
        assert "[engine:pytest]/[file:t.py]" in successful
        assert "[engine:pytest]/[file:t.py]/[class:Suite]" in successful

    @pytest.mark.fast
    def test_failure_text(self):
        run_test(
            self.plugin,
            "t.py::Suite::test_fail",
            report("t.py::Suite::test_fail", outcome="failed", longrepr="assert 1 == 2"),
        )
        result = self.listener.events[-1][2]

        assert isinstance(result.throwable, ReportedFailure)
        assert str(result.throwable) == "[call] assert 1 == 2"

    @pytest.mark.fast
    def test_containers_open_and_close_in_order(self):
        run_test(self.plugin, "t.py::Suite::test_pass", report("t.py::Suite::test_pass"))
        run_test(self.plugin, "t.py::test_skip", report("t.py::test_skip", "setup", "skipped", "Skipped: later"))
        self.plugin.close_all()

        events = [(event, uid) for event, uid, _ in self.listener.events]
        assert events == [
            ("started", "[engine:pytest]/[file:t.py]"),
            ("started", "[engine:pytest]/[file:t.py]/[class:Suite]"),
            ("started", self.uid("test_pass")),
            ("finished", self.uid("test_pass")),
            ("finished", "[engine:pytest]/[file:t.py]/[class:Suite]"),
            ("skipped", self.uid("test_skip")),
            ("finished", "[engine:pytest]/[file:t.py]"),
        ]

    @pytest.mark.fast
    def test_unknown_nodes_are_ignored(self):
        run_test(self.plugin, "other.py::test_x", report("other.py::test_x", outcome="failed"))
        assert self.listener.events == []


class TestExecute:
    @pytest.mark.fast
    def test_collection_errors_are_reported_without_running(self):
        engine = PytestEngine()
        root = engine.create_root()
        broken = root.find_or_add_container("file", "t.py", "t.py")
        broken.payload = ReportedFailure("ImportError: nope")
        listener = RecordingListener()

        with patch("console_launcher.core.engines.pytest_engine.pytest.main") as main:
            engine.execute(root, listener)

        main.assert_not_called()
        assert listener.finished(TestStatus.FAILED) == [broken.unique_id]

    @pytest.mark.fast
    def test_runs_collected_specs_under_rootdir(self):
        engine = PytestEngine()
        engine.rootdir = "/project"
        root = build_root("t.py::test_a")

        with patch(
            "console_launcher.core.engines.pytest_engine.pytest.main",
            return_value=pytest.ExitCode.OK,
        ) as main:
            engine.execute(root, RecordingListener())

        args = main.call_args[0][0]
        assert args[-3:] == ["--rootdir", "/project", "/abs/t.py::test_a"]
