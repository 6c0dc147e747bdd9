# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
pytest configuration and shared fixtures for console launcher tests.

The fixtures here write small throwaway test projects to ``tmp_path`` and
keep the launcher away from the real user configuration directory.
"""

import logging
import sys
import textwrap
import uuid

import pytest

from console_launcher.cli.ux_config import CONFIG_DIR_ENV


@pytest.fixture(scope="session", autouse=True)
def optimize_test_environment():
    """Reduce logging noise during tests."""
    logging.getLogger("console_launcher").setLevel(logging.WARNING)
    yield
    logging.getLogger("console_launcher").setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Point the preferences lookup at an empty per-test directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
    return config_dir


@pytest.fixture
def scratch_project(tmp_path):
    """Factory writing uniquely named test modules into a scratch project.

    unittest discovery caches modules by name, so every module gets a random
    suffix. Modules and ``sys.path`` entries added while the test ran are
    removed afterwards.
    """
    project = tmp_path / "project"
    project.mkdir()
    saved_path = list(sys.path)
    written = []

    def write(source: str, prefix: str = "test_sample") -> str:
        module_name = f"{prefix}_{uuid.uuid4().hex[:8]}"
        (project / f"{module_name}.py").write_text(textwrap.dedent(source))
        written.append(module_name)
        return module_name

    write.path = project
    yield write

    sys.path[:] = saved_path
    for name in written:
        sys.modules.pop(name, None)


PASSING_TESTS = """
    import unittest


    class PassingTests(unittest.TestCase):
        def test_one(self):
            self.assertEqual(1 + 1, 2)

        def test_two(self):
            self.assertTrue(True)
"""

FAILING_TESTS = """
    import unittest


    class FailingTests(unittest.TestCase):
        def test_first(self):
            self.assertEqual(1, 2)

        def test_second(self):
            raise RuntimeError("boom")

        def test_third(self):
            self.fail("third failure")

        def test_passes(self):
            pass
"""

MIXED_TESTS = """
    import unittest


    class MixedTests(unittest.TestCase):
        def test_ok(self):
            pass

        @unittest.skip("not today")
        def test_skipped(self):
            pass

        @unittest.expectedFailure
        def test_expected_failure(self):
            self.assertEqual(1, 2)
"""


@pytest.fixture
def sample_sources():
    return {"passing": PASSING_TESTS, "failing": FAILING_TESTS, "mixed": MIXED_TESTS}


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "fast: mark test as fast running")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")


def pytest_collection_modifyitems(config, items):
    """Mark integration tests as slow."""
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(pytest.mark.slow)
