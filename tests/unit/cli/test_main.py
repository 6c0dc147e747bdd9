# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""Process entry point tests."""

from unittest.mock import patch

import pytest

from console_launcher.cli.main import main
from console_launcher.cli.ux_config import VerbosityLevel


@pytest.fixture
def logging_setup():
    with patch("console_launcher.cli.main.configure_logging_for_verbosity") as early, patch(
        "console_launcher.cli.launcher.configure_logging_for_verbosity"
    ) as parsed:
        yield early, parsed


class TestMain:
    @pytest.mark.fast
    def test_returns_exit_code(self, logging_setup, capsys):
        assert main(["--disable-banner", "--help", "examples"]) == 0

        captured = capsys.readouterr()
        assert captured.out.startswith("examples:")
        assert captured.err == ""

    @pytest.mark.fast
    def test_configuration_error(self, logging_setup, capsys):
        assert main(["--bogus"]) == 4
        assert "usage:" in capsys.readouterr().err

    @pytest.mark.fast
    def test_logging_follows_parsed_verbosity(self, logging_setup):
        early, parsed = logging_setup
        main(["--verbosity", "debug", "--disable-banner", "--help"])

        early.assert_called_once_with(VerbosityLevel.MINIMAL)
        parsed.assert_called_once_with(VerbosityLevel.DEBUG)

    @pytest.mark.fast
    def test_logging_untouched_on_parse_error(self, logging_setup):
        _, parsed = logging_setup
        main(["--details", "loud"])

        parsed.assert_not_called()

    @pytest.mark.fast
    def test_reads_sys_argv(self, logging_setup, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["console-launcher", "--disable-banner", "--help", "exit-codes"])

        assert main() == 0
        assert capsys.readouterr().out.startswith("exit codes:")
