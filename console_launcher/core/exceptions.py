# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""Exception hierarchy shared by the launcher and the test platform."""


class LauncherError(Exception):
    """Base class for all errors raised by the console launcher."""


class PlatformError(LauncherError):
    """Raised when the test platform cannot discover or run tests."""


class EngineExecutionError(PlatformError):
    """Raised when an engine fails as a whole, not just a single test."""

    def __init__(self, engine_id: str, message: str):
        self.engine_id = engine_id
        self.message = message
        super().__init__(f"Engine '{engine_id}' failed: {message}")


__all__ = ["LauncherError", "PlatformError", "EngineExecutionError"]
