# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher User Configuration

Loads user preferences that provide defaults for the command line, and
configures logging for the selected verbosity.

Preferences live in ``preferences.json`` inside the configuration directory:
``--config-dir`` if given, else ``$CONSOLE_LAUNCHER_CONFIG_DIR``, else
``~/.console-launcher``. Command-line flags always win over preferences.
The launcher only ever reads this file.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "CONSOLE_LAUNCHER_CONFIG_DIR"
PREFERENCES_FILE = "preferences.json"
DETAILS_CHOICES = ("none", "summary", "flat", "tree")


class VerbosityLevel(Enum):
    """Logging verbosity levels for the CLI."""

    MINIMAL = "minimal"  # Warnings and errors only
    NORMAL = "normal"  # Informational messages
    DETAILED = "detailed"  # Timestamped, launcher debug output
    DEBUG = "debug"  # Full debugging information


@dataclass
class LauncherPreferences:
    """User preferences for launcher behavior and output."""

    disable_banner: bool = False
    disable_ansi_colors: bool = False
    fail_if_no_tests: bool = False
    details: str = "tree"
    verbosity: VerbosityLevel = VerbosityLevel.MINIMAL
    include_engines: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "disable_banner": self.disable_banner,
            "disable_ansi_colors": self.disable_ansi_colors,
            "fail_if_no_tests": self.fail_if_no_tests,
            "details": self.details,
            "verbosity": self.verbosity.value,
            "include_engines": list(self.include_engines),
        }

    @staticmethod
    def _flag(data: Dict, key: str) -> bool:
        value = data.get(key, False)
        if not isinstance(value, bool):
            raise TypeError(f"{key} must be true or false, got {value!r}")
        return value

    @classmethod
    def from_dict(cls, data: Dict) -> "LauncherPreferences":
        """Create from dictionary loaded from JSON."""
        details = str(data.get("details", "tree"))
        if details not in DETAILS_CHOICES:
            raise ValueError(f"unknown details mode: {details}")
        include_engines = data.get("include_engines", [])
        if not isinstance(include_engines, list):
            raise TypeError("include_engines must be a list of engine ids")
        return cls(
            disable_banner=cls._flag(data, "disable_banner"),
            disable_ansi_colors=cls._flag(data, "disable_ansi_colors"),
            fail_if_no_tests=cls._flag(data, "fail_if_no_tests"),
            details=details,
            verbosity=VerbosityLevel(data.get("verbosity", "minimal")),
            include_engines=[str(engine) for engine in include_engines],
        )


def resolve_config_dir(config_dir: Optional[str] = None) -> Path:
    if config_dir:
        return Path(config_dir)
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".console-launcher"


def load_preferences(config_dir: Optional[str] = None) -> LauncherPreferences:
    """Load user preferences, falling back to defaults.

    A missing file is normal. An unreadable or malformed file is reported
    as a warning and ignored so that a broken preference never blocks a run.
    """
    preferences_file = resolve_config_dir(config_dir) / PREFERENCES_FILE
    if not preferences_file.exists():
        return LauncherPreferences()
    try:
        with open(preferences_file, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError("top-level JSON value must be an object")
        preferences = LauncherPreferences.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Ignoring preferences file {preferences_file}: {e}")
        return LauncherPreferences()
    logger.debug(f"Loaded preferences from {preferences_file}")
    return preferences


_MINIMAL_FORMAT = "%(message)s"
_NORMAL_FORMAT = "%(levelname)s: %(message)s"
_DETAILED_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# verbosity -> (root level, launcher level, format)
_LOGGING_SETUP = {
    VerbosityLevel.MINIMAL: (logging.WARNING, logging.WARNING, _MINIMAL_FORMAT),
    VerbosityLevel.NORMAL: (logging.INFO, logging.INFO, _NORMAL_FORMAT),
    VerbosityLevel.DETAILED: (logging.INFO, logging.DEBUG, _DETAILED_FORMAT),
    VerbosityLevel.DEBUG: (logging.DEBUG, logging.DEBUG, _DETAILED_FORMAT),
}


def configure_logging_for_verbosity(
    verbosity: VerbosityLevel, logger_name: str = "console_launcher"
):
    """Configure logging based on verbosity level.

    Log records go to stderr through a single handler and never to the
    launcher's console streams.
    """
    root_level, launcher_level, fmt = _LOGGING_SETUP[verbosity]
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    root_logger.setLevel(root_level)
    logging.getLogger(logger_name).setLevel(launcher_level)
    root_logger.addHandler(handler)


__all__ = [
    "CONFIG_DIR_ENV",
    "VerbosityLevel",
    "LauncherPreferences",
    "resolve_config_dir",
    "load_preferences",
    "configure_logging_for_verbosity",
]
