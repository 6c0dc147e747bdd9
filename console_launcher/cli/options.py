# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Launch Options

The immutable, already validated description of one invocation. Produced by
the options parser and read by everything downstream.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from ..core.engine import DiscoveryRequest
from ..core.exceptions import LauncherError
from ..core.output import Details
from .help_system import HelpTopic
from .ux_config import VerbosityLevel


class OptionsParseError(LauncherError):
    """Malformed or contradictory command-line arguments."""


class LaunchMode(Enum):
    """The single mode an invocation runs in."""

    LIST_ENGINES = "list-engines"
    LIST_TESTS = "list-tests"
    SHOW_HELP = "show-help"
    EXECUTE = "execute"

    @classmethod
    def resolve(
        cls, list_engines: bool, list_tests: bool, show_help: bool
    ) -> "LaunchMode":
        """Collapse the independent mode flags using their fixed priority."""
        if list_engines:
            return cls.LIST_ENGINES
        if list_tests:
            return cls.LIST_TESTS
        if show_help:
            return cls.SHOW_HELP
        return cls.EXECUTE


@dataclass(frozen=True)
class ExecutionParameters:
    """Selectors and filters passed through to the test executor."""

    scan_paths: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()
    modules: Tuple[str, ...] = ()
    test_ids: Tuple[str, ...] = ()
    include_names: Tuple[str, ...] = ()
    exclude_names: Tuple[str, ...] = ()
    include_engines: Tuple[str, ...] = ()
    exclude_engines: Tuple[str, ...] = ()

    @property
    def has_selectors(self) -> bool:
        return bool(self.scan_paths or self.files or self.modules or self.test_ids)

    def to_discovery_request(self) -> DiscoveryRequest:
        # No explicit selector means: scan the working directory
        scan_paths = self.scan_paths
        if not self.has_selectors:
            scan_paths = (os.getcwd(),)
        return DiscoveryRequest.build(
            scan_paths=scan_paths,
            files=self.files,
            modules=self.modules,
            test_ids=self.test_ids,
            include_names=self.include_names,
            exclude_names=self.exclude_names,
        )


@dataclass(frozen=True)
class LaunchOptions:
    """Everything the launcher needs to know about one invocation."""

    mode: LaunchMode = LaunchMode.EXECUTE
    banner_disabled: bool = False
    ansi_color_output_disabled: bool = False
    fail_if_no_tests: bool = False
    details: Details = Details.TREE
    help_topic: HelpTopic = HelpTopic.MAIN
    verbosity: VerbosityLevel = VerbosityLevel.MINIMAL
    parameters: ExecutionParameters = field(default_factory=ExecutionParameters)


__all__ = [
    "OptionsParseError",
    "LaunchMode",
    "Details",
    "ExecutionParameters",
    "LaunchOptions",
]
