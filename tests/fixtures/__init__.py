# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Test fixtures for console launcher tests.

This package provides scripted test engines and recording listeners so that
launcher and executor behaviour can be tested without real test files.
"""

from .engine_factory import RecordingListener, ScriptedEngine

__all__ = ["RecordingListener", "ScriptedEngine"]
