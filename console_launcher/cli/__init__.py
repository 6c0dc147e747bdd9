# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher CLI Module

This module provides the command-line interface of the console launcher.
It includes the main entry point for CLI usage.
"""

from .main import main

__all__ = ["main"]
