# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Test package for the Console Launcher.

This package contains tests for all modules of the Console Launcher.
"""
