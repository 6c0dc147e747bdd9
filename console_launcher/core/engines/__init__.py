# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Built-in test engines.

Engines are imported by the registry on demand; pytest is only imported
once the pytest engine is actually loaded.
"""
