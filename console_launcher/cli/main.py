# SPDX-FileCopyrightText: 2025 Console Launcher Team
# SPDX-License-Identifier: MIT
"""
Console Launcher process entry point.

The only place that knows about ``sys.argv``, the real standard streams and
the process exit status.
"""

import sys
from typing import Optional, Sequence

from .launcher import ConsoleLauncher
from .parser import ArgparseOptionsParser
from .ux_config import VerbosityLevel, configure_logging_for_verbosity


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    if argv is None:
        argv = sys.argv[1:]

    # Preference loading may warn before the requested verbosity is known
    configure_logging_for_verbosity(VerbosityLevel.MINIMAL)

    launcher = ConsoleLauncher(
        ArgparseOptionsParser(), sys.stdout, sys.stderr, configure_logging=True
    )
    outcome = launcher.execute(argv)
    return int(outcome.exit_code)


if __name__ == "__main__":
    sys.exit(main())
