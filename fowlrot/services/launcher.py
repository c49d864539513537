"""Hands the process over to the connection tool.

The launcher replaces the current process image, so the connection tool
receives terminal signals (Ctrl+C) directly and its exit status becomes
fowlrot's exit status.
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Sequence

from fowlrot.domain.errors import LaunchError

logger = logging.getLogger(__name__)


class ConnectionLauncher:
    """Runs ``<command...> <args...> <code>`` in place of this process."""

    def __init__(self, command: Sequence[str]) -> None:
        if not command:
            raise ValueError("connection command must not be empty")
        self._command = tuple(command)

    def build_argv(self, args: Sequence[str], code: str) -> list[str]:
        """Arguments are forwarded verbatim; the code always goes last."""
        return [*self._command, *args, code]

    def launch(self, args: Sequence[str], code: str) -> None:
        """Replace the process.  Only returns if exec is intercepted.

        Raises:
            LaunchError: If the command cannot be executed.
        """
        argv = self.build_argv(args, code)
        logger.info("Executing: %s", shlex.join(argv))
        try:
            os.execvp(argv[0], argv)
        except OSError as exc:
            raise LaunchError(shlex.join(self._command), str(exc)) from exc
