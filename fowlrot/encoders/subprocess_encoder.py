"""SubprocessMnemonicEncoder — runs the HumanReadableSeed command line tool.

Invocation:
    <command...> toread <digest>

The tool prints the words separated by whitespace on stdout.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence

from fowlrot.domain.errors import EncoderFailure
from fowlrot.encoders.base import MnemonicEncoder

logger = logging.getLogger(__name__)


class SubprocessMnemonicEncoder(MnemonicEncoder):
    """Maps digests to words by calling an external command."""

    def __init__(self, command: Sequence[str], subcommand: str = "toread") -> None:
        if not command:
            raise ValueError("encoder command must not be empty")
        self._command = tuple(command)
        self._subcommand = subcommand

    @property
    def name(self) -> str:
        return shlex.join(self._command)

    def encode(self, digest: str) -> list[str]:
        argv = [*self._command, self._subcommand, digest]
        logger.debug("Running mnemonic encoder: %s", shlex.join(argv))

        try:
            result = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise EncoderFailure(self.name, str(exc)) from exc

        if result.returncode != 0:
            reason = f"exited with status {result.returncode}"
            stderr = result.stderr.strip()
            if stderr:
                reason = f"{reason}: {stderr}"
            raise EncoderFailure(self.name, reason, returncode=result.returncode)

        words = result.stdout.split()
        if not words:
            raise EncoderFailure(self.name, "produced no words", returncode=result.returncode)
        return words
