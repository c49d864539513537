"""Error taxonomy for code derivation and launch.

Every failure is fatal for the run.  Nothing here is retried: once the
window advances a retry would silently produce a different code and break
synchronisation with the peer.
"""

from __future__ import annotations


class RotationError(Exception):
    """Base class for every fowlrot failure."""


class ConfigurationError(RotationError):
    """Raised when configuration is invalid, before any derivation runs."""


class EncoderFailure(RotationError):
    """Raised when the mnemonic encoder fails or returns no words."""

    def __init__(self, encoder_name: str, reason: str, returncode: int | None = None) -> None:
        self.encoder_name = encoder_name
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"Failed to generate mnemonic words using '{encoder_name}': {reason}")


class EmptyResult(RotationError):
    """Raised when the pipeline yields an empty code."""


class PrefixDerivationError(EmptyResult):
    """Raised when a phrase digest holds no decimal digit to build a prefix from."""

    def __init__(self, digest: str) -> None:
        self.digest = digest
        super().__init__(f"Digest contains no decimal digits: {digest}")


class LaunchError(RotationError):
    """Raised when the connection tool cannot be executed."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to execute command '{command}': {reason}")
