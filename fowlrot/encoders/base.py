"""Abstract base for mnemonic encoders.

A mnemonic encoder turns a hex digest into an ordered list of words.
The word algorithm itself lives outside fowlrot; encoders only invoke it.

Contract:
    1. The same digest must always produce the same words.
    2. encode() must return a non-empty list or raise EncoderFailure.
    3. Encoders never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class MnemonicEncoder(ABC):
    """Base class for digest-to-words capabilities."""

    @abstractmethod
    def encode(self, digest: str) -> list[str]:
        """Translate a hex digest into mnemonic words.

        Raises:
            EncoderFailure: If the words cannot be produced.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the encoder, used in error messages."""
        ...
