"""CodeDeriver — deterministic, clock-synchronised code derivation.

Pipeline:
    timestamp
      → window_start = floor(timestamp / size) * size
      → period_key   = str(window_start) + secret        (no separator)
      → key_digest   = sha256_hex(period_key)
      → words        = encoder.encode(key_digest)
      → phrase       = "-".join(words)
      → prefix       = int(first 5 digits of sha256_hex(phrase)) % 999
      → code         = f"{prefix}-{phrase}"

Every peer holding the same secret and window size computes the same code
for as long as their clocks agree on the window.  The stages are pure
functions; only the encoder may block, and its failures propagate as-is.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Sequence

from fowlrot.config import RotationConfig
from fowlrot.domain.code import (
    MIN_WINDOW_SIZE,
    PREFIX_DIGITS,
    PREFIX_MODULUS,
    WORD_DELIMITER,
    RotationCode,
)
from fowlrot.domain.errors import (
    ConfigurationError,
    EmptyResult,
    EncoderFailure,
    PrefixDerivationError,
)
from fowlrot.encoders.base import MnemonicEncoder
from fowlrot.encoders.subprocess_encoder import SubprocessMnemonicEncoder

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")


# ── Pipeline stages ──────────────────────────────────────────────────────────

def check_window_size(size: int) -> None:
    if size < MIN_WINDOW_SIZE:
        raise ConfigurationError(f"window size must be at least {MIN_WINDOW_SIZE} seconds, got {size}")


def check_secret(secret: str | bytes) -> None:
    if not secret:
        raise ConfigurationError("secret cannot be empty")


def window_start(now: int, size: int) -> int:
    """Snap *now* to the first second of its window."""
    check_window_size(size)
    return (now // size) * size


def period_key(start: int, secret: str | bytes) -> bytes:
    """Concatenate the window start and the secret.

    Peers must agree on this byte-for-byte, so no delimiter is inserted.
    Text secrets are encoded back to the bytes they were decoded from,
    including undecodable bytes escaped by os.environ.
    """
    check_secret(secret)
    if isinstance(secret, str):
        secret = secret.encode("utf-8", "surrogateescape")
    return str(start).encode("ascii") + secret


def sha256_hex(data: bytes) -> str:
    """Lowercase 64-character SHA-256 hex digest."""
    return hashlib.sha256(data).hexdigest()


def join_phrase(words: Sequence[str]) -> str:
    return WORD_DELIMITER.join(words)


def derive_prefix(digest: str) -> int:
    """Reduce the leading digits of *digest* to an integer in [0, 998].

    A digest with fewer than PREFIX_DIGITS digits uses the digits it has.

    Raises:
        PrefixDerivationError: If the digest contains no digit at all.
    """
    digits = _NON_DIGITS.sub("", digest)[:PREFIX_DIGITS]
    if not digits:
        raise PrefixDerivationError(digest)
    return int(digits, 10) % PREFIX_MODULUS


def assemble_code(prefix: int, words: Sequence[str]) -> str:
    """Join prefix and phrase into the final code.

    Raises:
        EmptyResult: If there is no phrase to attach the prefix to.
    """
    phrase = join_phrase(words)
    if not phrase:
        raise EmptyResult("Failed to generate a valid mnemonic")
    return f"{prefix}{WORD_DELIMITER}{phrase}"


# ── Deriver ──────────────────────────────────────────────────────────────────

class CodeDeriver:
    """Runs the full pipeline for a single sampled timestamp.

    The deriver holds no mutable state; calling derive() twice with
    timestamps in the same window returns equal codes.
    """

    def __init__(self, secret: str | bytes, window_size: int, encoder: MnemonicEncoder) -> None:
        check_window_size(window_size)
        check_secret(secret)
        self._secret = secret
        self._window_size = window_size
        self._encoder = encoder

    @classmethod
    def from_config(
        cls,
        config: RotationConfig,
        encoder: MnemonicEncoder | None = None,
    ) -> CodeDeriver:
        """Build a deriver, defaulting to the configured subprocess encoder."""
        if encoder is None:
            encoder = SubprocessMnemonicEncoder(config.mnemonic_command)
        return cls(config.secret, config.window_size, encoder)

    @property
    def window_size(self) -> int:
        return self._window_size

    def derive(self, now: int) -> RotationCode:
        """Derive the code for the window containing *now*.

        Raises:
            EncoderFailure: If the encoder fails or returns no words.
            EmptyResult: If no usable code could be assembled.
        """
        start = window_start(now, self._window_size)
        key_digest = sha256_hex(period_key(start, self._secret))

        words = list(self._encoder.encode(key_digest))
        if not words or not all(words):
            raise EncoderFailure(self._encoder.name, "produced no usable words")

        phrase = join_phrase(words)
        prefix = derive_prefix(sha256_hex(phrase.encode("utf-8")))
        code = assemble_code(prefix, words)

        logger.debug(
            "Derived code for window %d (+%ds) with %d words",
            start,
            self._window_size,
            len(words),
        )
        return RotationCode(
            code=code,
            prefix=prefix,
            words=tuple(words),
            window_start=start,
            window_size=self._window_size,
        )
