"""RotationCode — the immutable result of one code derivation.

Only ``code`` ever leaves the process.  The remaining fields describe how
it was derived and how long it stays valid, for logging and tests.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

# ── Constants ────────────────────────────────────────────────────────────────

MIN_WINDOW_SIZE = 20
DEFAULT_WINDOW_SIZE = 60
PREFIX_DIGITS = 5
PREFIX_MODULUS = 999
WORD_DELIMITER = "-"


# ── RotationCode ─────────────────────────────────────────────────────────────

class RotationCode(BaseModel):
    """A derived code together with the window it belongs to."""

    code: str = Field(..., min_length=1, description="Final '<prefix>-<word>-...' code")
    prefix: int = Field(..., ge=0, lt=PREFIX_MODULUS, description="Numeric disambiguator")
    words: tuple[str, ...] = Field(..., min_length=1, description="Mnemonic words in order")
    window_start: int = Field(..., description="Epoch second the window opened")
    window_size: int = Field(..., ge=MIN_WINDOW_SIZE, description="Window length in seconds")

    model_config = {"frozen": True}

    @field_validator("words")
    @classmethod
    def words_must_be_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for word in v:
            if not word:
                raise ValueError("mnemonic words must not be empty")
        return v

    @property
    def window_end(self) -> int:
        """First epoch second that belongs to the next window."""
        return self.window_start + self.window_size

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.window_end, tz=timezone.utc)

    def seconds_remaining(self, now: int) -> int:
        """Seconds until the code rotates, clamped at zero."""
        return max(self.window_end - now, 0)

    def __str__(self) -> str:
        return self.code
