"""Application configuration loaded from environment variables.

Settings are read once at startup and frozen into a RotationConfig, which
is then passed down explicitly.  Nothing below the entry point reads the
environment.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from fowlrot.domain.code import DEFAULT_WINDOW_SIZE, MIN_WINDOW_SIZE
from fowlrot.domain.errors import ConfigurationError


def default_command(tool: str) -> str:
    """Prefer running *tool* through uvx when it is installed."""
    if shutil.which("uvx"):
        return f"uvx --quiet {tool}@latest"
    return tool


class RotationConfig(BaseModel):
    """Immutable, validated configuration for one run."""

    secret: bytes = Field(..., min_length=1, repr=False, description="Raw secret bytes as found in the environment")
    window_size: int = Field(DEFAULT_WINDOW_SIZE, ge=MIN_WINDOW_SIZE)
    fowl_command: tuple[str, ...] = Field(..., min_length=1)
    mnemonic_command: tuple[str, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}


class Settings(BaseSettings):
    modulo: int = DEFAULT_WINDOW_SIZE
    secret: str = Field("", repr=False)
    bin: str = Field(default_factory=lambda: default_command("fowl"))
    hrs_bin: str = Field(default_factory=lambda: default_command("HumanReadableSeed"))
    log_level: str = "INFO"

    model_config = {"env_prefix": "FOWLROT_"}

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    def to_rotation_config(self) -> RotationConfig:
        """Validate the raw settings and freeze them.

        Raises:
            ConfigurationError: If the window is too small, the secret is
                empty or a command string cannot be split.
        """
        if self.modulo < MIN_WINDOW_SIZE:
            raise ConfigurationError(f"FOWLROT_MODULO must be at least {MIN_WINDOW_SIZE}")
        if not self.secret:
            raise ConfigurationError("FOWLROT_SECRET cannot be empty")

        fowl_command = split_command("FOWLROT_BIN", self.bin)
        mnemonic_command = split_command("FOWLROT_HRS_BIN", self.hrs_bin)
        try:
            return RotationConfig(
                secret=os.fsencode(self.secret),
                window_size=self.modulo,
                fowl_command=fowl_command,
                mnemonic_command=mnemonic_command,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def split_command(name: str, value: str) -> tuple[str, ...]:
    """Split a command string into argv words using shell rules."""
    try:
        parts = tuple(shlex.split(value))
    except ValueError as exc:
        raise ConfigurationError(f"{name} is not a valid command: {exc}") from exc
    if not parts:
        raise ConfigurationError(f"{name} cannot be empty")
    return parts


def load_settings() -> Settings:
    """Read Settings from the environment.

    Raises:
        ConfigurationError: If a variable cannot be parsed.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc
