from fowlrot.domain.code import RotationCode
from fowlrot.domain.errors import (
    ConfigurationError,
    EmptyResult,
    EncoderFailure,
    LaunchError,
    PrefixDerivationError,
    RotationError,
)

__all__ = [
    "RotationCode",
    "RotationError",
    "ConfigurationError",
    "EncoderFailure",
    "EmptyResult",
    "PrefixDerivationError",
    "LaunchError",
]
