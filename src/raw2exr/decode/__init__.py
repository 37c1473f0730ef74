from .base import (
    CfaContractError,
    DecodeError,
    Decoder,
    MissingDependencyError,
    UnsupportedFormatError,
    UnsupportedSampleFormatError,
)
from .types import SensorImage

__all__ = [
    "CfaContractError",
    "DecodeError",
    "Decoder",
    "MissingDependencyError",
    "UnsupportedFormatError",
    "UnsupportedSampleFormatError",
    "SensorImage",
]
