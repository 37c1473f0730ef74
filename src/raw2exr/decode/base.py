from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .types import SensorImage


class DecodeError(RuntimeError):
    pass


class UnsupportedFormatError(DecodeError):
    pass


class UnsupportedSampleFormatError(DecodeError):
    """Sensor samples are not stored as integers (e.g. floating-point DNG)."""


class MissingDependencyError(DecodeError):
    pass


class CfaContractError(DecodeError):
    """A CFA oracle reported a filter index outside {0, 1, 2}."""


class Decoder(Protocol):
    def decode(self, path: Path) -> SensorImage:
        ...
