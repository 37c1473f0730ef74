from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from raw2exr.decode.base import CfaContractError


RED = 0
GREEN = 1
BLUE = 2
CHANNELS = (RED, GREEN, BLUE)

_LETTERS = {"R": RED, "G": GREEN, "B": BLUE}


class CfaOracle(Protocol):
    def color_at(self, row: int, col: int) -> int:
        ...


def checked_color(cfa: CfaOracle, row: int, col: int) -> int:
    color = cfa.color_at(row, col)
    if color not in CHANNELS:
        raise CfaContractError(f"CFA reported filter index {color!r} at row={row} col={col}; expected 0, 1 or 2")
    return int(color)


@dataclass(frozen=True, eq=False)
class CfaPattern:
    """Periodic color filter array, repeated from the image origin.

    ``tile[r, c]`` is the filter color (0=red, 1=green, 2=blue) of every
    photosite whose coordinate is congruent to ``(r, c)`` modulo the tile size.
    """

    tile: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        tile = np.asarray(self.tile)
        if tile.ndim != 2 or tile.size == 0:
            raise CfaContractError(f"CFA tile must be a non-empty 2-D array, got shape {tile.shape}")
        bad = sorted({int(v) for v in tile.flatten()} - set(CHANNELS))
        if bad:
            raise CfaContractError(f"CFA tile contains unrecognized filter indices {bad}")
        object.__setattr__(self, "tile", tile.astype(np.uint8))

    @classmethod
    def from_string(cls, pattern: str) -> CfaPattern:
        """Build a 2x2 pattern from a descriptor such as ``"RGGB"``."""

        letters = pattern.strip().upper()
        if len(letters) != 4 or any(ch not in _LETTERS for ch in letters):
            raise ValueError(f"expected a 4-letter RGB Bayer descriptor, got {pattern!r}")
        return cls(np.array([_LETTERS[ch] for ch in letters], dtype=np.uint8).reshape(2, 2))

    @property
    def is_bayer(self) -> bool:
        return self.tile.shape == (2, 2) and set(int(v) for v in self.tile.flatten()) == set(CHANNELS)

    def color_at(self, row: int, col: int) -> int:
        h, w = self.tile.shape
        return int(self.tile[row % h, col % w])

    def color_map(self, height: int, width: int) -> np.ndarray:
        h, w = self.tile.shape
        reps = (-(-height // h), -(-width // w))
        return np.tile(self.tile, reps)[:height, :width]

    def __str__(self) -> str:
        names = "RGB"
        return "".join(names[int(v)] for v in self.tile.flatten())
