from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class ReconstructedGrid:
    """Demosaiced, normalized linear RGB planes, each shaped ``(height, width)``.

    Row-major with the origin at the top-left, so flat index ``i`` is pixel
    ``(i % width, i // width)``.
    """

    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    def __post_init__(self) -> None:
        if not (self.red.shape == self.green.shape == self.blue.shape) or self.red.ndim != 2:
            raise ValueError(
                f"channel planes must share one 2-D shape, got {self.red.shape}, {self.green.shape}, {self.blue.shape}"
            )

    @property
    def width(self) -> int:
        return int(self.red.shape[1])

    @property
    def height(self) -> int:
        return int(self.red.shape[0])

    def pixel(self, x: int, y: int) -> tuple[float, float, float]:
        return (float(self.red[y, x]), float(self.green[y, x]), float(self.blue[y, x]))

    def planes(self) -> np.ndarray:
        return np.stack([self.red, self.green, self.blue])
