from __future__ import annotations

import numpy as np


def normalize(
    triple: tuple[float, float, float],
    white_levels: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Scale a raw-scale RGB triple into unit range by per-channel white level.

    Values above the white level stay above 1.0; nothing is clamped.
    """

    r, g, b = triple
    return (r / white_levels[0], g / white_levels[1], b / white_levels[2])


def normalize_planes(planes: np.ndarray, white_levels: tuple[float, float, float]) -> np.ndarray:
    levels = np.asarray(white_levels, dtype=np.float64).reshape(3, 1, 1)
    return (np.asarray(planes, dtype=np.float64) / levels).astype(np.float32)
