from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .chromaticity import ColorMatrixError, xyz_to_xyy


# CIE illuminant E.
EQUAL_ENERGY_WHITE = (1.0 / 3.0, 1.0 / 3.0)


@dataclass(frozen=True)
class Chromaticities:
    red: tuple[float, float]
    green: tuple[float, float]
    blue: tuple[float, float]
    white: tuple[float, float]

    def as_tuple(self) -> tuple[tuple[float, float], ...]:
        return (self.red, self.green, self.blue, self.white)


def cam_to_xyz_3x3(matrix: np.ndarray) -> np.ndarray:
    """Top-left 3x3 block of a camera -> XYZ matrix.

    Decoders may report a fourth camera channel (a second green); only the
    R, G, B columns and X, Y, Z rows are used.
    """

    arr = np.asarray(matrix, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] < 3 or arr.shape[1] < 3:
        raise ColorMatrixError(f"camera to XYZ matrix must be at least 3x3, got {arr.shape}")
    arr = arr[:3, :3]
    if not np.isfinite(arr).all():
        raise ColorMatrixError("camera to XYZ matrix contains non-finite values")
    return arr


def _primary_xy(cam_to_xyz: np.ndarray, camera_rgb: tuple[float, float, float], name: str) -> tuple[float, float]:
    xyz = cam_to_xyz @ np.array(camera_rgb, dtype=np.float64)
    try:
        x, y, _ = xyz_to_xyy(xyz)
    except ColorMatrixError as exc:
        raise type(exc)(f"{name} primary {camera_rgb}: {exc}") from exc
    return (x, y)


def derive_chromaticities(
    cam_to_xyz: np.ndarray,
    white_levels: tuple[float, float, float],
) -> Chromaticities:
    """Chromaticity primaries and white point of the camera's native RGB.

    Pushes saturated red, green, blue and white (each channel at its white
    level) through the camera -> XYZ matrix and projects the results to xy.
    """

    m = cam_to_xyz_3x3(cam_to_xyz)
    r_max, g_max, b_max = (float(v) for v in white_levels)
    return Chromaticities(
        red=_primary_xy(m, (r_max, 0.0, 0.0), "red"),
        green=_primary_xy(m, (0.0, g_max, 0.0), "green"),
        blue=_primary_xy(m, (0.0, 0.0, b_max), "blue"),
        white=_primary_xy(m, (r_max, g_max, b_max), "white"),
    )
