from __future__ import annotations

import numpy as np


class ColorMatrixError(RuntimeError):
    pass


class ZeroLuminanceError(ColorMatrixError):
    pass


def xyz_to_xyy(xyz: np.ndarray) -> tuple[float, float, float]:
    """CIE XYZ tristimulus -> ``(x, y, Y)``.

    Raises ZeroLuminanceError when X + Y + Z is zero, where chromaticity is
    undefined.
    """

    x_, y_, z_ = (float(v) for v in np.asarray(xyz, dtype=np.float64).reshape(3))
    total = x_ + y_ + z_
    if total == 0.0:
        raise ZeroLuminanceError(f"cannot derive chromaticity of XYZ ({x_}, {y_}, {z_}): components sum to zero")
    return (x_ / total, y_ / total, y_)
