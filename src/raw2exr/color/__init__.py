from .chromaticity import ColorMatrixError, ZeroLuminanceError, xyz_to_xyy
from .primaries import EQUAL_ENERGY_WHITE, Chromaticities, cam_to_xyz_3x3, derive_chromaticities

__all__ = [
    "ColorMatrixError",
    "ZeroLuminanceError",
    "xyz_to_xyy",
    "EQUAL_ENERGY_WHITE",
    "Chromaticities",
    "cam_to_xyz_3x3",
    "derive_chromaticities",
]
