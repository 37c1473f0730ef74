from .cfa import BLUE, GREEN, RED, CfaOracle, CfaPattern
from .neighbor_average import DegenerateImageError, demosaic, demosaic_pixel
from .neighbors import Neighbor, neighbors
from .normalize import normalize, normalize_planes
from .types import ReconstructedGrid

__all__ = [
    "BLUE",
    "GREEN",
    "RED",
    "CfaOracle",
    "CfaPattern",
    "DegenerateImageError",
    "demosaic",
    "demosaic_pixel",
    "Neighbor",
    "neighbors",
    "normalize",
    "normalize_planes",
    "ReconstructedGrid",
]
