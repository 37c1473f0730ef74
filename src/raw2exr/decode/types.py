from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from raw2exr.demosaic.cfa import CfaPattern


@dataclass(frozen=True)
class SensorImage:
    """Undemosaiced sensor capture as reported by a RAW decoder.

    ``samples`` holds one unsigned integer per photosite in row-major order,
    shape ``(height, width)``. ``crops`` is ``(top, right, bottom, left)``.
    ``cam_to_xyz`` maps camera RGB to CIE XYZ.
    """

    width: int
    height: int
    samples: np.ndarray
    white_levels: tuple[float, float, float]
    crops: tuple[int, int, int, int]
    cam_to_xyz: np.ndarray
    cfa: CfaPattern
    source_path: Path | None = None
