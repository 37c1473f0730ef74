from __future__ import annotations

from typing import Callable

import numpy as np
import pytest

from raw2exr.decode.types import SensorImage
from raw2exr.demosaic.cfa import CfaPattern


def build_sensor(
    samples: np.ndarray,
    pattern: str = "RGGB",
    white_levels: tuple[float, float, float] = (255.0, 255.0, 255.0),
    crops: tuple[int, int, int, int] = (0, 0, 0, 0),
    cam_to_xyz: np.ndarray | None = None,
) -> SensorImage:
    data = np.asarray(samples, dtype=np.uint16)
    height, width = data.shape
    return SensorImage(
        width=width,
        height=height,
        samples=data,
        white_levels=white_levels,
        crops=crops,
        cam_to_xyz=np.eye(3) if cam_to_xyz is None else np.asarray(cam_to_xyz, dtype=np.float64),
        cfa=CfaPattern.from_string(pattern),
    )


@pytest.fixture
def make_sensor() -> Callable[..., SensorImage]:
    return build_sensor
