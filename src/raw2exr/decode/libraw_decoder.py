from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from raw2exr.demosaic.cfa import BLUE, GREEN, RED, CfaPattern

from .base import DecodeError, MissingDependencyError, UnsupportedFormatError, UnsupportedSampleFormatError
from .types import SensorImage


try:
    import rawpy  # type: ignore
except Exception:  # pragma: no cover - reported by LibRawDecoder()
    rawpy = None


logger = logging.getLogger(__name__)

_DESC_TO_CHANNEL = {"R": RED, "G": GREEN, "B": BLUE}


def _color_desc(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    return str(value or "").strip("\x00 ")


def _crop_margins(sizes: Any) -> tuple[int, int, int, int]:
    """(top, right, bottom, left) margins between the full sensor and its visible area."""

    top = int(sizes.top_margin)
    left = int(sizes.left_margin)
    right = max(0, int(sizes.raw_width) - int(sizes.width) - left)
    bottom = max(0, int(sizes.raw_height) - int(sizes.height) - top)
    return (top, right, bottom, left)


def _cfa_from_raw_colors(raw_colors: np.ndarray, pattern_shape: tuple[int, ...], color_desc: str) -> CfaPattern:
    if len(pattern_shape) != 2 or tuple(pattern_shape) != (2, 2):
        raise UnsupportedFormatError(
            f"only 2x2 Bayer color filter arrays are supported; sensor reports a {pattern_shape} pattern"
        )

    tile = np.asarray(raw_colors)[:2, :2]
    channels = np.empty(tile.shape, dtype=np.uint8)
    for (row, col), index in np.ndenumerate(tile):
        letter = color_desc[int(index)] if int(index) < len(color_desc) else "?"
        if letter not in _DESC_TO_CHANNEL:
            raise UnsupportedFormatError(f"unsupported filter color {letter!r} in CFA descriptor {color_desc!r}")
        channels[row, col] = _DESC_TO_CHANNEL[letter]

    cfa = CfaPattern(channels)
    if not cfa.is_bayer:
        raise UnsupportedFormatError(f"CFA {cfa} does not contain red, green and blue photosites")
    return cfa


def _white_levels(per_channel: Any, white_level: Any, color_desc: str) -> tuple[float, float, float]:
    fallback = float(white_level) if white_level else None
    levels: list[float] = []
    for letter in "RGB":
        value = None
        if per_channel is not None and letter in color_desc:
            idx = color_desc.index(letter)
            entries = list(per_channel)
            if idx < len(entries) and entries[idx]:
                value = float(entries[idx])
        if value is None:
            value = fallback
        if value is None or value <= 0.0:
            raise DecodeError(f"sensor reports no usable white level for {letter}")
        levels.append(value)
    return (levels[0], levels[1], levels[2])


def _camera_to_xyz(rgb_xyz_matrix: Any) -> np.ndarray:
    """Camera RGB -> XYZ from LibRaw's XYZ -> camera matrix (one row per camera channel)."""

    if rgb_xyz_matrix is None:
        raise DecodeError("sensor reports no XYZ to camera matrix")
    xyz_to_cam = np.asarray(rgb_xyz_matrix, dtype=np.float64)
    if xyz_to_cam.ndim != 2 or xyz_to_cam.shape[1] != 3 or xyz_to_cam.shape[0] < 3:
        raise DecodeError(f"unexpected XYZ to camera matrix shape {xyz_to_cam.shape}")
    if np.allclose(xyz_to_cam, 0.0):
        raise DecodeError("XYZ to camera matrix is empty; camera is not in LibRaw's color tables")

    # 3x4 when LibRaw reports a second green row; its column is dropped.
    cam_to_xyz = np.linalg.pinv(xyz_to_cam)
    return cam_to_xyz[:3, :3].copy()


def _integer_samples(raw_image: Any) -> np.ndarray:
    if raw_image is None:
        raise UnsupportedSampleFormatError("sensor data is not a single-plane mosaic")
    samples = np.asarray(raw_image)
    if samples.ndim != 2:
        raise UnsupportedSampleFormatError(f"expected a single-plane mosaic, got shape {samples.shape}")
    if not np.issubdtype(samples.dtype, np.integer):
        raise UnsupportedSampleFormatError(f"sensor samples stored as {samples.dtype}; only integer data is supported")
    return samples.copy()


class LibRawDecoder:
    """RAW decoder using rawpy (LibRaw backend). Returns the undemosaiced mosaic."""

    def __init__(self) -> None:
        if rawpy is None:
            raise MissingDependencyError("rawpy is required for RAW decode: pip install rawpy")

    def decode(self, path: Path) -> SensorImage:
        try:
            with rawpy.imread(str(path)) as raw:
                if raw.raw_type != rawpy.RawType.Flat:
                    raise UnsupportedFormatError(f"{path} stores demosaiced or multi-plane data ({raw.raw_type})")

                samples = _integer_samples(raw.raw_image)
                height, width = samples.shape
                color_desc = _color_desc(raw.color_desc)
                pattern = raw.raw_pattern
                if pattern is None:
                    raise UnsupportedFormatError(f"{path} has no color filter array pattern")

                sensor = SensorImage(
                    width=int(width),
                    height=int(height),
                    samples=samples,
                    white_levels=_white_levels(raw.camera_white_level_per_channel, raw.white_level, color_desc),
                    crops=_crop_margins(raw.sizes),
                    cam_to_xyz=_camera_to_xyz(raw.rgb_xyz_matrix),
                    cfa=_cfa_from_raw_colors(raw.raw_colors, np.shape(pattern), color_desc),
                    source_path=path,
                )
        except (MissingDependencyError, DecodeError):
            raise
        except Exception as exc:
            raise DecodeError(f"decode failed for {path}: {exc}") from exc

        logger.info(
            "decoded %s: %sx%s cfa=%s white=%s crops=%s",
            path.name,
            sensor.width,
            sensor.height,
            sensor.cfa,
            sensor.white_levels,
            sensor.crops,
        )
        return sensor
