from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging

import numpy as np

from raw2exr.decode.base import CfaContractError
from raw2exr.decode.types import SensorImage

from .cfa import CHANNELS, CfaOracle, checked_color
from .neighbors import COMPASS, neighbors
from .normalize import normalize_planes
from .types import ReconstructedGrid


logger = logging.getLogger(__name__)

_CHANNEL_NAMES = ("red", "green", "blue")


class DegenerateImageError(RuntimeError):
    pass


def _degenerate(x: int, y: int, channel: int) -> DegenerateImageError:
    return DegenerateImageError(
        f"pixel ({x}, {y}) has no neighbors with a {_CHANNEL_NAMES[channel]} filter; "
        "image is too small to demosaic"
    )


def demosaic_pixel(x: int, y: int, samples: np.ndarray, cfa: CfaOracle) -> tuple[float, float, float]:
    """Reconstruct the raw-scale ``(R, G, B)`` triple at pixel ``(x, y)``.

    The pixel's own filter color takes its own sample. Each other color is the
    mean of the neighbors carrying that color, however many exist.
    """

    height, width = samples.shape
    sums = [0.0, 0.0, 0.0]
    counts = [0, 0, 0]
    for n in neighbors(x, y, width, height):
        color = checked_color(cfa, n.y, n.x)
        sums[color] += float(samples[n.y, n.x])
        counts[color] += 1

    native = checked_color(cfa, y, x)
    out: list[float] = []
    for channel in CHANNELS:
        if channel == native:
            out.append(float(samples[y, x]))
        elif counts[channel] == 0:
            raise _degenerate(x, y, channel)
        else:
            out.append(sums[channel] / counts[channel])
    return (out[0], out[1], out[2])


def _color_map(cfa: CfaOracle, height: int, width: int) -> np.ndarray:
    color_map = getattr(cfa, "color_map", None)
    if color_map is not None:
        colors = np.asarray(color_map(height, width))
    else:
        colors = np.array(
            [[cfa.color_at(row, col) for col in range(width)] for row in range(height)],
            dtype=np.int64,
        )

    bad = ~np.isin(colors, CHANNELS)
    if bad.any():
        row, col = (int(v) for v in np.argwhere(bad)[0])
        raise CfaContractError(
            f"CFA reported filter index {colors[row, col]!r} at row={row} col={col}; expected 0, 1 or 2"
        )
    return colors.astype(np.uint8)


def _scan_band(samples: np.ndarray, colors: np.ndarray, y0: int, y1: int) -> np.ndarray:
    height, width = samples.shape
    rows = y1 - y0
    sums = np.zeros((3, rows, width), dtype=np.float64)
    counts = np.zeros((3, rows, width), dtype=np.int32)

    for _, dx, dy in COMPASS:
        ty0 = max(y0, -dy)
        ty1 = min(y1, height - dy)
        tx0 = max(0, -dx)
        tx1 = min(width, width - dx)
        if ty0 >= ty1 or tx0 >= tx1:
            continue
        values = samples[ty0 + dy:ty1 + dy, tx0 + dx:tx1 + dx]
        source_colors = colors[ty0 + dy:ty1 + dy, tx0 + dx:tx1 + dx]
        for channel in CHANNELS:
            mask = source_colors == channel
            sums[channel, ty0 - y0:ty1 - y0, tx0:tx1] += np.where(mask, values, 0.0)
            counts[channel, ty0 - y0:ty1 - y0, tx0:tx1] += mask

    native = colors[y0:y1]
    own = samples[y0:y1]
    out = np.empty((3, rows, width), dtype=np.float64)
    for channel in CHANNELS:
        is_native = native == channel
        missing = ~is_native & (counts[channel] == 0)
        if missing.any():
            row, col = (int(v) for v in np.argwhere(missing)[0])
            raise _degenerate(col, y0 + row, channel)
        with np.errstate(divide="ignore", invalid="ignore"):
            mean = sums[channel] / counts[channel]
        out[channel] = np.where(is_native, own, mean)
    return out


def _bands(height: int, band_rows: int) -> list[tuple[int, int]]:
    step = max(1, int(band_rows))
    return [(y0, min(height, y0 + step)) for y0 in range(0, height, step)]


def demosaic(sensor: SensorImage, workers: int = 1, band_rows: int = 256) -> ReconstructedGrid:
    """Demosaic and normalize every pixel of ``sensor`` in one raster scan.

    Produces the same values as :func:`demosaic_pixel` followed by
    normalization, computed a band of rows at a time. With ``workers > 1`` the
    bands run on a thread pool; each band only writes its own output rows.
    """

    samples = np.asarray(sensor.samples, dtype=np.float64)
    if samples.shape != (sensor.height, sensor.width):
        raise ValueError(
            f"sample array shape {samples.shape} does not match {sensor.width}x{sensor.height} sensor"
        )

    colors = _color_map(sensor.cfa, sensor.height, sensor.width)
    out = np.empty((3, sensor.height, sensor.width), dtype=np.float32)

    def run(band: tuple[int, int]) -> None:
        y0, y1 = band
        out[:, y0:y1] = normalize_planes(_scan_band(samples, colors, y0, y1), sensor.white_levels)

    bands = _bands(sensor.height, band_rows)
    if workers <= 1 or len(bands) == 1:
        for band in bands:
            run(band)
    else:
        logger.debug("demosaicing %s bands on %s workers", len(bands), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises the first band failure
            list(pool.map(run, bands))

    return ReconstructedGrid(red=out[0], green=out[1], blue=out[2])
