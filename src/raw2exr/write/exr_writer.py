from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile

import numpy as np

from raw2exr.color.primaries import Chromaticities
from raw2exr.demosaic.types import ReconstructedGrid
from raw2exr.geometry import DisplayWindow


try:
    import OpenEXR
except Exception:  # pragma: no cover - reported by write_linear_exr()
    OpenEXR = None


logger = logging.getLogger(__name__)

DEFAULT_LAYER_NAME = "RAW Image"


class ExrWriteError(RuntimeError):
    pass


def _compression(name: str):
    constants = {
        "none": OpenEXR.NO_COMPRESSION,
        "rle": OpenEXR.RLE_COMPRESSION,
        "zips": OpenEXR.ZIPS_COMPRESSION,
        "zip": OpenEXR.ZIP_COMPRESSION,
        "piz": OpenEXR.PIZ_COMPRESSION,
    }
    if name not in constants:
        raise ExrWriteError(f"unsupported EXR compression {name!r}")
    return constants[name]


def _pixel_dtype(name: str) -> type:
    if name == "float":
        return np.float32
    if name == "half":
        return np.float16
    raise ExrWriteError(f"unsupported EXR pixel type {name!r}")


def _box(x_min: int, y_min: int, x_max: int, y_max: int) -> tuple[np.ndarray, np.ndarray]:
    return (np.array([x_min, y_min], dtype=np.int32), np.array([x_max, y_max], dtype=np.int32))


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def build_header(
    display_window: DisplayWindow,
    chromaticities: Chromaticities,
    pixel_aspect_ratio: float,
    compression: str,
    layer_name: str = DEFAULT_LAYER_NAME,
) -> dict:
    """Header for a single-part scanline file; the data window follows the pixel array."""

    return {
        "type": OpenEXR.scanlineimage,
        "name": layer_name,
        "compression": _compression(compression),
        "displayWindow": _box(*display_window.min, *display_window.max),
        "pixelAspectRatio": float(pixel_aspect_ratio),
        "chromaticities": tuple(float(v) for xy in chromaticities.as_tuple() for v in xy),
    }


def write_linear_exr(
    path: Path,
    grid: ReconstructedGrid,
    display_window: DisplayWindow,
    chromaticities: Chromaticities,
    pixel_aspect_ratio: float = 1.0,
    compression: str = "rle",
    pixel_type: str = "float",
    layer_name: str = DEFAULT_LAYER_NAME,
) -> None:
    """Write linear RGB planes to a single-part scanline OpenEXR file.

    The data window covers the whole sensor; the display window marks the
    visible crop. The file is written next to ``path`` and renamed into place,
    so a failed write leaves no output behind.
    """

    if OpenEXR is None:
        raise ExrWriteError("OpenEXR is required for EXR output: pip install OpenEXR")

    header = build_header(display_window, chromaticities, pixel_aspect_ratio, compression, layer_name)
    rgb = np.ascontiguousarray(np.stack([grid.red, grid.green, grid.blue], axis=-1), dtype=_pixel_dtype(pixel_type))

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".exr.tmp", dir=str(path.parent))
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        with OpenEXR.File(header, {"RGB": rgb}) as exr:
            exr.write(str(tmp_path))
        # mkstemp creates 0600; give the result the mode a plain open() would.
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except Exception as exc:
        tmp_path.unlink(missing_ok=True)
        raise ExrWriteError(f"failed to write {path}: {exc}") from exc

    logger.info("wrote %s (%sx%s, %s, %s)", path, grid.width, grid.height, pixel_type, compression)
