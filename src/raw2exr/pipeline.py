from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np

from raw2exr.color.primaries import Chromaticities, derive_chromaticities
from raw2exr.config import AppConfig
from raw2exr.decode.base import Decoder
from raw2exr.decode.types import SensorImage
from raw2exr.demosaic import ReconstructedGrid, demosaic
from raw2exr.geometry import DisplayWindow, display_window_from_crops
from raw2exr.write import write_linear_exr


logger = logging.getLogger(__name__)


@dataclass
class ConvertedImage:
    grid: ReconstructedGrid
    chromaticities: Chromaticities
    display_window: DisplayWindow


@dataclass
class ConversionResult:
    input_path: Path
    output_path: Path
    width: int
    height: int
    display_window: DisplayWindow
    chromaticities: Chromaticities


def _warn_nan_inf(grid: ReconstructedGrid, source: str) -> None:
    if not np.isfinite(grid.planes()).all():
        logger.warning("non-finite values in reconstructed image: %s", source)


def _warn_over_white(grid: ReconstructedGrid, source: str, threshold: float = 0.01) -> None:
    over = float(np.mean(grid.planes() > 1.0))
    if over > threshold:
        logger.warning("%.2f%% of channel values exceed the white level in %s", over * 100.0, source)


def convert_sensor_image(sensor: SensorImage, config: AppConfig | None = None) -> ConvertedImage:
    """Demosaic a sensor capture and derive its chromaticities and display window."""

    config = config or AppConfig()
    source = str(sensor.source_path) if sensor.source_path is not None else "<memory>"

    # Matrix problems are fatal; find them before the pixel scan.
    chromaticities = derive_chromaticities(sensor.cam_to_xyz, sensor.white_levels)
    logger.info(
        "chromaticities r=%s g=%s b=%s w=%s",
        chromaticities.red,
        chromaticities.green,
        chromaticities.blue,
        chromaticities.white,
    )

    grid = demosaic(sensor, workers=config.demosaic.workers, band_rows=config.demosaic.band_rows)
    _warn_nan_inf(grid, source)
    _warn_over_white(grid, source)

    window = display_window_from_crops(sensor.crops, sensor.width, sensor.height)
    logger.info("display window origin=%s size=%sx%s", window.min, window.width, window.height)

    return ConvertedImage(grid=grid, chromaticities=chromaticities, display_window=window)


def convert_file(
    input_path: Path,
    output_path: Path,
    config: AppConfig | None = None,
    decoder: Decoder | None = None,
) -> ConversionResult:
    config = config or AppConfig()
    if decoder is None:
        from raw2exr.decode.libraw_decoder import LibRawDecoder

        decoder = LibRawDecoder()

    sensor = decoder.decode(input_path)
    converted = convert_sensor_image(sensor, config)

    write_linear_exr(
        output_path,
        converted.grid,
        display_window=converted.display_window,
        chromaticities=converted.chromaticities,
        pixel_aspect_ratio=config.output.pixel_aspect_ratio,
        compression=config.output.compression,
        pixel_type=config.output.pixel_type,
        layer_name=config.output.layer_name,
    )

    return ConversionResult(
        input_path=input_path,
        output_path=output_path,
        width=sensor.width,
        height=sensor.height,
        display_window=converted.display_window,
        chromaticities=converted.chromaticities,
    )
