from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


# OpenEXR codecs that reproduce pixel values exactly.
LOSSLESS_COMPRESSIONS = ("none", "rle", "zips", "zip", "piz")
PIXEL_TYPES = ("float", "half")


@dataclass
class DemosaicConfig:
    workers: int = 1
    band_rows: int = 256


@dataclass
class OutputConfig:
    compression: str = "rle"
    pixel_type: str = "float"
    pixel_aspect_ratio: float = 1.0
    layer_name: str = "RAW Image"


@dataclass
class AppConfig:
    demosaic: DemosaicConfig = field(default_factory=DemosaicConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
    log_file: Path | None = None


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _choice(value: Any, allowed: tuple[str, ...], key: str) -> str:
    text = str(value).strip().lower()
    if text not in allowed:
        raise ValueError(f"{key} must be one of {', '.join(allowed)}; got {value!r}")
    return text


def validate_config(config: AppConfig) -> AppConfig:
    if config.demosaic.workers < 1:
        raise ValueError(f"demosaic.workers must be >= 1; got {config.demosaic.workers}")
    if config.demosaic.band_rows < 1:
        raise ValueError(f"demosaic.band_rows must be >= 1; got {config.demosaic.band_rows}")
    config.output.compression = _choice(config.output.compression, LOSSLESS_COMPRESSIONS, "output.compression")
    config.output.pixel_type = _choice(config.output.pixel_type, PIXEL_TYPES, "output.pixel_type")
    if not config.output.pixel_aspect_ratio > 0.0:
        raise ValueError(f"output.pixel_aspect_ratio must be positive; got {config.output.pixel_aspect_ratio}")
    return config


def load_config(path: str | Path) -> AppConfig:
    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping: {cfg_path}")

    base = cfg_path.parent
    demosaic_raw = raw.get("demosaic", {}) or {}
    output_raw = raw.get("output", {}) or {}

    app = AppConfig(
        demosaic=DemosaicConfig(
            workers=int(demosaic_raw.get("workers", 1)),
            band_rows=int(demosaic_raw.get("band_rows", 256)),
        ),
        output=OutputConfig(
            compression=str(output_raw.get("compression", "rle")),
            pixel_type=str(output_raw.get("pixel_type", "float")),
            pixel_aspect_ratio=float(output_raw.get("pixel_aspect_ratio", 1.0)),
            layer_name=str(output_raw.get("layer_name", "RAW Image")),
        ),
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )
    return validate_config(app)
