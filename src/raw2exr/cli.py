from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from raw2exr.config import AppConfig, load_config


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Route raw2exr messages to stderr and, if configured, a log file.

    The configured level applies to the ``raw2exr`` loggers only; other
    libraries stay at WARNING so a DEBUG run shows just the conversion steps.
    """

    resolved_level = getattr(logging, str(level).upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, handlers=handlers, force=True)
    logging.getLogger("raw2exr").setLevel(resolved_level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="raw2exr",
        description="Convert a camera RAW file to a linear, scene-referred OpenEXR image",
    )
    parser.add_argument("raw", help="Path to camera raw file")
    parser.add_argument("exr", help="Path to output OpenEXR file")
    parser.add_argument("--config", default=None, help="Optional YAML config overriding output and demosaic settings")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        from raw2exr.pipeline import convert_file

        config = load_config(args.config) if args.config else AppConfig()
        configure_logging(config.log_level, config.log_file)

        input_path = Path(args.raw).expanduser().resolve()
        output_path = Path(args.exr).expanduser().resolve()
        result = convert_file(input_path, output_path, config)
        print(str(result.output_path))
        return 0
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
