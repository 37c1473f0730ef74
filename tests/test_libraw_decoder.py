from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest

from raw2exr.decode import DecodeError, UnsupportedFormatError, UnsupportedSampleFormatError
from raw2exr.decode import libraw_decoder
from raw2exr.decode.libraw_decoder import (
    LibRawDecoder,
    _camera_to_xyz,
    _cfa_from_raw_colors,
    _crop_margins,
    _integer_samples,
    _white_levels,
)


SRGB_TO_XYZ = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ],
    dtype=np.float64,
)


class _FakeRaw:
    raw_type = "flat"
    color_desc = b"RGBG"
    raw_pattern = np.array([[0, 1], [3, 2]], dtype=np.uint8)
    white_level = 4095
    camera_white_level_per_channel = [4000, 3900, 3800, 3900]
    sizes = SimpleNamespace(raw_width=6, raw_height=4, width=4, height=4, top_margin=0, left_margin=2)

    def __init__(self) -> None:
        self.raw_image = np.full((4, 6), 100, dtype=np.uint16)
        self.raw_colors = np.tile(self.raw_pattern, (2, 3))
        self.rgb_xyz_matrix = np.vstack([np.linalg.inv(SRGB_TO_XYZ), np.zeros((1, 3))]).astype(np.float32)

    def __enter__(self) -> "_FakeRaw":
        return self

    def __exit__(self, *exc) -> None:
        return None


def _fake_rawpy(imread) -> SimpleNamespace:
    return SimpleNamespace(imread=imread, RawType=SimpleNamespace(Flat="flat"))


def test_crop_margins_from_libraw_sizes() -> None:
    sizes = SimpleNamespace(raw_width=6080, raw_height=4012, width=6024, height=4008, top_margin=4, left_margin=56)
    assert _crop_margins(sizes) == (4, 0, 0, 56)


def test_crop_margins_with_right_and_bottom_border() -> None:
    sizes = SimpleNamespace(raw_width=100, raw_height=80, width=90, height=70, top_margin=3, left_margin=4)
    assert _crop_margins(sizes) == (3, 6, 7, 4)


def test_cfa_maps_second_green_to_green() -> None:
    cfa = _cfa_from_raw_colors(np.array([[0, 1], [3, 2]]), (2, 2), "RGBG")
    assert str(cfa) == "RGGB"


def test_cfa_uses_full_sensor_origin() -> None:
    raw_colors = np.tile(np.array([[3, 2], [0, 1]]), (3, 3))
    cfa = _cfa_from_raw_colors(raw_colors, (2, 2), "RGBG")
    assert str(cfa) == "GBRG"


def test_xtrans_is_unsupported() -> None:
    with pytest.raises(UnsupportedFormatError):
        _cfa_from_raw_colors(np.zeros((6, 6), dtype=np.uint8), (6, 6), "RGBG")


def test_non_rgb_descriptor_is_unsupported() -> None:
    with pytest.raises(UnsupportedFormatError):
        _cfa_from_raw_colors(np.array([[0, 1], [2, 3]]), (2, 2), "CMYG")


def test_white_levels_prefer_per_channel_values() -> None:
    assert _white_levels([16000, 15000, 14000, 15000], 16383, "RGBG") == (16000.0, 15000.0, 14000.0)


def test_white_levels_fall_back_to_global() -> None:
    assert _white_levels(None, 16383, "RGBG") == (16383.0, 16383.0, 16383.0)
    assert _white_levels([0, 0, 0, 0], 4095, "RGBG") == (4095.0, 4095.0, 4095.0)


def test_missing_white_level_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        _white_levels(None, 0, "RGBG")


def test_camera_to_xyz_inverts_libraw_matrix_and_drops_fourth_channel() -> None:
    xyz_to_cam = np.vstack([np.linalg.inv(SRGB_TO_XYZ), np.zeros((1, 3))])
    assert np.allclose(_camera_to_xyz(xyz_to_cam), SRGB_TO_XYZ, atol=1e-9)


def test_empty_matrix_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        _camera_to_xyz(np.zeros((4, 3)))


def test_float_samples_are_unsupported() -> None:
    with pytest.raises(UnsupportedSampleFormatError):
        _integer_samples(np.zeros((2, 2), dtype=np.float32))


def test_decode_builds_sensor_image(monkeypatch) -> None:
    monkeypatch.setattr(libraw_decoder, "rawpy", _fake_rawpy(lambda path: _FakeRaw()))

    sensor = LibRawDecoder().decode(Path("frame.cr2"))

    assert (sensor.width, sensor.height) == (6, 4)
    assert sensor.crops == (0, 0, 0, 2)
    assert sensor.white_levels == (4000.0, 3900.0, 3800.0)
    assert str(sensor.cfa) == "RGGB"
    assert np.allclose(sensor.cam_to_xyz, SRGB_TO_XYZ, atol=1e-5)
    assert sensor.samples.dtype == np.uint16


def test_decode_wraps_libraw_failures(monkeypatch) -> None:
    def broken(path: str):
        raise OSError("LibRaw: unsupported file format")

    monkeypatch.setattr(libraw_decoder, "rawpy", _fake_rawpy(broken))

    with pytest.raises(DecodeError, match="unsupported file format"):
        LibRawDecoder().decode(Path("missing.cr2"))


def test_decode_rejects_stacked_raw(monkeypatch) -> None:
    fake = _FakeRaw()
    fake.raw_type = "stack"
    monkeypatch.setattr(libraw_decoder, "rawpy", _fake_rawpy(lambda path: fake))

    with pytest.raises(UnsupportedFormatError):
        LibRawDecoder().decode(Path("linear.dng"))
