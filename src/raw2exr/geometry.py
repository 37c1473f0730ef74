from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DisplayWindow:
    x: int
    y: int
    width: int
    height: int

    @property
    def min(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def max(self) -> tuple[int, int]:
        # Inclusive corner, as OpenEXR boxes are stored.
        return (self.x + self.width - 1, self.y + self.height - 1)


def display_window_from_crops(crops: tuple[int, int, int, int], width: int, height: int) -> DisplayWindow:
    """Display window for a sensor of ``width`` x ``height`` after trimming crop margins.

    ``crops`` is ``(top, right, bottom, left)``. Margins larger than the sensor
    are not checked and produce a non-positive size.
    """

    top, right, bottom, left = (int(v) for v in crops)
    return DisplayWindow(x=left, y=top, width=width - left - right, height=height - top - bottom)
