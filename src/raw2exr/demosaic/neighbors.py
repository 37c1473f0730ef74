from __future__ import annotations

from dataclasses import dataclass


# (name, dx, dy) in raster order: the row above, the same row, the row below.
COMPASS = (
    ("NW", -1, -1),
    ("N", 0, -1),
    ("NE", 1, -1),
    ("W", -1, 0),
    ("E", 1, 0),
    ("SW", -1, 1),
    ("S", 0, 1),
    ("SE", 1, 1),
)


@dataclass(frozen=True)
class Neighbor:
    direction: str
    x: int
    y: int


def neighbors(x: int, y: int, width: int, height: int) -> list[Neighbor]:
    """Existing orthogonal and diagonal neighbors of pixel ``(x, y)``.

    Positions outside ``[0, width) x [0, height)`` are dropped; nothing wraps,
    mirrors or pads. A corner pixel yields 3 neighbors, an interior pixel 8.
    """

    out: list[Neighbor] = []
    for name, dx, dy in COMPASS:
        nx = x + dx
        ny = y + dy
        if 0 <= nx < width and 0 <= ny < height:
            out.append(Neighbor(direction=name, x=nx, y=ny))
    return out
