from __future__ import annotations

import itertools

from raw2exr.demosaic.neighbors import neighbors


def test_corner_has_three_neighbors() -> None:
    found = neighbors(0, 0, 4, 4)
    assert [n.direction for n in found] == ["E", "S", "SE"]
    assert [(n.x, n.y) for n in found] == [(1, 0), (0, 1), (1, 1)]


def test_interior_has_eight_neighbors() -> None:
    found = neighbors(2, 2, 5, 5)
    assert len(found) == 8
    assert {(n.x, n.y) for n in found} == {
        (1, 1), (2, 1), (3, 1),
        (1, 2), (3, 2),
        (1, 3), (2, 3), (3, 3),
    }


def test_edge_has_five_neighbors() -> None:
    found = neighbors(2, 0, 5, 5)
    assert {n.direction for n in found} == {"W", "E", "SW", "S", "SE"}


def test_all_coordinates_stay_in_bounds_and_unique() -> None:
    width, height = 5, 4
    for x, y in itertools.product(range(width), range(height)):
        found = neighbors(x, y, width, height)
        coords = [(n.x, n.y) for n in found]
        assert 3 <= len(found) <= 8
        assert len(set(coords)) == len(coords)
        assert (x, y) not in coords
        assert all(0 <= cx < width and 0 <= cy < height for cx, cy in coords)


def test_no_wraparound_on_opposite_corner() -> None:
    found = neighbors(3, 3, 4, 4)
    assert {(n.x, n.y) for n in found} == {(2, 2), (3, 2), (2, 3)}
