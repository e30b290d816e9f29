"""Tests for tool footprints and stamping onto a layer."""

from __future__ import annotations

import pytest

import shapes
from cell import EMPTY, Cell
from layers import Layer
from shapes import Tool, footprint

INK = Cell((255, 0, 0), None, "#")


def cells(tool: Tool, center, size) -> set:
    return set(footprint(tool, center, size))


def test_point_is_the_center() -> None:
    assert list(footprint(Tool.POINT, (5, 5), 4)) == [(5, 5)]


def test_square_odd_size_is_centered() -> None:
    expected = {(x, y) for x in range(4, 7) for y in range(4, 7)}
    assert cells(Tool.SQUARE, (5, 5), 3) == expected


def test_square_even_size_extends_towards_upper_bound() -> None:
    assert cells(Tool.SQUARE, (5, 5), 2) == {(5, 5), (6, 5), (5, 6), (6, 6)}


def test_box_is_square_border_only() -> None:
    ring = cells(Tool.BOX, (5, 5), 3)
    assert len(ring) == 8
    assert (5, 5) not in ring

    big = cells(Tool.BOX, (5, 5), 4)
    square = cells(Tool.SQUARE, (5, 5), 4)
    assert big <= square
    assert len(big) == 12
    assert square - big == {(5, 5), (6, 5), (5, 6), (6, 6)}


def test_disk_uses_size_as_radius() -> None:
    assert cells(Tool.DISK, (5, 5), 1) == {(5, 5), (4, 5), (6, 5), (5, 4), (5, 6)}
    disk = cells(Tool.DISK, (10, 10), 2)
    assert len(disk) == 13
    assert all((x - 10) ** 2 + (y - 10) ** 2 <= 4 for x, y in disk)


def test_circle_is_a_ring() -> None:
    ring = cells(Tool.CIRCLE, (5, 5), 1)
    assert ring == {(x, y) for x in (4, 5, 6) for y in (4, 5, 6)} - {(5, 5)}

    ring = cells(Tool.CIRCLE, (10, 10), 2)
    assert len(ring) == 12
    assert (10, 10) not in ring
    assert {(12, 10), (8, 10), (10, 12), (10, 8)} <= ring


def test_circle_is_eight_way_symmetric() -> None:
    offsets = {(x - 20, y - 20) for x, y in cells(Tool.CIRCLE, (20, 20), 6)}
    for dx, dy in offsets:
        assert {(dy, dx), (-dx, dy), (dx, -dy)} <= offsets


def test_plus_has_four_arms_not_a_diamond() -> None:
    plus = cells(Tool.PLUS, (5, 5), 2)
    assert plus == {(5, 5), (3, 5), (4, 5), (6, 5), (7, 5), (5, 3), (5, 4), (5, 6), (5, 7)}
    assert (6, 6) not in plus


def test_plus_size_one_reaches_one_cell_each_way() -> None:
    assert len(cells(Tool.PLUS, (5, 5), 1)) == 5


def test_vertical_and_horizontal_use_one_axis() -> None:
    assert cells(Tool.VERTICAL, (5, 5), 2) == {(5, y) for y in range(3, 8)}
    assert cells(Tool.HORIZONTAL, (5, 5), 2) == {(x, 5) for x in range(3, 8)}


@pytest.mark.parametrize("tool", list(Tool))
def test_negative_coordinates_are_skipped(tool: Tool) -> None:
    for x, y in footprint(tool, (0, 0), 3):
        assert x >= 0 and y >= 0


def test_square_near_origin_is_clipped_not_clamped() -> None:
    assert cells(Tool.SQUARE, (0, 0), 3) == {(0, 0), (1, 0), (0, 1), (1, 1)}


def test_paint_returns_pre_image_of_each_cell() -> None:
    layer = Layer(1)
    old = Cell(None, None, "o")
    layer.put((5, 5), old)

    patch = shapes.paint(Tool.SQUARE, (5, 5), 3, layer, INK)

    assert len(patch) == 9
    assert patch[(5, 5)] == old
    assert patch[(4, 4)] == EMPTY
    assert all(layer.get(p) == INK for p in patch)


def test_paint_keeps_first_pre_image_when_footprint_repeats(monkeypatch) -> None:
    layer = Layer(1)
    old = Cell(None, None, "o")
    layer.put((2, 2), old)
    monkeypatch.setattr(shapes, "footprint", lambda tool, center, size: iter([(2, 2), (2, 2)]))

    patch = shapes.paint(Tool.BOX, (2, 2), 1, layer, INK)

    assert patch == {(2, 2): old}


def test_eraser_clears_square_footprint() -> None:
    layer = Layer(1)
    for x in range(3):
        for y in range(3):
            layer.put((x, y), INK)

    patch = shapes.paint(Tool.ERASER, (1, 1), 3, layer, INK)

    assert layer.data == {}
    assert patch == {(x, y): INK for x in range(3) for y in range(3)}


def test_tool_parse_accepts_names_and_rejects_unknown() -> None:
    assert Tool.parse("Disk") is Tool.DISK
    assert Tool.parse(Tool.BOX) is Tool.BOX
    with pytest.raises(ValueError):
        Tool.parse("spray")
