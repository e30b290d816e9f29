"""Brush geometry: which grid cells each tool touches, and painting them."""

import enum
from typing import Iterator

import numpy as np

from cell import Cell, Patch, Point


class Tool(enum.Enum):
    ERASER = "eraser"
    SQUARE = "square"
    BOX = "box"
    DISK = "disk"
    CIRCLE = "circle"
    POINT = "point"
    PLUS = "plus"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @classmethod
    def parse(cls, name) -> "Tool":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown tool: {name!r} (expected one of {valid})") from None


_ICONS = {
    Tool.ERASER: "×",
    Tool.SQUARE: "■",
    Tool.BOX: "□",
    Tool.DISK: "●",
    Tool.CIRCLE: "○",
    Tool.POINT: "∙",
    Tool.PLUS: "+",
    Tool.VERTICAL: "|",
    Tool.HORIZONTAL: "─",
}


def brush_rect(x: int, y: int, size: int) -> tuple[int, int, int, int]:
    """Return (left, right, top, bottom) of the size x size block around (x, y).

    right/bottom are exclusive. Odd sizes center exactly; even sizes put
    the extra column/row on the upper side.
    """
    offset = (size - 1) // 2
    left, top = x - offset, y - offset
    return left, left + size, top, top + size


def _block(x: int, y: int, size: int, outline: bool = False) -> list[Point]:
    left, right, top, bottom = brush_rect(x, y, size)
    ys, xs = np.mgrid[top:bottom, left:right]
    if outline:
        mask = (xs == left) | (xs == right - 1) | (ys == top) | (ys == bottom - 1)
        xs, ys = xs[mask], ys[mask]
    return list(zip(xs.ravel().tolist(), ys.ravel().tolist()))


def _disk(x: int, y: int, radius: int) -> list[Point]:
    dy, dx = np.mgrid[-radius:radius + 1, -radius:radius + 1]
    mask = dx * dx + dy * dy <= radius * radius
    return list(zip((dx[mask] + x).tolist(), (dy[mask] + y).tolist()))


def _circle(x: int, y: int, radius: int) -> list[Point]:
    """Midpoint circle: the ring of cells at `radius`, 8-way symmetric."""
    points = [(x + radius, y), (x - radius, y), (x, y + radius), (x, y - radius)]
    rx, ry = radius, 0
    p = 1 - rx
    while rx > ry:
        ry += 1
        if p <= 0:
            p += 2 * ry + 1
        else:
            rx -= 1
            p += 2 * ry - 2 * rx + 1
        if rx < ry:
            break
        points += [(x + rx, y + ry), (x - rx, y + ry), (x + rx, y - ry), (x - rx, y - ry)]
        if rx != ry:
            points += [(x + ry, y + rx), (x - ry, y + rx), (x + ry, y - rx), (x - ry, y - rx)]
    return points


def _arms(x: int, y: int, size: int, along_x: bool, along_y: bool) -> list[Point]:
    points = [(x, y)]
    for sign in (-1, 1):
        for i in range(1, size + 1):
            if along_x:
                points.append((x + sign * i, y))
            if along_y:
                points.append((x, y + sign * i))
    return points


def footprint(tool: Tool, center: Point, size: int) -> Iterator[Point]:
    """Yield every grid coordinate `tool` touches at `center`.

    A coordinate may be yielded more than once when the shape overlaps
    itself. Negative coordinates are skipped.
    """
    x, y = center
    size = max(1, int(size))

    if tool is Tool.POINT:
        points = [(x, y)]
    elif tool is Tool.SQUARE or tool is Tool.ERASER:
        points = _block(x, y, size)
    elif tool is Tool.BOX:
        points = _block(x, y, size, outline=True)
    elif tool is Tool.DISK:
        points = _disk(x, y, size)
    elif tool is Tool.CIRCLE:
        points = _circle(x, y, size)
    elif tool is Tool.PLUS:
        points = _arms(x, y, size, along_x=True, along_y=True)
    elif tool is Tool.VERTICAL:
        points = _arms(x, y, size, along_x=False, along_y=True)
    elif tool is Tool.HORIZONTAL:
        points = _arms(x, y, size, along_x=True, along_y=False)
    else:
        raise ValueError(f"Unknown tool: {tool!r}")

    for px, py in points:
        if px >= 0 and py >= 0:
            yield (px, py)


def paint(tool: Tool, center: Point, size: int, layer, cell: Cell) -> Patch:
    """Stamp `tool` onto `layer` and return the cells it overwrote.

    The eraser clears cells; every other tool writes `cell`. When the
    footprint revisits a coordinate only the first pre-image is kept.
    """
    patch: Patch = {}
    for point in footprint(tool, center, size):
        if tool is Tool.ERASER:
            old = layer.erase(point)
        else:
            old = layer.put(point, cell)
        patch.setdefault(point, old)
    return patch
