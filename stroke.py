"""Stroke interpolation between sparse pointer samples."""

import math

from cell import Point


def connect(previous: Point | None, current: Point) -> list[Point]:
    """Return the grid points from just after `previous` up to `current`.

    Steps one unit at a time along the axis with the larger delta and
    rounds the other axis (half up), so consecutive drag samples always
    join into an unbroken line. `previous` itself is not included: it was
    painted by the event that produced it. Points with a negative
    coordinate are dropped.
    """
    if previous is None or previous == current:
        return [current]

    x0, y0 = previous
    x1, y1 = current
    dx, dy = x1 - x0, y1 - y0
    x_major = abs(dx) > abs(dy)

    major = max(abs(dx), abs(dy))
    minor = min(abs(dx), abs(dy))
    slope = minor / major if major else 0.0
    x_step = 1 if dx >= 0 else -1
    y_step = 1 if dy >= 0 else -1

    points = []
    for i in range(1, major + 1):
        offset = math.floor(i * slope + 0.5)
        if x_major:
            x, y = x0 + i * x_step, y0 + offset * y_step
        else:
            x, y = x0 + offset * x_step, y0 + i * y_step
        if x >= 0 and y >= 0:
            points.append((x, y))
    return points
