"""Cell value type: one styled character on the grid."""

from dataclasses import dataclass
from typing import Optional

# An RGB triple, or None for the terminal's default ("reset") color.
Color = Optional[tuple]
Point = tuple[int, int]
# Coordinates mapped to the cells they held before a mutation.
Patch = dict[Point, "Cell"]


@dataclass(frozen=True)
class Cell:
    fg: Color = None
    bg: Color = None
    glyph: str = " "

    def is_empty(self) -> bool:
        return self == EMPTY


# Transparency sentinel: unset colors and a blank glyph. Never occludes
# a lower layer and is never stored in a layer's data.
EMPTY = Cell()
