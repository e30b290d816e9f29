"""Drawing engine: layered glyph canvas with brush tools and undo/redo."""

import enum
import logging
import random
from dataclasses import dataclass

import numpy as np

import shapes
from cell import Cell, Color, Patch, Point
from colors import Palette, parse_color
from history import Draw, History, HistoryAction
from layers import Layer, LayerStack
from shapes import Tool
from stroke import connect

logger = logging.getLogger(__name__)

BRUSH_MIN = 1
BRUSH_MAX = 21
DEFAULT_GLYPH = "░"


@dataclass
class Brush:
    fg: Color = (0, 0, 0)
    bg: Color = (255, 255, 255)
    size: int = 1
    glyph: str = DEFAULT_GLYPH
    tool: Tool = Tool.POINT

    def as_cell(self) -> Cell:
        return Cell(self.fg, self.bg, self.glyph)

    def up(self, amount: int = 1):
        self.size = min(self.size + amount, BRUSH_MAX)

    def down(self, amount: int = 1):
        self.size = max(self.size - amount, BRUSH_MIN)


class PointerMode(enum.Enum):
    NORMAL = "normal"
    CLICK = "click"
    DRAG = "drag"


class Canvas:
    """Owns the layer stack, the history and the brush.

    Every user edit goes through here so history bookkeeping and render
    invalidation happen before the call returns.
    """

    def __init__(self, width: int, height: int, rng: random.Random | None = None):
        self.width = width
        self.height = height
        self._rng = rng
        self.brush = Brush()
        self.palette = Palette()
        self.layers = LayerStack(rng=rng)
        self.history = History()
        self.pointer_mode = PointerMode.NORMAL
        self._stroke_layer_id: int | None = None
        self._press_draw: Draw | None = None

    def execute(self, cmd: dict):
        action = cmd.get("action")
        method = getattr(self, f"_do_{action}", None)
        if method is None:
            raise ValueError(f"Unknown action: {action}")
        return method(cmd)

    # --- Painting ---

    def paint(self, x: int, y: int, target: Layer | None = None) -> Patch:
        """Apply the brush along the line from the last pointer position.

        Returns the pre-image of every touched cell; a coordinate painted
        more than once keeps the value from before the first touch.
        """
        if target is None:
            target = self.layers.current_layer_mut()
        cell = self.brush.as_cell()
        patch: Patch = {}
        for point in connect(self.layers.last_pointer, (x, y)):
            step = shapes.paint(self.brush.tool, point, self.brush.size, target, cell)
            for pos, old in step.items():
                patch.setdefault(pos, old)
        self.layers.last_pointer = (x, y)
        self.history.forget_redo()
        return patch

    def on_press(self, x: int, y: int) -> Patch:
        if self.pointer_mode is not PointerMode.NORMAL:
            # The previous press was never released: drop its anchor.
            self.layers.last_pointer = None
            if self.history.partial is not None:
                dropped = self.history.abandon_stroke()
                logger.warning("Unfinished stroke abandoned, %d cells left out of history",
                               len(dropped))
        self.pointer_mode = PointerMode.CLICK
        self._stroke_layer_id = self.layers.current_layer_id()
        patch = self.paint(x, y)
        self._press_draw = None
        if patch:
            self._press_draw = self.history.record_draw(self._stroke_layer_id, patch)
        return patch

    def on_drag(self, x: int, y: int) -> Patch:
        if self.pointer_mode is PointerMode.CLICK and self._press_draw is not None:
            self.history.absorb_last_draw(self._press_draw)
        self._press_draw = None
        if self._stroke_layer_id is None:
            self._stroke_layer_id = self.layers.current_layer_id()
        self.pointer_mode = PointerMode.DRAG
        patch = self.paint(x, y, self.layers.get_layer_mut(self._stroke_layer_id))
        self.history.begin_or_continue_stroke(patch)
        return patch

    def on_release(self, keep_anchor: bool = False):
        """End the pointer interaction.

        With `keep_anchor` the last position survives, so the next press
        draws a straight line from here.
        """
        if not keep_anchor:
            self.layers.last_pointer = None
        if self.pointer_mode is PointerMode.DRAG:
            self.history.end_stroke(self._stroke_layer_id)
        self.pointer_mode = PointerMode.NORMAL
        self._stroke_layer_id = None
        self._press_draw = None

    def _finish_pointer(self):
        """Release a press or drag still in progress before another edit."""
        if self.pointer_mode is not PointerMode.NORMAL:
            logger.debug("Closing open %s before next command", self.pointer_mode.value)
            self.on_release()

    def paste_text(self, x: int, y: int, text: str) -> Patch:
        """Write `text` onto the active layer, one character per cell."""
        self._finish_pointer()
        target = self.layers.current_layer_mut()
        patch: Patch = {}
        for dy, row in enumerate(text.split("\n")):
            for dx, char in enumerate(row):
                point = (x + dx, y + dy)
                if point[0] < 0 or point[1] < 0:
                    continue
                patch.setdefault(point, target.put(point, Cell(glyph=char)))
        if patch:
            self.history.forget_redo()
            self.history.record_draw(target.id, patch)
        return patch

    # --- Layers ---

    def add_layer(self) -> int:
        self._finish_pointer()
        layer_id = self.layers.add_layer()
        self.history.forget_redo()
        self.history.record_layer_added(layer_id)
        return layer_id

    def remove_active_layer(self) -> Layer:
        self._finish_pointer()
        layer, index = self.layers.remove_active_layer()
        self.history.forget_redo()
        self.history.record_layer_removed(layer.copy(), index)
        return layer

    def rename_active_layer(self, name: str) -> bool:
        self._finish_pointer()
        name = name.strip()
        if not name:
            return False
        layer_id, old_name = self.layers.rename_active_layer(name)
        self.history.forget_redo()
        self.history.record_layer_renamed(layer_id, old_name)
        return True

    def move_active_layer_up(self) -> bool:
        self._finish_pointer()
        layer_id = self.layers.current_layer_id()
        moved = self.layers.move_layer_up_by_id(layer_id)
        if moved:
            self.history.forget_redo()
            self.history.record_layer_moved_up(layer_id)
        return moved

    def move_active_layer_down(self) -> bool:
        self._finish_pointer()
        layer_id = self.layers.current_layer_id()
        moved = self.layers.move_layer_down_by_id(layer_id)
        if moved:
            self.history.forget_redo()
            self.history.record_layer_moved_down(layer_id)
        return moved

    # --- History ---

    def undo(self) -> HistoryAction | None:
        self._finish_pointer()
        action = self.history.undo(self.layers)
        self.layers.queue_render()
        return action

    def redo(self) -> HistoryAction | None:
        self._finish_pointer()
        action = self.history.redo(self.layers)
        self.layers.queue_render()
        return action

    # --- Canvas-wide ---

    def resize(self, width: int, height: int):
        """Shrink or grow the drawable area, dropping cells that fall outside."""
        self.width, self.height = width, height
        self.on_release()
        for layer in self.layers.layers:
            layer.data = {(x, y): c for (x, y), c in layer.data.items()
                          if x < width and y < height}
        self.layers.queue_render()

    def reset(self):
        self.brush = Brush()
        self.palette = Palette()
        self.layers = LayerStack(rng=self._rng)
        self.history = History()
        self.pointer_mode = PointerMode.NORMAL
        self._stroke_layer_id = None
        self._press_draw = None

    # --- State operations (no undo) ---

    def _do_set_color(self, cmd: dict):
        self.brush.fg = parse_color(cmd["color"])

    def _do_set_background(self, cmd: dict):
        self.brush.bg = parse_color(cmd["color"])

    def _do_cycle_color(self, cmd: dict):
        forward = cmd.get("step", 1) >= 0
        if cmd.get("target", "fg") == "bg":
            self.brush.bg = self.palette.bg_next() if forward else self.palette.bg_prev()
        else:
            self.brush.fg = self.palette.fg_next() if forward else self.palette.fg_prev()

    def _do_set_palette_color(self, cmd: dict):
        self.palette.replace(int(cmd["index"]), parse_color(cmd["color"]))

    def _do_set_brush_size(self, cmd: dict):
        self.brush.size = max(BRUSH_MIN, min(BRUSH_MAX, int(cmd["size"])))

    def _do_resize_brush(self, cmd: dict):
        delta = int(cmd.get("delta", 1))
        if delta >= 0:
            self.brush.up(delta)
        else:
            self.brush.down(-delta)

    def _do_set_tool(self, cmd: dict):
        self.brush.tool = Tool.parse(cmd["tool"])

    def _do_set_glyph(self, cmd: dict):
        glyph = str(cmd["glyph"])
        if not glyph:
            raise ValueError("Glyph must be a single character")
        self.brush.glyph = glyph[0]

    def _do_toggle_layer(self, cmd: dict):
        self.layers.toggle_visible(int(cmd["index"]))

    def _do_select_layer(self, cmd: dict):
        self._finish_pointer()
        self.layers.select_active(int(cmd["index"]))

    # --- Edits (recorded in history) ---

    def _do_press(self, cmd: dict):
        return self.on_press(int(cmd["x"]), int(cmd["y"]))

    def _do_drag(self, cmd: dict):
        return self.on_drag(int(cmd["x"]), int(cmd["y"]))

    def _do_release(self, cmd: dict):
        self.on_release(bool(cmd.get("keep_anchor", False)))

    def _do_stroke(self, cmd: dict):
        """Press at the first point, drag through the rest, release."""
        points = [(int(p[0]), int(p[1])) for p in cmd["points"]]
        if not points:
            return
        self.on_press(*points[0])
        for point in points[1:]:
            self.on_drag(*point)
        self.on_release(bool(cmd.get("keep_anchor", False)))

    def _do_paste_text(self, cmd: dict):
        return self.paste_text(int(cmd["x"]), int(cmd["y"]), str(cmd["text"]))

    def _do_add_layer(self, cmd: dict):
        return self.add_layer()

    def _do_remove_layer(self, cmd: dict):
        return self.remove_active_layer()

    def _do_rename_layer(self, cmd: dict):
        return self.rename_active_layer(str(cmd["name"]))

    def _do_move_layer_up(self, cmd: dict):
        return self.move_active_layer_up()

    def _do_move_layer_down(self, cmd: dict):
        return self.move_active_layer_down()

    def _do_undo(self, cmd: dict):
        return self.undo()

    def _do_redo(self, cmd: dict):
        return self.redo()

    def _do_resize(self, cmd: dict):
        self.resize(int(cmd["width"]), int(cmd["height"]))

    def _do_reset(self, cmd: dict):
        self.reset()

    # --- Read-only operations ---

    def render(self) -> dict[Point, Cell]:
        return self.layers.render()

    def get_glyphs(self, x: int = 0, y: int = 0,
                   w: int | None = None, h: int | None = None) -> list[str]:
        """Return the composite glyphs of a region as rows of text."""
        if w is None:
            w = self.width - x
        if h is None:
            h = self.height - y
        # Clamp to canvas bounds
        x = max(0, min(x, self.width - 1))
        y = max(0, min(y, self.height - 1))
        w = max(0, min(w, self.width - x))
        h = max(0, min(h, self.height - y))

        grid = np.full((h, w), " ", dtype="<U1")
        for (px, py), cell in self.render().items():
            if x <= px < x + w and y <= py < y + h:
                grid[py - y, px - x] = cell.glyph
        return ["".join(row) for row in grid.tolist()]
