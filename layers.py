"""Layer model: sparse cell grids stacked bottom to top."""

import logging
import random
from dataclasses import dataclass, field

from cell import EMPTY, Cell, Patch, Point

logger = logging.getLogger(__name__)

ID_SPACE = 2 ** 32


@dataclass
class Layer:
    id: int
    name: str = "New Layer"
    visible: bool = True
    data: dict[Point, Cell] = field(default_factory=dict)

    def get(self, point: Point) -> Cell:
        return self.data.get(point, EMPTY)

    def put(self, point: Point, cell: Cell) -> Cell:
        """Write `cell` at `point` and return what was there.

        Writing EMPTY removes the coordinate, so absent and empty are the
        same state.
        """
        if cell == EMPTY:
            return self.data.pop(point, EMPTY)
        old = self.data.get(point, EMPTY)
        self.data[point] = cell
        return old

    def erase(self, point: Point) -> Cell:
        return self.put(point, EMPTY)

    def apply_patch(self, patch: Patch) -> Patch:
        """Write every cell in `patch`; return the patch that reverses it."""
        return {point: self.put(point, cell) for point, cell in patch.items()}

    def toggle_visible(self):
        self.visible = not self.visible

    def copy(self) -> "Layer":
        return Layer(self.id, self.name, self.visible, dict(self.data))


class LayerStack:
    """Ordered layers (index 0 is the bottom) with a cached composite.

    The stack is never empty and `active` always indexes a real layer.
    Any change to content, order or visibility drops the cached render.
    """

    MAX_ID_ATTEMPTS = 8

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()
        self.layers: list[Layer] = []
        self.active = 0
        self.id_list: set[int] = set()
        self.last_pointer: Point | None = None
        self._rendered: dict[Point, Cell] | None = None
        self.add_layer()

    # --- Invariants ---

    def _check_self(self):
        if not self.layers:
            self.add_layer()
        self.active = max(0, min(self.active, len(self.layers) - 1))

    def queue_render(self):
        self._rendered = None

    def _new_id(self) -> int:
        for _ in range(self.MAX_ID_ATTEMPTS):
            candidate = self._rng.getrandbits(32)
            if candidate not in self.id_list:
                return candidate
        # Random ids keep colliding; walk upward from the largest id instead.
        candidate = (max(self.id_list) + 1) % ID_SPACE
        while candidate in self.id_list:
            candidate = (candidate + 1) % ID_SPACE
        logger.debug("Layer id fallback to counter: %d", candidate)
        return candidate

    def _next_name(self) -> str:
        taken = {layer.name for layer in self.layers}
        n = len(self.layers) + 1
        while f"Layer {n}" in taken:
            n += 1
        return f"Layer {n}"

    # --- Structure ---

    def add_layer(self) -> int:
        return self.add_layer_with_id(self._new_id())

    def add_layer_with_id(self, layer_id: int) -> int:
        self.layers.append(Layer(layer_id, self._next_name()))
        self.id_list.add(layer_id)
        self.queue_render()
        logger.debug("Added layer %d", layer_id)
        return layer_id

    def remove_active_layer(self) -> tuple[Layer, int]:
        self._check_self()
        index = self.active
        layer = self.layers.pop(index)
        self.id_list.discard(layer.id)
        self.active = max(0, index - 1)
        self._check_self()
        self.queue_render()
        logger.debug("Removed layer %d from position %d", layer.id, index)
        return layer, index

    def remove_layer_by_id(self, layer_id: int) -> tuple[Layer, int] | None:
        index = self.index_of(layer_id)
        if index is None:
            return None
        layer = self.layers.pop(index)
        self.id_list.discard(layer_id)
        if index < self.active:
            self.active -= 1
        self._check_self()
        self.queue_render()
        return layer, index

    def insert_layer(self, layer: Layer, position: int):
        position = max(0, min(position, len(self.layers)))
        self.layers.insert(position, layer)
        self.id_list.add(layer.id)
        self.active = position
        self.queue_render()

    def rename_active_layer(self, name: str) -> tuple[int, str]:
        self._check_self()
        layer = self.layers[self.active]
        old_name = layer.name
        layer.name = name
        return layer.id, old_name

    def move_layer_up_by_id(self, layer_id: int) -> bool:
        index = self.index_of(layer_id)
        if index is None or index + 1 >= len(self.layers):
            return False
        return self._swap(index, index + 1)

    def move_layer_down_by_id(self, layer_id: int) -> bool:
        index = self.index_of(layer_id)
        if index is None or index == 0:
            return False
        return self._swap(index, index - 1)

    def _swap(self, index: int, new_index: int) -> bool:
        layers = self.layers
        layers[index], layers[new_index] = layers[new_index], layers[index]
        self.active = new_index
        self.queue_render()
        return True

    def toggle_visible(self, index: int):
        self.queue_render()
        if 0 <= index < len(self.layers):
            self.layers[index].toggle_visible()

    def select_active(self, index: int):
        self.active = index
        self._check_self()

    # --- Access ---

    def index_of(self, layer_id: int) -> int | None:
        for index, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return index
        return None

    def get_layer_by_id(self, layer_id: int) -> Layer | None:
        self.queue_render()
        index = self.index_of(layer_id)
        return None if index is None else self.layers[index]

    def get_layer_mut(self, layer_id: int) -> Layer:
        """Return the layer with `layer_id`, creating it on top if missing."""
        layer = self.get_layer_by_id(layer_id)
        if layer is None:
            logger.debug("Layer %d missing, recreating it", layer_id)
            self.add_layer_with_id(layer_id)
            layer = self.layers[-1]
        return layer

    def current_layer_mut(self) -> Layer:
        self._check_self()
        self.queue_render()
        return self.layers[self.active]

    def current_layer_id(self) -> int:
        self._check_self()
        return self.layers[self.active].id

    def display_info(self) -> list[tuple[int, str, bool]]:
        """(index, name, visible) for every layer, top layer first."""
        return [(i, layer.name, layer.visible)
                for i, layer in reversed(list(enumerate(self.layers)))]

    # --- Composite ---

    def render(self) -> dict[Point, Cell]:
        """Flatten the visible layers; upper layers win, EMPTY never occludes."""
        if self._rendered is None:
            page: dict[Point, Cell] = {}
            for layer in self.layers:
                if not layer.visible:
                    continue
                page.update((p, c) for p, c in layer.data.items() if not c.is_empty())
            self._rendered = page
        return dict(self._rendered)

    def snapshot(self) -> list[Layer]:
        """Deep-enough copy of every layer, for comparisons and tests."""
        return [layer.copy() for layer in self.layers]
