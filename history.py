"""Undo/redo log of inverse patches and structural layer actions."""

import logging
from dataclasses import dataclass
from typing import Union

from cell import Patch
from layers import Layer, LayerStack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerAdded:
    layer_id: int


@dataclass(frozen=True)
class LayerRemoved:
    layer: Layer
    position: int


@dataclass(frozen=True)
class LayerRenamed:
    layer_id: int
    previous_name: str


@dataclass(frozen=True)
class LayerMovedUp:
    layer_id: int


@dataclass(frozen=True)
class LayerMovedDown:
    layer_id: int


@dataclass(frozen=True)
class Draw:
    layer_id: int
    patch: Patch


HistoryAction = Union[LayerAdded, LayerRemoved, LayerRenamed, LayerMovedUp, LayerMovedDown, Draw]


class History:
    """Past/future stacks plus the patch of the stroke in progress.

    `past` and `future` hold the action that, applied to the stack, takes
    it one step back (or forward). Applying an action yields its
    complement, which goes onto the opposite stack.
    """

    def __init__(self):
        self.past: list[HistoryAction] = []
        self.future: list[HistoryAction] = []
        self.partial: Patch | None = None

    # --- Recording ---

    def record_draw(self, layer_id: int, patch: Patch) -> Draw:
        draw = Draw(layer_id, dict(patch))
        self.past.append(draw)
        return draw

    def record_layer_added(self, layer_id: int):
        self.past.append(LayerAdded(layer_id))

    def record_layer_removed(self, layer: Layer, position: int):
        self.past.append(LayerRemoved(layer, position))

    def record_layer_renamed(self, layer_id: int, previous_name: str):
        self.past.append(LayerRenamed(layer_id, previous_name))

    def record_layer_moved_up(self, layer_id: int):
        self.past.append(LayerMovedUp(layer_id))

    def record_layer_moved_down(self, layer_id: int):
        self.past.append(LayerMovedDown(layer_id))

    def forget_redo(self):
        self.future.clear()

    # --- Stroke coalescing ---

    def begin_or_continue_stroke(self, patch: Patch):
        """Merge `patch` into the stroke; coordinates already seen keep
        their first (pre-stroke) value."""
        if self.partial is None:
            self.partial = {}
        for point, cell in patch.items():
            self.partial.setdefault(point, cell)

    def absorb_last_draw(self, draw: Draw | None = None):
        """Reopen the most recent Draw as the start of a stroke.

        A press records its own Draw; when the pointer then drags, that
        entry becomes the base of the stroke so both undo together. Given
        `draw`, nothing happens unless that exact entry is still on top.
        """
        if not self.past or not isinstance(self.past[-1], Draw):
            return
        if draw is not None and self.past[-1] is not draw:
            return
        draw = self.past.pop()
        self.begin_or_continue_stroke(draw.patch)

    def end_stroke(self, layer_id: int):
        if self.partial is None:
            return
        partial, self.partial = self.partial, None
        self.record_draw(layer_id, partial)

    def abandon_stroke(self) -> Patch | None:
        partial, self.partial = self.partial, None
        return partial

    # --- Replay ---

    def undo(self, stack: LayerStack) -> HistoryAction | None:
        if not self.past:
            return None
        action = self.past.pop()
        self.future.append(self._apply(action, stack, undo=True))
        logger.debug("Undo %s", type(action).__name__)
        return action

    def redo(self, stack: LayerStack) -> HistoryAction | None:
        if not self.future:
            return None
        action = self.future.pop()
        self.past.append(self._apply(action, stack, undo=False))
        logger.debug("Redo %s", type(action).__name__)
        return action

    @staticmethod
    def _apply(action: HistoryAction, stack: LayerStack, undo: bool) -> HistoryAction:
        """Perform `action` on `stack` and return its complement."""
        if isinstance(action, Draw):
            layer = stack.get_layer_mut(action.layer_id)
            return Draw(action.layer_id, layer.apply_patch(action.patch))

        if isinstance(action, LayerRenamed):
            layer = stack.get_layer_mut(action.layer_id)
            current_name = layer.name
            layer.name = action.previous_name
            return LayerRenamed(action.layer_id, current_name)

        if isinstance(action, LayerAdded):
            if undo:
                stack.remove_layer_by_id(action.layer_id)
            else:
                stack.add_layer_with_id(action.layer_id)
            return action

        if isinstance(action, LayerRemoved):
            if undo:
                stack.insert_layer(action.layer.copy(), action.position)
                return action
            removed = stack.remove_layer_by_id(action.layer.id)
            if removed is None:
                return action
            return LayerRemoved(*removed)

        if isinstance(action, LayerMovedUp):
            if undo:
                stack.move_layer_down_by_id(action.layer_id)
            else:
                stack.move_layer_up_by_id(action.layer_id)
            return action

        if isinstance(action, LayerMovedDown):
            if undo:
                stack.move_layer_up_by_id(action.layer_id)
            else:
                stack.move_layer_down_by_id(action.layer_id)
            return action

        raise TypeError(f"Unknown history action: {action!r}")
