"""Tests for the layer stack: structure, ids and the cached composite."""

from __future__ import annotations

import random

from cell import EMPTY, Cell
from layers import Layer, LayerStack

X = Cell((0, 0, 0), (255, 255, 255), "x")
Y = Cell((255, 0, 0), None, "y")


class _StuckRng:
    """Always produces the same 'random' id."""

    def getrandbits(self, _bits: int) -> int:
        return 7


def test_new_stack_has_one_active_layer() -> None:
    stack = LayerStack(rng=random.Random(0))
    assert len(stack.layers) == 1
    assert stack.active == 0
    assert stack.id_list == {stack.layers[0].id}
    assert stack.layers[0].name == "Layer 1"


def test_add_layer_appends_on_top_with_unique_id() -> None:
    stack = LayerStack(rng=random.Random(0))
    first = stack.layers[0].id
    new_id = stack.add_layer()

    assert stack.layers[-1].id == new_id
    assert new_id != first
    assert stack.id_list == {first, new_id}
    assert stack.layers[-1].name == "Layer 2"
    assert stack.active == 0


def test_id_collisions_fall_back_to_counter() -> None:
    stack = LayerStack(rng=_StuckRng())
    assert stack.add_layer() == 8
    assert stack.add_layer() == 9
    assert [layer.id for layer in stack.layers] == [7, 8, 9]


def test_remove_last_layer_reinserts_default() -> None:
    stack = LayerStack(rng=random.Random(3))
    original = stack.layers[0]

    layer, position = stack.remove_active_layer()

    assert layer is original
    assert position == 0
    assert len(stack.layers) == 1
    assert stack.layers[0] is not original
    assert stack.id_list == {stack.layers[0].id}


def test_remove_active_layer_clamps_index_downwards() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.add_layer()
    top = stack.add_layer()
    stack.select_active(2)

    layer, position = stack.remove_active_layer()

    assert layer.id == top
    assert position == 2
    assert stack.active == 1
    assert top not in stack.id_list


def test_remove_layer_below_active_keeps_selection() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.add_layer()
    top = stack.add_layer()
    stack.select_active(2)

    layer, position = stack.remove_layer_by_id(stack.layers[0].id)

    assert position == 0
    assert stack.active == 1
    assert stack.current_layer_id() == top


def test_insert_layer_restores_position_and_id() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.add_layer()
    stack.add_layer()
    stack.select_active(1)
    layer, position = stack.remove_active_layer()

    stack.insert_layer(layer, position)

    assert stack.layers[1] is layer
    assert layer.id in stack.id_list
    assert stack.active == 1


def test_move_layer_swaps_and_selects() -> None:
    stack = LayerStack(rng=random.Random(0))
    bottom = stack.layers[0].id
    top = stack.add_layer()

    assert stack.move_layer_up_by_id(bottom)
    assert [layer.id for layer in stack.layers] == [top, bottom]
    assert stack.active == 1

    assert not stack.move_layer_up_by_id(bottom)
    assert stack.move_layer_down_by_id(bottom)
    assert not stack.move_layer_down_by_id(bottom)
    assert not stack.move_layer_up_by_id(12345)


def test_boundary_move_keeps_render_cache() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.layers[0].put((1, 1), X)
    stack.render()
    cached = stack._rendered

    assert not stack.move_layer_down_by_id(stack.layers[0].id)
    assert stack._rendered is cached


def test_select_active_is_clamped() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.add_layer()
    stack.select_active(9)
    assert stack.active == 1
    stack.select_active(-3)
    assert stack.active == 0


def test_render_empty_cells_never_occlude() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.layers[0].put((1, 1), X)
    stack.add_layer()
    # A bulk importer may write the sentinel straight into the data map.
    stack.layers[1].data[(1, 1)] = EMPTY

    assert stack.render() == {(1, 1): X}

    stack.get_layer_mut(stack.layers[1].id).put((1, 1), Y)
    assert stack.render() == {(1, 1): Y}


def test_hidden_layer_contributes_nothing() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.layers[0].put((1, 1), X)
    stack.add_layer()
    stack.layers[1].put((2, 2), Y)

    stack.toggle_visible(1)
    assert stack.render() == {(1, 1): X}

    stack.toggle_visible(0)
    assert stack.render() == {}

    stack.toggle_visible(1)
    assert stack.render() == {(2, 2): Y}


def test_render_cache_is_returned_by_value() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.current_layer_mut().put((0, 0), X)

    page = stack.render()
    page[(5, 5)] = Y
    page.pop((0, 0))

    assert stack.render() == {(0, 0): X}


def test_current_layer_mut_invalidates_cache() -> None:
    stack = LayerStack(rng=random.Random(0))
    assert stack.render() == {}

    stack.current_layer_mut().put((3, 3), X)

    assert stack.render() == {(3, 3): X}


def test_layer_put_empty_removes_coordinate() -> None:
    layer = Layer(1)
    assert layer.put((0, 0), X) == EMPTY
    assert layer.put((0, 0), EMPTY) == X
    assert layer.data == {}
    assert layer.erase((0, 0)) == EMPTY


def test_apply_patch_returns_inverse() -> None:
    layer = Layer(1)
    layer.put((0, 0), X)

    inverse = layer.apply_patch({(0, 0): Y, (1, 0): Y})
    assert inverse == {(0, 0): X, (1, 0): EMPTY}

    layer.apply_patch(inverse)
    assert layer.data == {(0, 0): X}


def test_get_layer_mut_recreates_missing_layer() -> None:
    stack = LayerStack(rng=random.Random(0))
    layer = stack.get_layer_mut(42)
    assert layer.id == 42
    assert stack.layers[-1] is layer
    assert 42 in stack.id_list


def test_display_info_lists_top_first() -> None:
    stack = LayerStack(rng=random.Random(0))
    stack.add_layer()
    stack.toggle_visible(0)
    assert stack.display_info() == [(1, "Layer 2", True), (0, "Layer 1", False)]
