"""MCP tool definitions. Each tool turns its arguments into a canvas command."""

import json
from typing import Optional

from mcp.server.fastmcp import FastMCP

from canvas import Canvas
from colors import format_color


def create_mcp_server(canvas: Canvas) -> FastMCP:
    mcp = FastMCP("glyph-paint")

    def run(action: str, **kwargs):
        return canvas.execute({"action": action, **kwargs})

    @mcp.tool()
    def get_canvas_info() -> str:
        """Get canvas dimensions, the current brush and the layer count."""
        brush = canvas.brush
        return (
            f"Canvas: {canvas.width}x{canvas.height}, "
            f"tool: {brush.tool.value}, size: {brush.size}, glyph: {brush.glyph!r}, "
            f"fg: {format_color(brush.fg)}, bg: {format_color(brush.bg)}, "
            f"layers: {len(canvas.layers.layers)}, "
            f"undo: {len(canvas.history.past)}, redo: {len(canvas.history.future)}"
        )

    @mcp.tool()
    def set_color(color: str) -> str:
        """Set the glyph (foreground) color: a name like 'red', '#RRGGBB', or 'reset'."""
        run("set_color", color=color)
        return f"Foreground set to {format_color(canvas.brush.fg)}"

    @mcp.tool()
    def set_background(color: str) -> str:
        """Set the cell background color: a name like 'navy', '#RRGGBB', or 'reset'."""
        run("set_background", color=color)
        return f"Background set to {format_color(canvas.brush.bg)}"

    @mcp.tool()
    def set_brush_size(size: int) -> str:
        """Set the brush size (1-21). Acts as the radius for disk and circle."""
        run("set_brush_size", size=size)
        return f"Brush size set to {canvas.brush.size}"

    @mcp.tool()
    def set_tool(tool: str) -> str:
        """Pick the brush tool: point, square, box, disk, circle, plus,
        vertical, horizontal or eraser."""
        run("set_tool", tool=tool)
        return f"Tool set to {canvas.brush.tool.value} ({canvas.brush.tool.icon})"

    @mcp.tool()
    def set_glyph(glyph: str) -> str:
        """Set the character painted by the brush (first character is used)."""
        run("set_glyph", glyph=glyph)
        return f"Glyph set to {canvas.brush.glyph!r}"

    @mcp.tool()
    def draw_point(x: int, y: int) -> str:
        """Stamp the brush once at (x, y)."""
        patch = run("press", x=x, y=y)
        run("release")
        return f"Stamped at ({x}, {y}), {len(patch)} cells"

    @mcp.tool()
    def draw_stroke(points: list[list[int]]) -> str:
        """Drag the brush through a list of [x, y] points as one undoable stroke."""
        run("stroke", points=points)
        return f"Drew stroke through {len(points)} points"

    @mcp.tool()
    def paste_text(x: int, y: int, text: str) -> str:
        """Write multi-line text onto the active layer with its top-left at (x, y)."""
        patch = run("paste_text", x=x, y=y, text=text)
        return f"Pasted {len(patch)} cells at ({x}, {y})"

    @mcp.tool()
    def list_layers() -> str:
        """List layers top to bottom as JSON: index, name, visibility, active flag."""
        active = canvas.layers.active
        return json.dumps([
            {"index": i, "name": name, "visible": visible, "active": i == active}
            for i, name, visible in canvas.layers.display_info()
        ])

    @mcp.tool()
    def add_layer() -> str:
        """Add an empty layer on top of the stack."""
        layer_id = run("add_layer")
        return f"Added layer {layer_id}"

    @mcp.tool()
    def remove_layer() -> str:
        """Remove the active layer (undoable)."""
        layer = run("remove_layer")
        return f"Removed layer {layer.name!r}"

    @mcp.tool()
    def rename_layer(name: str) -> str:
        """Rename the active layer."""
        if not run("rename_layer", name=name):
            return "Blocked: layer names cannot be blank."
        return f"Renamed active layer to {name.strip()!r}"

    @mcp.tool()
    def move_layer(direction: str) -> str:
        """Move the active layer 'up' or 'down' one place in the stack."""
        if direction not in ("up", "down"):
            raise ValueError("direction must be 'up' or 'down'")
        moved = run(f"move_layer_{direction}")
        return f"Moved layer {direction}" if moved else f"Layer is already at the {direction} edge"

    @mcp.tool()
    def select_layer(index: int) -> str:
        """Make the layer at `index` (0 is the bottom) the active one."""
        run("select_layer", index=index)
        return f"Active layer is now {canvas.layers.active}"

    @mcp.tool()
    def toggle_layer(index: int) -> str:
        """Show or hide the layer at `index`."""
        run("toggle_layer", index=index)
        return f"Toggled visibility of layer {index}"

    @mcp.tool()
    def undo() -> str:
        """Undo the last drawing or layer operation."""
        action = run("undo")
        return f"Undid {type(action).__name__}" if action else "Nothing to undo"

    @mcp.tool()
    def redo() -> str:
        """Redo the last undone operation."""
        action = run("redo")
        return f"Redid {type(action).__name__}" if action else "Nothing to redo"

    @mcp.tool()
    def get_canvas_text(x: Optional[int] = None, y: Optional[int] = None,
                        width: Optional[int] = None, height: Optional[int] = None) -> str:
        """Return the visible glyphs as plain text, one line per row.

        All parameters are optional; omit them for the full canvas."""
        rows = canvas.get_glyphs(x or 0, y or 0, width, height)
        return "\n".join(rows)

    return mcp
