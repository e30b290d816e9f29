"""Entry point: builds the canvas and serves its tools over MCP stdio."""

import logging
import os
import sys

from canvas import Canvas
from tools import create_mcp_server

WIDTH, HEIGHT = 80, 24

logger = logging.getLogger(__name__)


def canvas_size() -> tuple[int, int]:
    """Canvas size, overridable with PAINT_WIDTH / PAINT_HEIGHT."""
    width = int(os.environ.get("PAINT_WIDTH", WIDTH))
    height = int(os.environ.get("PAINT_HEIGHT", HEIGHT))
    return max(1, width), max(1, height)


def main():
    # stdout carries the MCP JSON-RPC stream; diagnostics go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("PAINT_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    width, height = canvas_size()
    canvas = Canvas(width, height)
    mcp_server = create_mcp_server(canvas)
    logger.info("Serving %dx%d canvas over stdio", width, height)
    try:
        mcp_server.run(transport="stdio")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
