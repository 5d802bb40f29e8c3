"""
geoedit MCP Server

Exposes the editing engine as MCP tools. The server holds no editing
state: callers pass the collection and the session in and get the next
session back.

Supports both stdio (local) and HTTP/SSE (remote) transports.
"""

import os
import sys

from fastmcp import FastMCP

from geoedit.config import get_settings
from geoedit.logger import get_logger
from geoedit.tools.editing import (
    check_feature_collection,
    get_edit_handles,
    get_edit_preview,
    handle_interaction,
    list_modes,
)

# Initialize settings and logger
settings = get_settings()
logger = get_logger(__name__)

# Create MCP server instance
mcp = FastMCP(
    name=settings.server_name,
    version=settings.server_version,
)


# ============================================================
# Editing Tools
# ============================================================

@mcp.tool()
def tool_handle_interaction(
    collection: dict,
    event: dict,
    session: dict | None = None,
    close_ring_tolerance: float | None = None,
) -> dict:
    """
    Apply one pointer interaction to a GeoJSON FeatureCollection.

    Args:
        collection: GeoJSON FeatureCollection being edited
        event: Interaction event with 'kind' (click, dragStart, dragging,
            dragStop, pointerMove), 'picks' and 'ground_coords'
        session: Session returned by the previous call; omit to start
        close_ring_tolerance: Ground-unit tolerance for closing polygons

    Returns:
        Dictionary with the next 'session' and the committed 'edit' (or null)
    """
    return handle_interaction(
        collection=collection,
        event=event,
        session=session,
        close_ring_tolerance=close_ring_tolerance,
    )


@mcp.tool()
def tool_get_edit_handles(collection: dict, selected_feature_index: int | None = None) -> dict:
    """
    List the existing and intermediate edit handles of the selected feature.

    Args:
        collection: GeoJSON FeatureCollection being edited
        selected_feature_index: Index of the selected feature

    Returns:
        Dictionary with 'handles' and 'count'
    """
    return get_edit_handles(collection=collection, selected_feature_index=selected_feature_index)


@mcp.tool()
def tool_get_edit_preview(collection: dict, session: dict | None = None) -> dict:
    """
    Get the tentative feature for a drag that has not been committed yet.

    Args:
        collection: GeoJSON FeatureCollection being edited
        session: Current session

    Returns:
        Dictionary with 'feature' (or null)
    """
    return get_edit_preview(collection=collection, session=session)


@mcp.tool()
def tool_check_feature_collection(collection: dict) -> dict:
    """
    Check whether every feature of a collection can be edited.

    Args:
        collection: GeoJSON FeatureCollection

    Returns:
        Dictionary with 'valid' and 'feature_count', or error details
    """
    return check_feature_collection(collection=collection)


@mcp.tool()
def tool_list_modes() -> dict:
    """
    List the available editing modes.

    Returns:
        Dictionary with 'modes' and 'initial_mode'
    """
    return list_modes()


# ============================================================
# Entry Point
# ============================================================

def main() -> None:
    logger.info(
        f"Starting {settings.server_name} v{settings.server_version}",
        extra={
            "environment": settings.environment,
            "log_level": settings.log_level,
            "close_ring_tolerance": settings.close_ring_tolerance,
        },
    )

    # Options: "stdio" (default), "sse", "streamable-http"
    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    host = os.environ.get("MCP_HOST", "0.0.0.0")
    port = int(os.environ.get("MCP_PORT", "8080"))

    logger.info(f"Using transport: {transport}")

    if transport == "stdio":
        mcp.run()
    elif transport == "sse":
        logger.info(f"Starting SSE server on {host}:{port}")
        mcp.run(transport="sse", host=host, port=port)
    elif transport == "streamable-http":
        logger.info(f"Starting Streamable HTTP server on {host}:{port}")
        mcp.run(transport="streamable-http", host=host, port=port)
    else:
        logger.error(f"Unknown transport: {transport}")
        print("Valid options: stdio, sse, streamable-http", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
