"""MCP Server exposing the status of running opencode instances.

Reads the shared state directory, so it works without talking to any
opencode process.
"""

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP

from .config import get_config
from .state import InstanceStateStore
from .status import render_tmux_status, status_summary

# Initialize the MCP server
mcp = FastMCP("opencode-notify")


def _store() -> InstanceStateStore:
    return InstanceStateStore(get_config().state_dir)


@mcp.tool()
def get_instance_status() -> dict:
    """Get the status of every running opencode instance.

    Returns:
        - total: Number of instances
        - idle / busy / prompting / error: Number of instances in each status
        - instances: List of {project, status, pid}
    """
    return status_summary(_store().read_all())


@mcp.tool()
def get_tmux_status(
    theme: Annotated[
        Optional[str],
        "Color theme: 'tokyonight', 'catppuccin' or 'plain'. Defaults to the configured theme.",
    ] = None,
) -> dict:
    """Render the tmux status-line segment for all running instances.

    The segment is empty when no instance needs attention or is working.
    """
    config = get_config()
    states = InstanceStateStore(config.state_dir).read_all()
    return {"status_line": render_tmux_status(states, theme or config.theme)}


@mcp.tool()
def cleanup_stale_instances() -> dict:
    """Remove status records of instances whose process is gone.

    Returns:
        - removed: Instance ids whose records were deleted
        - remaining: Number of records left
    """
    store = _store()
    removed = store.cleanup_stale()
    return {"removed": removed, "remaining": len(store.read_all())}


def main():
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
