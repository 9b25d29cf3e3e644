"""Family Tree Server - FastMCP server for browsing and annotating a shared family tree.

Members browse the tree, comment on profiles and submit edit requests;
administrators choose the default root and moderate requests. Data comes
from a JSON snapshot of the family tables.

Usage:
    family-tree-server --data-file /path/to/family.json
    FAMILY_TREE_DATA_FILE=/path/to/family.json python -m family_tree_server
"""

from fastmcp import FastMCP

from .mcp_resources import register_resources
from .mcp_tools import register_tools
from .state import configure
from .store import load_family_data
from .telemetry import initialize_tracing

# Initialize tracing FIRST (before creating server)
# This is a no-op if TRACING_ENABLED is not set to 'true'
initialize_tracing()

# Initialize FastMCP server
mcp = FastMCP("Family Tree Server")

# Register tools and resources
register_tools(mcp)
register_resources(mcp)

_initialized = False


def initialize():
    """Initialize the server: configure from env vars and load family data.

    Called automatically on first use or can be called explicitly.
    Safe to call multiple times.
    """
    global _initialized
    if _initialized:
        return
    configure()
    load_family_data()
    _initialized = True


__all__ = ["mcp", "initialize"]
