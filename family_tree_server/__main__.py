"""Entry point for running the family tree server as a module.

Usage:
    python -m family_tree_server --data-file /path/to/family.json
    family-tree-server --data-file /path/to/family.json
"""

import argparse
import logging
import os


def main():
    """Main entry point for the family tree MCP server."""
    parser = argparse.ArgumentParser(
        description="Family Tree MCP Server - Browse and annotate a family tree via MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  family-tree-server --data-file ~/family.json
  family-tree-server -f ~/family.json --user-id 6f1c...

Environment variables:
  FAMILY_TREE_DATA_FILE  Path to the JSON snapshot of the family tables
  FAMILY_TREE_USER_ID    User the server acts as for comments and edits
  FAMILY_TREE_PERSIST    Set to 'true' to write changes back to the snapshot
  LOG_LEVEL              Logging level (default: WARNING)
""",
    )
    parser.add_argument(
        "--data-file",
        "-f",
        metavar="PATH",
        help="Path to family data snapshot (or set FAMILY_TREE_DATA_FILE env var)",
    )
    parser.add_argument(
        "--user-id",
        "-u",
        metavar="ID",
        help="Acting user ID for comments, root preferences and edit requests",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # CLI args override env vars
    if args.data_file:
        os.environ["FAMILY_TREE_DATA_FILE"] = args.data_file
    if args.user_id:
        os.environ["FAMILY_TREE_USER_ID"] = args.user_id

    # Import and initialize AFTER setting env vars
    from . import initialize, mcp

    initialize()
    mcp.run()


if __name__ == "__main__":
    main()
