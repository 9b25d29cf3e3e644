"""Global mutable state for family tree data storage."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .constants import MAX_TREE_DEPTH

if TYPE_CHECKING:
    from .models import EditRequest, Person, Profile, Relationship, UserComment, UserRootNode

# Configuration (set by configure() at startup)
DATA_FILE: Path | None = None
ACTING_USER_ID: str | None = None
PERSIST: bool = False
TREE_DEPTH_LIMIT: int = MAX_TREE_DEPTH

# Tables (populated at startup by store.load_family_data), keyed by id.
# Dicts keep snapshot order, which the store relies on for created_at ordering.
persons: dict[str, Person] = {}
relationships: dict[str, Relationship] = {}
profiles: dict[str, Profile] = {}
user_comments: dict[str, UserComment] = {}
edit_requests: dict[str, EditRequest] = {}
user_root_nodes: dict[str, UserRootNode] = {}  # user_id -> row


def _resolve_data_path() -> Path:
    """Get snapshot path from FAMILY_TREE_DATA_FILE env var.

    Raises:
        FileNotFoundError: If FAMILY_TREE_DATA_FILE env var not set or file doesn't exist.
    """
    env_path = os.getenv("FAMILY_TREE_DATA_FILE")
    if not env_path:
        raise FileNotFoundError(
            "FAMILY_TREE_DATA_FILE environment variable not set.\n"
            "Set it to the path of your family data snapshot:\n"
            "  export FAMILY_TREE_DATA_FILE=/path/to/family.json\n"
            "Or use the --data-file CLI argument:\n"
            "  family-tree-server --data-file /path/to/family.json"
        )
    path = Path(env_path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Family data file not found: {path}")
    return path


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def configure() -> None:
    """Initialize configuration from environment. Called at startup.

    Loads .env file if present, then reads FAMILY_TREE_* variables.
    Note: load_dotenv() does NOT override existing env vars by default.
    """
    global DATA_FILE, ACTING_USER_ID, PERSIST, TREE_DEPTH_LIMIT
    load_dotenv()
    DATA_FILE = _resolve_data_path()
    ACTING_USER_ID = os.getenv("FAMILY_TREE_USER_ID") or None
    PERSIST = _env_flag("FAMILY_TREE_PERSIST")
    TREE_DEPTH_LIMIT = min(_env_int("FAMILY_TREE_MAX_TREE_DEPTH", MAX_TREE_DEPTH), MAX_TREE_DEPTH)


def clear() -> None:
    """Empty every table (used before a reload)."""
    persons.clear()
    relationships.clear()
    profiles.clear()
    user_comments.clear()
    edit_requests.clear()
    user_root_nodes.clear()
