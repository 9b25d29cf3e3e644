"""MCP resource definitions for the family tree server."""

from .comments import _get_comments
from .core import _get_person, _get_statistics, _list_members
from .helpers import format_display_date


def _comment_line(comment: dict) -> str:
    when = f" ({comment['time_ago']})" if comment["time_ago"] else ""
    return f"{comment['author_name']}{when}: {comment['display_content']}"


def register_resources(mcp):
    """Register all MCP resources with the server."""

    @mcp.resource("family://person/{id}")
    def resource_person(id: str) -> str:
        """Get a member's profile by ID."""
        person = _get_person(id)
        if person:
            return str(person)
        return f"Person {id} not found"

    @mcp.resource("family://stats")
    def resource_stats() -> str:
        """Get tree statistics."""
        return str(_get_statistics())

    @mcp.resource("family://members")
    def resource_members() -> str:
        """Get the member list in birth order."""
        lines = []
        for m in _list_members():
            born = format_display_date(m["birth_year"], None, None)
            lines.append(f"{m['id']}: {m['name']} ({born})")
        return "\n".join(lines)

    @mcp.resource("family://comments/{member_id}")
    def resource_comments(member_id: str) -> str:
        """Get comment threads on a member's profile."""
        lines = []
        for comment in _get_comments(member_id):
            lines.append(_comment_line(comment))
            for reply in comment["replies"]:
                lines.append("  " + _comment_line(reply))
        return "\n".join(lines)
