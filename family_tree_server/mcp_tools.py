"""MCP tool definitions for the family tree server."""

from .comments import _add_comment, _delete_comment, _get_comments
from .core import (
    _get_children,
    _get_parents,
    _get_person,
    _get_root_person,
    _get_spouses,
    _get_statistics,
    _get_tree,
    _list_members,
    _search_persons,
)
from .members import (
    _approve_edit_request,
    _delete_member,
    _list_edit_requests,
    _reject_edit_request,
    _set_default_root_node,
    _set_user_root_node,
    _submit_edit_request,
    _update_member_note,
)
from .telemetry import tool_span


def register_tools(mcp):
    """Register all MCP tools with the server."""

    # ============== TREE TOOLS (3) ==============

    @mcp.tool()
    def get_root_person(root_id: str | None = None) -> dict | None:
        """
        Get the person the family tree is drawn from.

        The root is chosen in this order: the root_id argument, your saved
        personal root, the tree's default root, then the eldest male member
        without recorded parents (or the eldest such member of any gender).

        Args:
            root_id: Optional person ID to use as the root

        Returns:
            Summary of the root person, or None if the tree is empty
        """
        with tool_span("get_root_person"):
            return _get_root_person(root_id)

    @mcp.tool()
    def get_tree(root_id: str | None = None, generations: int | None = None) -> dict:
        """
        Get the descendant tree for display, with spouses and children nested.

        Args:
            root_id: Optional person ID to start from (default: resolved root)
            generations: Optional depth limit (capped by server configuration)

        Returns:
            Dictionary with root_id, nested tree, total_members and generations
        """
        with tool_span("get_tree"):
            return _get_tree(root_id, generations=generations)

    @mcp.tool()
    def get_statistics() -> dict:
        """
        Get statistics about the family tree.

        Includes total members, number of generations (deepest line across
        the whole tree), gender breakdown, deceased and in-law counts.

        Returns:
            Dictionary of counts and birth year range
        """
        with tool_span("get_statistics"):
            return _get_statistics()

    # ============== LOOKUP TOOLS (6) ==============

    @mcp.tool()
    def get_person(person_id: str) -> dict | None:
        """
        Get a member's profile by ID.

        Contact details (phone, occupation, residence) are only included
        for activated accounts.

        Args:
            person_id: The person's ID

        Returns:
            Person record with formatted dates and age, or None if not found
        """
        with tool_span("get_person"):
            return _get_person(person_id)

    @mcp.tool()
    def search_persons(name: str, max_results: int = 50) -> list[dict]:
        """
        Search members by name. Exact substring matches come first,
        followed by close spellings.

        Args:
            name: Full or partial name
            max_results: Maximum number of results (default 50)

        Returns:
            List of matching member summaries
        """
        with tool_span("search_persons"):
            return _search_persons(name, max_results)

    @mcp.tool()
    def get_parents(person_id: str) -> list[dict]:
        """
        Get a member's parents (biological and adoptive).

        Args:
            person_id: The person's ID

        Returns:
            List of parent summaries with relationship_type
        """
        with tool_span("get_parents"):
            return _get_parents(person_id)

    @mcp.tool()
    def get_children(person_id: str) -> list[dict]:
        """
        Get a member's children in display order.

        Args:
            person_id: The person's ID

        Returns:
            List of child summaries with relationship_type
        """
        with tool_span("get_children"):
            return _get_children(person_id)

    @mcp.tool()
    def get_spouses(person_id: str) -> list[dict]:
        """
        Get a member's spouses.

        Args:
            person_id: The person's ID

        Returns:
            List of spouse summaries with the marriage note
        """
        with tool_span("get_spouses"):
            return _get_spouses(person_id)

    @mcp.tool()
    def list_members(max_results: int = 500) -> list[dict]:
        """
        List members ordered by birth year (unknown years last).

        Args:
            max_results: Maximum number of members (default 500)

        Returns:
            List of member summaries
        """
        with tool_span("list_members"):
            return _list_members(max_results)

    # ============== COMMENT TOOLS (3) ==============

    @mcp.tool()
    def get_comments(member_id: str) -> list[dict]:
        """
        Get comments on a member's profile as threads.

        Each root comment has a 'replies' list. Replies to replies are shown
        in the same thread with a "replying to" attribution.

        Args:
            member_id: The person whose profile was commented on

        Returns:
            List of root comments with nested replies
        """
        with tool_span("get_comments"):
            return _get_comments(member_id)

    @mcp.tool()
    def add_comment(
        member_id: str,
        content: str,
        parent_id: str | None = None,
        author_name: str | None = None,
        author_avatar_url: str | None = None,
    ) -> dict:
        """
        Comment on a member's profile, or reply to an existing comment.

        Args:
            member_id: The person being commented on
            content: Comment text
            parent_id: Optional ID of the comment being replied to
            author_name: Your display name, saved to your profile if it has none yet
            author_avatar_url: Your avatar URL, saved to your profile if it has none yet

        Returns:
            The stored comment
        """
        with tool_span("add_comment"):
            return _add_comment(
                member_id,
                content,
                parent_id,
                author_name=author_name,
                author_avatar_url=author_avatar_url,
            )

    @mcp.tool()
    def delete_comment(comment_id: str) -> bool:
        """
        Delete a comment. Administrators can delete any comment,
        members only their own.

        Args:
            comment_id: The comment's ID

        Returns:
            True if the comment was deleted
        """
        with tool_span("delete_comment"):
            return _delete_comment(comment_id)

    # ============== MEMBER TOOLS (4) ==============

    @mcp.tool()
    def set_default_root_node(person_id: str) -> dict:
        """
        Make a person the default root of the tree for everyone (admin only).

        Args:
            person_id: The person's ID

        Returns:
            Summary of the new default root
        """
        with tool_span("set_default_root_node"):
            return _set_default_root_node(person_id)

    @mcp.tool()
    def set_user_root_node(person_id: str) -> dict:
        """
        Save a person as your own starting point in the tree.

        Args:
            person_id: The person's ID

        Returns:
            The saved preference
        """
        with tool_span("set_user_root_node"):
            return _set_user_root_node(person_id)

    @mcp.tool()
    def update_member_note(person_id: str, note: str) -> dict:
        """
        Replace the note on a member's profile. An empty note clears it.

        Args:
            person_id: The person's ID
            note: New note text

        Returns:
            The updated person record
        """
        with tool_span("update_member_note"):
            return _update_member_note(person_id, note)

    @mcp.tool()
    def delete_member(person_id: str) -> bool:
        """
        Delete a member profile (admin only). All of the member's family
        relationships must be removed first.

        Args:
            person_id: The person's ID

        Returns:
            True if the member was deleted
        """
        with tool_span("delete_member"):
            return _delete_member(person_id)

    # ============== EDIT REQUEST TOOLS (4) ==============

    @mcp.tool()
    def submit_edit_request(person_id: str, content: str) -> dict:
        """
        Ask the administrators to correct a member's profile.

        Args:
            person_id: The person whose profile needs changes
            content: Description of the requested change

        Returns:
            The pending edit request
        """
        with tool_span("submit_edit_request"):
            return _submit_edit_request(person_id, content)

    @mcp.tool()
    def list_edit_requests(status: str | None = None, max_results: int = 100) -> list[dict]:
        """
        List edit requests, newest first. Administrators see every request,
        members see their own.

        Args:
            status: Optional filter: "pending", "approved" or "rejected"
            max_results: Maximum number of requests (default 100)

        Returns:
            List of edit requests with the person's name
        """
        with tool_span("list_edit_requests"):
            return _list_edit_requests(status=status, max_results=max_results)

    @mcp.tool()
    def approve_edit_request(request_id: str, admin_note: str | None = None) -> dict:
        """
        Approve a pending edit request (admin only).

        Args:
            request_id: The edit request's ID
            admin_note: Optional note for the requester

        Returns:
            The updated edit request
        """
        with tool_span("approve_edit_request"):
            return _approve_edit_request(request_id, admin_note)

    @mcp.tool()
    def reject_edit_request(request_id: str, admin_note: str | None = None) -> dict:
        """
        Reject a pending edit request (admin only).

        Args:
            request_id: The edit request's ID
            admin_note: Optional note for the requester

        Returns:
            The updated edit request
        """
        with tool_span("reject_edit_request"):
            return _reject_edit_request(request_id, admin_note)
