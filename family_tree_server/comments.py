"""Member profile comments: threading for display and the reply write path.

Threads are two levels deep on screen. The threader itself keeps whatever
``parent_id`` values it is given; the two-level shape comes from
``_add_comment``, which re-parents a reply-to-a-reply onto the root comment
and records who was being answered in ``reply_to_user_id``.
"""

import logging
import re
from collections.abc import Iterable

from . import state, store
from .constants import DEFAULT_AUTHOR_NAME, REPLY_PREFIX_PATTERN, REPLY_PREFIX_TEMPLATE
from .helpers import new_id, normalize_id, now_iso, time_ago
from .models import Profile, UserComment

logger = logging.getLogger(__name__)

_REPLY_PREFIX_RE = re.compile(REPLY_PREFIX_PATTERN)


def thread_comments(comments: Iterable[UserComment]) -> list[dict]:
    """Arrange flat comments into root comments with nested ``replies``.

    Input order is kept at every level, so pass comments sorted by created_at.
    A comment whose parent is not in ``comments`` is shown at root level,
    and so is the first comment of any parent cycle.
    """
    nodes: dict[str, dict] = {}
    for comment in comments:
        node = comment.to_dict()
        node["replies"] = []
        nodes[comment.id] = node

    root_ids: set[str] = set()
    for node in nodes.values():
        parent_id = node["parent_id"]
        if parent_id and parent_id in nodes and parent_id != node["id"]:
            nodes[parent_id]["replies"].append(node)
        else:
            if parent_id:
                logger.debug(f"Comment {node['id']} has missing parent {parent_id}; shown at root")
            root_ids.add(node["id"])

    reached: set[str] = set()

    def mark(node: dict) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            if current["id"] not in reached:
                reached.add(current["id"])
                stack.extend(current["replies"])

    for node_id in root_ids:
        mark(nodes[node_id])

    # Parent links that loop back (a -> b -> a) never reach a root
    for node in nodes.values():
        if node["id"] in reached:
            continue
        parent = nodes[node["parent_id"]]
        parent["replies"] = [r for r in parent["replies"] if r is not node]
        logger.debug(f"Comment {node['id']} is in a parent cycle; shown at root")
        root_ids.add(node["id"])
        mark(node)

    return [node for node in nodes.values() if node["id"] in root_ids]


def split_reply_prefix(content: str) -> tuple[str | None, str]:
    """Split a legacy '_replying to X:_ ' prefix from stored content.

    Returns:
        (addressee name or None, remaining content)
    """
    match = _REPLY_PREFIX_RE.match(content)
    if not match:
        return None, content
    return match.group("name"), content[match.end() :]


def display_name(user_id: str | None) -> str:
    profile = store.get_profile(user_id)
    if profile and profile.full_name:
        return profile.full_name
    return DEFAULT_AUTHOR_NAME


def render_content(comment: dict) -> str:
    """Content as displayed, with the reply attribution in front."""
    legacy_name, text = split_reply_prefix(comment["content"])
    if comment.get("reply_to_user_id"):
        name = display_name(comment["reply_to_user_id"])
    elif legacy_name:
        name = legacy_name
    else:
        return text
    return REPLY_PREFIX_TEMPLATE.format(name=name) + text


def _decorate(node: dict) -> dict:
    profile = store.get_profile(node["user_id"])
    node["author_name"] = display_name(node["user_id"])
    node["author_avatar_url"] = profile.avatar_url if profile else None
    node["reply_to_name"] = (
        display_name(node["reply_to_user_id"])
        if node["reply_to_user_id"]
        else split_reply_prefix(node["content"])[0]
    )
    node["display_content"] = render_content(node)
    node["time_ago"] = time_ago(node["created_at"]) if node["created_at"] else None
    for reply in node["replies"]:
        _decorate(reply)
    return node


def _get_comments(member_id: str) -> list[dict]:
    """Threaded comments on a member, with author names for display."""
    member_id = normalize_id(member_id) or ""
    return [_decorate(node) for node in thread_comments(store.select_comments(member_id))]


def _sync_profile_name(user_id: str, author_name: str | None, author_avatar_url: str | None):
    """Fill in a missing profile name/avatar from what the client knows."""
    profile = store.get_profile(user_id)
    if profile is None:
        return
    if (profile.full_name or not author_name) and (profile.avatar_url or not author_avatar_url):
        return
    profile.full_name = profile.full_name or author_name
    profile.avatar_url = profile.avatar_url or author_avatar_url
    profile.updated_at = now_iso()
    store.upsert_profile(profile)


def _add_comment(
    member_id: str,
    content: str,
    parent_id: str | None = None,
    user_id: str | None = None,
    author_name: str | None = None,
    author_avatar_url: str | None = None,
) -> dict:
    """Post a comment on a member's profile.

    Replying to a comment that is itself a reply attaches the new comment
    to the root comment instead and records the reply's author as the
    addressee, so threads never grow past two levels.

    Raises:
        PermissionError: If nobody is logged in.
        ValueError: If the member does not exist or content is empty.
    """
    user_id = normalize_id(user_id) or state.ACTING_USER_ID
    if not user_id:
        raise PermissionError("Please log in to comment.")

    member_id = normalize_id(member_id) or ""
    if member_id not in state.persons:
        raise ValueError(f"Person {member_id} not found")

    text = content.strip()
    if not text:
        raise ValueError("Comment content cannot be empty")

    _sync_profile_name(user_id, author_name, author_avatar_url)

    final_parent_id = normalize_id(parent_id)
    reply_to_user_id = None
    if final_parent_id:
        parent = state.user_comments.get(final_parent_id)
        if parent and parent.parent_id:
            final_parent_id = parent.parent_id
            reply_to_user_id = parent.user_id

    comment = UserComment(
        id=new_id(),
        member_id=member_id,
        user_id=user_id,
        content=text,
        parent_id=final_parent_id,
        reply_to_user_id=reply_to_user_id,
        created_at=now_iso(),
    )
    store.insert_comment(comment)
    logger.info(f"User {user_id} commented on {member_id} (parent={final_parent_id})")
    return comment.to_dict()


def _delete_comment(comment_id: str, user_id: str | None = None) -> bool:
    """Delete a comment. Admins may delete any; others only their own.

    Returns:
        True if a comment was removed, False if none matched.

    Raises:
        PermissionError: If nobody is logged in.
    """
    user_id = normalize_id(user_id) or state.ACTING_USER_ID
    if not user_id:
        raise PermissionError("Please log in.")

    comment = state.user_comments.get(normalize_id(comment_id) or "")
    if comment is None:
        return False

    profile: Profile | None = store.get_profile(user_id)
    is_admin = profile is not None and profile.is_admin
    if not is_admin and comment.user_id != user_id:
        return False

    removed = store.delete_comment(comment.id)
    if removed:
        logger.info(f"User {user_id} deleted comment {comment.id}")
    return removed
