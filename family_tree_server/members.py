"""Member and administrator mutations: notes, root nodes, edit requests."""

import logging

from . import state, store
from .constants import EDIT_REQUEST_STATUSES, STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED
from .helpers import new_id, normalize_id, now_iso
from .models import EditRequest, Profile, UserRootNode

logger = logging.getLogger(__name__)


def _require_user(user_id: str | None) -> str:
    user_id = normalize_id(user_id) or state.ACTING_USER_ID
    if not user_id:
        raise PermissionError("Please log in.")
    return user_id


def _require_active(user_id: str | None) -> Profile:
    user_id = _require_user(user_id)
    profile = store.get_profile(user_id)
    if profile is None or not profile.is_active:
        raise PermissionError("Account is not activated yet.")
    return profile


def _require_admin(user_id: str | None, action: str) -> Profile:
    user_id = _require_user(user_id)
    profile = store.get_profile(user_id)
    if profile is None or not profile.is_admin:
        raise PermissionError(f"Only administrators can {action}.")
    return profile


def _require_person(person_id: str) -> str:
    person_id = normalize_id(person_id) or ""
    if person_id not in state.persons:
        raise ValueError(f"Person {person_id} not found")
    return person_id


# ============== ROOT NODES ==============


def _set_default_root_node(person_id: str, user_id: str | None = None) -> dict:
    """Make one person the tree's default root. Admin only.

    Clears every existing flag first, then sets the chosen person.
    """
    admin = _require_admin(user_id, "change the default root")
    person_id = _require_person(person_id)

    store.reset_default_root()
    person = store.update_person(person_id, is_default_root_node=True, updated_at=now_iso())
    logger.info(f"Admin {admin.id} set default root to {person_id}")
    return person.to_summary()


def _set_user_root_node(person_id: str, user_id: str | None = None) -> dict:
    """Save the caller's own preferred root (one row per user)."""
    user_id = _require_user(user_id)
    person_id = _require_person(person_id)

    row = UserRootNode(user_id=user_id, root_node_id=person_id, updated_at=now_iso())
    store.upsert_user_root(row)
    logger.info(f"User {user_id} set personal root to {person_id}")
    return row.to_dict()


# ============== PERSON EDITS ==============


def _update_member_note(person_id: str, note: str, user_id: str | None = None) -> dict:
    """Replace a member's note. Blank notes are stored as None."""
    _require_active(user_id)
    person_id = _require_person(person_id)
    person = store.update_person(person_id, note=note.strip() or None, updated_at=now_iso())
    logger.info(f"Updated note for {person_id}")
    return person.to_dict()


def _delete_member(person_id: str, user_id: str | None = None) -> bool:
    """Delete a person. Admin only, and only once no relationships remain.

    Raises:
        PermissionError: If the caller is not an administrator.
        ValueError: If the person still has relationships or does not exist.
    """
    admin = _require_admin(user_id, "delete profiles")
    person_id = _require_person(person_id)

    if store.select_relationships_for(person_id):
        raise ValueError(
            "Cannot delete: remove all family relationships of this person first."
        )

    removed = store.delete_person(person_id)
    logger.info(f"Admin {admin.id} deleted person {person_id}")
    return removed


# ============== EDIT REQUESTS ==============


def _request_view(request: EditRequest) -> dict:
    result = request.to_dict()
    person = state.persons.get(request.person_id)
    result["person_name"] = person.full_name if person else None
    return result


def _submit_edit_request(person_id: str, content: str, user_id: str | None = None) -> dict:
    profile = _require_active(user_id)
    person_id = _require_person(person_id)

    text = content.strip()
    if not text:
        raise ValueError("Edit request content cannot be empty")

    timestamp = now_iso()
    request = EditRequest(
        id=new_id(),
        person_id=person_id,
        user_id=profile.id,
        content=text,
        status=STATUS_PENDING,
        created_at=timestamp,
        updated_at=timestamp,
    )
    store.insert_edit_request(request)
    logger.info(f"User {profile.id} submitted edit request {request.id} for {person_id}")
    return _request_view(request)


def _list_edit_requests(
    user_id: str | None = None, status: str | None = None, max_results: int = 100
) -> list[dict]:
    """Edit requests, newest first. Admins see all, members their own.

    Raises:
        PermissionError: If nobody is logged in.
        ValueError: If status is not one of pending, approved or rejected.
    """
    user_id = _require_user(user_id)
    if status is not None and status not in EDIT_REQUEST_STATUSES:
        raise ValueError(
            f"Unknown status {status!r}; expected one of {', '.join(EDIT_REQUEST_STATUSES)}"
        )
    profile = store.get_profile(user_id)
    is_admin = profile is not None and profile.is_admin

    requests = [
        r
        for r in state.edit_requests.values()
        if (is_admin or r.user_id == user_id) and (status is None or r.status == status)
    ]
    requests.sort(key=lambda r: r.created_at or "", reverse=True)
    return [_request_view(r) for r in requests[:max_results]]


def _resolve_edit_request(
    request_id: str, status: str, admin_note: str | None, user_id: str | None
) -> dict:
    verb = "approve" if status == STATUS_APPROVED else "reject"
    admin = _require_admin(user_id, f"{verb} edit requests")

    request_id = normalize_id(request_id) or ""
    request = state.edit_requests.get(request_id)
    if request is None:
        raise ValueError(f"Edit request {request_id} not found")
    if request.status != STATUS_PENDING:
        raise ValueError(f"Edit request {request_id} is already {request.status}")

    request = store.update_edit_request(
        request_id,
        status=status,
        admin_note=(admin_note or "").strip() or None,
        updated_at=now_iso(),
    )
    logger.info(f"Admin {admin.id} marked edit request {request_id} as {status}")
    return _request_view(request)


def _approve_edit_request(
    request_id: str, admin_note: str | None = None, user_id: str | None = None
) -> dict:
    return _resolve_edit_request(request_id, STATUS_APPROVED, admin_note, user_id)


def _reject_edit_request(
    request_id: str, admin_note: str | None = None, user_id: str | None = None
) -> dict:
    return _resolve_edit_request(request_id, STATUS_REJECTED, admin_note, user_id)
