"""Snapshot-backed data store for family tree tables.

The data service is modelled as plain query and update operations over the
tables in ``state``. Reads return fresh lists so callers can reorder them
freely; writes go through the functions here so they can be persisted back
to the snapshot when FAMILY_TREE_PERSIST is enabled.
"""

import json
import logging
import os
import tempfile
from dataclasses import fields

from . import state
from .constants import GENDERS, RELATIONSHIP_TYPES, TABLES
from .helpers import sort_by_birth
from .models import EditRequest, Person, Profile, Relationship, UserComment, UserRootNode

logger = logging.getLogger(__name__)


def _build(cls, row: dict):
    """Build a dataclass from a snapshot row, ignoring unknown keys."""
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in row.items() if k in names})


def _parse_person(row: dict) -> Person | None:
    if not row.get("id"):
        logger.warning("Skipping person row without id")
        return None
    gender = row.get("gender") or "other"
    if gender not in GENDERS:
        logger.warning(f"Skipping person {row['id']}: unknown gender {gender!r}")
        return None
    person = _build(Person, {**row, "gender": gender})
    person.id = str(person.id)
    person.is_deceased = bool(person.is_deceased)
    person.is_in_law = bool(person.is_in_law)
    return person


def _parse_relationship(row: dict) -> Relationship | None:
    if not row.get("id") or not row.get("person_a") or not row.get("person_b"):
        logger.warning(f"Skipping incomplete relationship row: {row.get('id')!r}")
        return None
    if row.get("type") not in RELATIONSHIP_TYPES:
        logger.warning(f"Skipping relationship {row['id']}: unknown type {row.get('type')!r}")
        return None
    rel = _build(Relationship, row)
    rel.person_a = str(rel.person_a)
    rel.person_b = str(rel.person_b)
    return rel


def _parse_row(cls, row: dict, key: str = "id"):
    if not row.get(key):
        logger.warning(f"Skipping {cls.__name__} row without {key}")
        return None
    return _build(cls, row)


def load_family_data() -> None:
    """Read the snapshot file into the in-memory tables.

    Requires configure() to be called first to set state.DATA_FILE.
    Any previously loaded data is discarded.
    """
    if state.DATA_FILE is None:
        raise RuntimeError("configure() must be called before load_family_data()")
    if not state.DATA_FILE.exists():
        raise FileNotFoundError(f"Family data file not found: {state.DATA_FILE}")

    with open(state.DATA_FILE, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Family data file must contain a JSON object: {state.DATA_FILE}")

    unknown = sorted(set(data) - set(TABLES))
    if unknown:
        logger.warning(f"Ignoring unknown tables in family data: {', '.join(unknown)}")

    state.clear()

    for row in data.get("persons") or []:
        person = _parse_person(row)
        if person:
            state.persons[person.id] = person

    for row in data.get("relationships") or []:
        rel = _parse_relationship(row)
        if rel:
            state.relationships[rel.id] = rel

    for row in data.get("profiles") or []:
        profile = _parse_row(Profile, row)
        if profile:
            state.profiles[profile.id] = profile

    # Comments are kept in created_at order, matching the service's default query
    comment_rows = sorted(data.get("user_comments") or [], key=lambda r: r.get("created_at") or "")
    for row in comment_rows:
        comment = _parse_row(UserComment, row)
        if comment:
            state.user_comments[comment.id] = comment

    for row in data.get("edit_requests") or []:
        request = _parse_row(EditRequest, row)
        if request:
            state.edit_requests[request.id] = request

    for row in data.get("user_root_node") or []:
        root = _parse_row(UserRootNode, row, key="user_id")
        if root:
            state.user_root_nodes[root.user_id] = root

    logger.info(
        f"Loaded {len(state.persons)} persons, {len(state.relationships)} relationships, "
        f"{len(state.user_comments)} comments from {state.DATA_FILE}"
    )


def dump_family_data() -> dict:
    """Serialize the in-memory tables back to snapshot form."""
    return {
        "persons": [p.to_dict() for p in state.persons.values()],
        "relationships": [r.to_dict() for r in state.relationships.values()],
        "profiles": [p.to_dict() for p in state.profiles.values()],
        "user_comments": [c.to_dict() for c in state.user_comments.values()],
        "edit_requests": [e.to_dict() for e in state.edit_requests.values()],
        "user_root_node": [u.to_dict() for u in state.user_root_nodes.values()],
    }


def persist() -> None:
    """Write the tables back to the snapshot file if persistence is enabled."""
    if not state.PERSIST or state.DATA_FILE is None:
        return

    data = dump_family_data()
    fd, tmp_path = tempfile.mkstemp(dir=state.DATA_FILE.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, state.DATA_FILE)
    except OSError:
        os.unlink(tmp_path)
        raise
    logger.debug(f"Persisted family data to {state.DATA_FILE}")


# ============== QUERIES ==============


def select_persons() -> list[Person]:
    """All persons ordered by birth year ascending, unknown years last."""
    return sort_by_birth(state.persons.values())


def select_relationships() -> list[Relationship]:
    return list(state.relationships.values())


def select_relationships_for(person_id: str) -> list[Relationship]:
    """Relationships where the person appears on either side."""
    return [
        r for r in state.relationships.values() if person_id in (r.person_a, r.person_b)
    ]


def select_comments(member_id: str) -> list[UserComment]:
    """Comments on a member, ordered by created_at ascending."""
    return [c for c in state.user_comments.values() if c.member_id == member_id]


def get_profile(user_id: str | None) -> Profile | None:
    if not user_id:
        return None
    return state.profiles.get(user_id)


def get_user_root_id(user_id: str | None) -> str | None:
    if not user_id:
        return None
    row = state.user_root_nodes.get(user_id)
    return row.root_node_id if row else None


# ============== UPDATES ==============


def insert_comment(comment: UserComment) -> None:
    state.user_comments[comment.id] = comment
    persist()


def delete_comment(comment_id: str) -> bool:
    removed = state.user_comments.pop(comment_id, None) is not None
    if removed:
        persist()
    return removed


def update_person(person_id: str, **changes) -> Person:
    person = state.persons.get(person_id)
    if person is None:
        raise ValueError(f"Person {person_id} not found")
    for key, value in changes.items():
        setattr(person, key, value)
    persist()
    return person


def reset_default_root() -> None:
    """Clear the default root flag on every person."""
    for person in state.persons.values():
        person.is_default_root_node = None
    persist()


def delete_person(person_id: str) -> bool:
    removed = state.persons.pop(person_id, None) is not None
    if removed:
        persist()
    return removed


def upsert_profile(profile: Profile) -> None:
    state.profiles[profile.id] = profile
    persist()


def upsert_user_root(row: UserRootNode) -> None:
    """Insert or replace the user's root node row (conflict key: user_id)."""
    existing = state.user_root_nodes.get(row.user_id)
    if existing and existing.created_at:
        row.created_at = existing.created_at
    elif not row.created_at:
        row.created_at = row.updated_at
    state.user_root_nodes[row.user_id] = row
    persist()


def insert_edit_request(request: EditRequest) -> None:
    state.edit_requests[request.id] = request
    persist()


def update_edit_request(request_id: str, **changes) -> EditRequest:
    request = state.edit_requests.get(request_id)
    if request is None:
        raise ValueError(f"Edit request {request_id} not found")
    for key, value in changes.items():
        setattr(request, key, value)
    persist()
    return request
