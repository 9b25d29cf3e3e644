"""Tree shaping over flat person and relationship rows.

Everything here is pure: functions take already-fetched rows, never touch
``state``, never raise on malformed data, and return fresh structures.
"""

import logging
from collections import deque
from collections.abc import Iterable, Sequence

from .constants import CHILD_RELATIONSHIP_TYPES, MARRIAGE
from .helpers import birth_order_key, sort_by_birth
from .models import Person, Relationship

logger = logging.getLogger(__name__)


def _child_edges(relationships: Iterable[Relationship]) -> list[Relationship]:
    return [r for r in relationships if r.type in CHILD_RELATIONSHIP_TYPES]


def child_ids(relationships: Iterable[Relationship]) -> set[str]:
    """Ids that appear as the child in any child-type edge."""
    return {r.person_b for r in _child_edges(relationships)}


def build_children_map(relationships: Iterable[Relationship]) -> dict[str, list[str]]:
    """Map parent id -> child ids, in relationship order."""
    children: dict[str, list[str]] = {}
    for rel in _child_edges(relationships):
        children.setdefault(rel.person_a, []).append(rel.person_b)
    return children


def topological_roots(
    persons: Iterable[Person], relationships: Iterable[Relationship]
) -> list[Person]:
    """Persons with no recorded parent, in birth order."""
    has_parent = child_ids(relationships)
    return [p for p in sort_by_birth(persons) if p.id not in has_parent]


def resolve_root_id(
    persons: Sequence[Person],
    relationships: Iterable[Relationship],
    explicit_id: str | None = None,
    user_root_id: str | None = None,
) -> str | None:
    """Pick the person that anchors tree rendering.

    Hints are tried in priority order and skipped when they do not name an
    existing person:

    1. ``explicit_id`` (e.g. a URL parameter)
    2. ``user_root_id`` (the caller's saved preference)
    3. the first person flagged ``is_default_root_node``
    4. the first male topological root, else the first topological root,
       else the first person

    Persons are ordered by birth year (unknown last) before any "first"
    choice, so the result does not depend on the caller's ordering.

    Returns:
        A person id, or None when ``persons`` is empty.
    """
    ordered = sort_by_birth(persons)
    if not ordered:
        return None

    known = {p.id for p in ordered}
    for hint in (explicit_id, user_root_id):
        if hint and hint in known:
            return hint

    for person in ordered:
        if person.is_default_root_node is True:
            return person.id

    roots = topological_roots(ordered, relationships)
    for person in roots:
        if person.gender == "male":
            return person.id
    if roots:
        return roots[0].id
    return ordered[0].id


def assign_generations(
    persons: Iterable[Person], relationships: Iterable[Relationship]
) -> dict[str, int]:
    """Generation of every person reachable from a topological root.

    Breadth-first from every root at once (each at generation 1), so
    disconnected trees are all covered and the first visit to a person
    fixes its generation. Persons only reachable through a cycle with no
    root feeding it are absent from the result.
    """
    relationships = list(relationships)
    children = build_children_map(relationships)
    has_parent = child_ids(relationships)

    queue = deque((p.id, 1) for p in persons if p.id not in has_parent)
    generations: dict[str, int] = {}

    while queue:
        person_id, gen = queue.popleft()
        if person_id in generations:
            continue
        generations[person_id] = gen
        for child_id in children.get(person_id, []):
            queue.append((child_id, gen + 1))
    return generations


def count_generations(persons: Iterable[Person], relationships: Iterable[Relationship]) -> int:
    """Deepest generation across the whole forest (a root is generation 1)."""
    persons = list(persons)
    generations = assign_generations(persons, relationships)
    skipped = sum(1 for p in persons if p.id not in generations)
    if skipped:
        logger.debug(f"{skipped} persons unreachable from any root, left out of the count")
    return max(generations.values(), default=0)


def build_descendant_tree(
    root_id: str | None,
    persons: Iterable[Person],
    relationships: Iterable[Relationship],
    max_depth: int,
) -> dict | None:
    """Nested descendant tree for rendering, starting at ``root_id``.

    Each node is a person summary with ``spouses`` and ``children``. Children
    are ordered by the edge's sort_order (unset last), then birth order.
    A person already placed in the tree is not expanded a second time.
    """
    by_id = {p.id: p for p in persons}
    if not root_id or root_id not in by_id:
        return None

    relationships = list(relationships)
    edges_by_parent: dict[str, list[Relationship]] = {}
    for rel in _child_edges(relationships):
        if rel.person_b in by_id:
            edges_by_parent.setdefault(rel.person_a, []).append(rel)

    spouses_of: dict[str, list[Relationship]] = {}
    for rel in relationships:
        if rel.type == MARRIAGE:
            spouses_of.setdefault(rel.person_a, []).append(rel)
            spouses_of.setdefault(rel.person_b, []).append(rel)

    placed: set[str] = set()

    def child_key(rel: Relationship):
        order = rel.sort_order if rel.sort_order is not None else float("inf")
        return (order, birth_order_key(by_id[rel.person_b]))

    def build(person_id: str, depth: int) -> dict:
        placed.add(person_id)
        node = by_id[person_id].to_summary()
        node["generation"] = depth

        spouses = []
        for rel in spouses_of.get(person_id, []):
            spouse_id = rel.person_b if rel.person_a == person_id else rel.person_a
            spouse = by_id.get(spouse_id)
            if spouse:
                info = spouse.to_summary()
                info["note"] = rel.note
                spouses.append(info)
        node["spouses"] = spouses

        node["children"] = []
        if depth < max_depth:
            for rel in sorted(edges_by_parent.get(person_id, []), key=child_key):
                child_id = rel.person_b
                if child_id in placed:
                    continue
                child = build(child_id, depth + 1)
                child["relationship_type"] = rel.type
                node["children"].append(child)
        return node

    return build(root_id, 1)
