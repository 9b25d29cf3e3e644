"""Core logic functions for querying family tree data."""

from rapidfuzz import fuzz, process

from . import state, store
from .constants import CHILD_RELATIONSHIP_TYPES, MARRIAGE, PRIVATE_PERSON_FIELDS
from .helpers import calculate_age, format_display_date, normalize_id
from .tree import (
    assign_generations,
    build_descendant_tree,
    count_generations,
    resolve_root_id,
    topological_roots,
)


def _can_see_private(user_id: str | None) -> bool:
    profile = store.get_profile(user_id or state.ACTING_USER_ID)
    return profile is not None and profile.is_active


def _person_view(person, include_private: bool) -> dict:
    result = person.to_dict()
    if not include_private:
        for key in PRIVATE_PERSON_FIELDS:
            result.pop(key, None)
    result["birth_display"] = format_display_date(
        person.birth_year, person.birth_month, person.birth_day
    )
    result["death_display"] = format_display_date(
        person.death_year, person.death_month, person.death_day
    )
    result["age"] = calculate_age(person.birth_year, person.death_year)
    return result


def _get_person(person_id: str, user_id: str | None = None) -> dict | None:
    """Full person record; private fields only for active members."""
    person = state.persons.get(normalize_id(person_id) or "")
    if not person:
        return None
    return _person_view(person, _can_see_private(user_id))


def _search_persons(name: str, max_results: int = 50, threshold: int = 80) -> list[dict]:
    """Find persons by name: substring matches first, then fuzzy matches."""
    query = name.strip().lower()
    if not query or max_results <= 0:
        return []

    ordered = store.select_persons()
    results = []
    seen = set()
    for person in ordered:
        if query in person.full_name.lower():
            results.append(person.to_summary())
            seen.add(person.id)
            if len(results) >= max_results:
                return results

    remaining = [p for p in ordered if p.id not in seen]
    matches = process.extract(
        query,
        [p.full_name.lower() for p in remaining],
        scorer=fuzz.WRatio,
        limit=max_results - len(results),
        score_cutoff=threshold,
    )
    for _, score, index in matches:
        summary = remaining[index].to_summary()
        summary["match_score"] = round(score, 1)
        results.append(summary)
    return results


def _get_parents(person_id: str) -> list[dict]:
    lookup_id = normalize_id(person_id) or ""
    parents = []
    for rel in store.select_relationships_for(lookup_id):
        if rel.type in CHILD_RELATIONSHIP_TYPES and rel.person_b == lookup_id:
            parent = state.persons.get(rel.person_a)
            if parent:
                info = parent.to_summary()
                info["relationship_type"] = rel.type
                parents.append(info)
    return parents


def _get_children(person_id: str) -> list[dict]:
    lookup_id = normalize_id(person_id) or ""
    children = []
    edges = [
        r
        for r in store.select_relationships_for(lookup_id)
        if r.type in CHILD_RELATIONSHIP_TYPES and r.person_a == lookup_id
    ]
    edges.sort(key=lambda r: r.sort_order if r.sort_order is not None else float("inf"))
    for rel in edges:
        child = state.persons.get(rel.person_b)
        if child:
            info = child.to_summary()
            info["relationship_type"] = rel.type
            children.append(info)
    return children


def _get_spouses(person_id: str) -> list[dict]:
    lookup_id = normalize_id(person_id) or ""
    spouses = []
    for rel in store.select_relationships_for(lookup_id):
        if rel.type != MARRIAGE:
            continue
        spouse_id = rel.person_b if rel.person_a == lookup_id else rel.person_a
        spouse = state.persons.get(spouse_id)
        if spouse:
            info = spouse.to_summary()
            info["relationship_id"] = rel.id
            info["note"] = rel.note
            spouses.append(info)
    return spouses


def _list_members(max_results: int = 500) -> list[dict]:
    """Member list in birth order, unknown birth years last."""
    return [p.to_summary() for p in store.select_persons()[:max_results]]


def _resolve_root(root_id: str | None = None, user_id: str | None = None) -> str | None:
    user_id = normalize_id(user_id) or state.ACTING_USER_ID
    return resolve_root_id(
        store.select_persons(),
        store.select_relationships(),
        explicit_id=normalize_id(root_id),
        user_root_id=store.get_user_root_id(user_id),
    )


def _get_root_person(root_id: str | None = None, user_id: str | None = None) -> dict | None:
    """The person the tree is drawn from, after applying all root hints."""
    resolved = _resolve_root(root_id, user_id)
    if resolved is None:
        return None
    return state.persons[resolved].to_summary()


def _get_tree(
    root_id: str | None = None, user_id: str | None = None, generations: int | None = None
) -> dict:
    """Descendant tree from the resolved root, plus whole-tree statistics."""
    limit = state.TREE_DEPTH_LIMIT
    if generations is not None:
        limit = min(generations, limit)
    persons = store.select_persons()
    relationships = store.select_relationships()
    resolved = _resolve_root(root_id, user_id)
    return {
        "root_id": resolved,
        "tree": build_descendant_tree(resolved, persons, relationships, max(limit, 1)),
        "total_members": len(persons),
        "generations": count_generations(persons, relationships),
    }


def _get_statistics() -> dict:
    persons = store.select_persons()
    relationships = store.select_relationships()

    males = sum(1 for p in persons if p.gender == "male")
    females = sum(1 for p in persons if p.gender == "female")
    birth_years = [p.birth_year for p in persons if p.birth_year]
    generations = assign_generations(persons, relationships)

    return {
        "total_members": len(persons),
        "generations": max(generations.values(), default=0),
        "males": males,
        "females": females,
        "other_gender": len(persons) - males - females,
        "deceased": sum(1 for p in persons if p.is_deceased),
        "in_laws": sum(1 for p in persons if p.is_in_law),
        "marriages": sum(1 for r in relationships if r.type == MARRIAGE),
        "root_count": len(topological_roots(persons, relationships)),
        "unreachable_count": sum(1 for p in persons if p.id not in generations),
        "earliest_birth_year": min(birth_years) if birth_years else None,
        "latest_birth_year": max(birth_years) if birth_years else None,
    }
