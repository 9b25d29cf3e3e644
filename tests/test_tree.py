"""Tests for root resolution, generation counting and tree shaping."""

import logging

from family_tree_server.tree import (
    assign_generations,
    build_children_map,
    build_descendant_tree,
    count_generations,
    resolve_root_id,
    topological_roots,
)


class TestResolveRootFallback:
    """Tests for the computed fallback when no hints apply."""

    def test_empty_persons_returns_none(self):
        """Should return None, not raise, for an empty tree."""
        assert resolve_root_id([], []) is None

    def test_empty_persons_ignores_hints(self):
        """Hints can't resolve anything when there are no persons."""
        assert resolve_root_id([], [], explicit_id="p1", user_root_id="p2") is None

    def test_male_root_preferred_over_earlier_female_root(self, make_person):
        """A male topological root beats an older non-male one."""
        persons = [
            make_person("f", gender="female", birth_year=1890),
            make_person("m", gender="male", birth_year=1900),
        ]
        assert resolve_root_id(persons, []) == "m"

    def test_first_root_when_no_male_root(self, make_person):
        """Should take the first topological root in birth order."""
        persons = [
            make_person("b", gender="female", birth_year=1910),
            make_person("a", gender="other", birth_year=1905),
        ]
        assert resolve_root_id(persons, []) == "a"

    def test_children_are_not_roots(self, make_person, child_of):
        """A male child is skipped in favour of a female root."""
        persons = [
            make_person("mother", gender="female", birth_year=1900),
            make_person("son", gender="male", birth_year=1880),
        ]
        rels = [child_of("mother", "son")]
        assert resolve_root_id(persons, rels) == "mother"

    def test_marriage_edges_do_not_make_children(self, make_person, married):
        """Marriage is not hierarchical; both spouses remain roots."""
        persons = [
            make_person("wife", gender="female", birth_year=1900),
            make_person("husband", gender="male", birth_year=1902),
        ]
        assert resolve_root_id(persons, [married("wife", "husband")]) == "husband"

    def test_first_person_when_no_topological_roots(self, make_person, child_of):
        """A fully cyclic graph falls back to the first person."""
        persons = [
            make_person("x", gender="female", birth_year=1950),
            make_person("y", gender="female", birth_year=1940),
        ]
        rels = [child_of("x", "y"), child_of("y", "x")]
        assert resolve_root_id(persons, rels) == "y"

    def test_unknown_birth_year_sorts_last(self, make_person):
        """Persons without a birth year come after dated persons."""
        persons = [
            make_person("undated", birth_year=None),
            make_person("dated", birth_year=1990),
        ]
        assert resolve_root_id(persons, []) == "dated"

    def test_ties_keep_input_order(self, make_person):
        """Equal birth years keep the caller's order."""
        persons = [make_person("first", birth_year=1900), make_person("second", birth_year=1900)]
        assert resolve_root_id(persons, []) == "first"

    def test_input_order_does_not_matter_for_distinct_years(self, make_person):
        """Result is the same however the caller ordered the list."""
        persons = [
            make_person("young", birth_year=1950),
            make_person("old", birth_year=1900),
            make_person("mid", birth_year=1925),
        ]
        assert resolve_root_id(persons, []) == "old"
        assert resolve_root_id(list(reversed(persons)), []) == "old"


class TestResolveRootHints:
    """Tests for the hint priority chain."""

    def _persons(self, make_person):
        return [
            make_person("eldest", birth_year=1900),
            make_person("flagged", birth_year=1920, is_default_root_node=True),
            make_person("saved", birth_year=1940),
            make_person("asked", birth_year=1960),
        ]

    def test_explicit_id_wins(self, make_person):
        persons = self._persons(make_person)
        assert resolve_root_id(persons, [], explicit_id="asked", user_root_id="saved") == "asked"

    def test_user_root_beats_default(self, make_person):
        persons = self._persons(make_person)
        assert resolve_root_id(persons, [], user_root_id="saved") == "saved"

    def test_default_beats_fallback(self, make_person):
        persons = self._persons(make_person)
        assert resolve_root_id(persons, []) == "flagged"

    def test_unknown_explicit_id_skipped(self, make_person):
        """An explicit id not in persons falls through to the next tier."""
        persons = self._persons(make_person)
        assert resolve_root_id(persons, [], explicit_id="ghost", user_root_id="saved") == "saved"

    def test_unknown_user_root_skipped(self, make_person):
        persons = self._persons(make_person)
        assert resolve_root_id(persons, [], user_root_id="ghost") == "flagged"

    def test_false_default_flag_ignored(self, make_person):
        """Only True counts as the default flag."""
        persons = [
            make_person("a", birth_year=1900, is_default_root_node=False),
            make_person("b", birth_year=1950),
        ]
        assert resolve_root_id(persons, []) == "a"

    def test_first_of_multiple_default_flags(self, make_person):
        """With several flags set, the first in birth order wins."""
        persons = [
            make_person("later", birth_year=1950, is_default_root_node=True),
            make_person("earlier", birth_year=1930, is_default_root_node=True),
        ]
        assert resolve_root_id(persons, []) == "earlier"

    def test_idempotent(self, make_person, child_of):
        """Same inputs give the same answer, and inputs are not modified."""
        persons = self._persons(make_person)
        rels = [child_of("eldest", "saved")]
        before = [p.id for p in persons]
        first = resolve_root_id(persons, rels, user_root_id="saved")
        second = resolve_root_id(persons, rels, user_root_id="saved")
        assert first == second
        assert [p.id for p in persons] == before


class TestCountGenerations:
    """Tests for the breadth-first generation counter."""

    def test_empty_is_zero(self):
        assert count_generations([], []) == 0

    def test_single_person_is_one(self, make_person):
        assert count_generations([make_person("solo")], []) == 1

    def test_linear_chain(self, make_person, child_of):
        """A chain of N persons has N generations."""
        ids = [f"g{i}" for i in range(7)]
        persons = [make_person(i) for i in ids]
        rels = [child_of(a, b) for a, b in zip(ids, ids[1:])]
        assert count_generations(persons, rels) == 7

    def test_disconnected_chains(self, make_person, child_of):
        """Reports the deepest component: chains of 3 and 5 give 5."""
        short = [f"s{i}" for i in range(3)]
        long = [f"l{i}" for i in range(5)]
        persons = [make_person(i) for i in short + long]
        rels = [child_of(a, b) for a, b in zip(short, short[1:])]
        rels += [child_of(a, b) for a, b in zip(long, long[1:])]
        assert count_generations(persons, rels) == 5

    def test_marriage_does_not_add_generations(self, make_person, married):
        persons = [make_person("a"), make_person("b", gender="female")]
        assert count_generations(persons, [married("a", "b")]) == 1

    def test_adopted_children_count(self, make_person, child_of):
        persons = [make_person("parent"), make_person("kid")]
        rels = [child_of("parent", "kid", type="adopted_child")]
        assert count_generations(persons, rels) == 2

    def test_child_with_two_parents_counted_once(self, make_person, child_of):
        persons = [make_person("dad"), make_person("mum", gender="female"), make_person("kid")]
        rels = [child_of("dad", "kid"), child_of("mum", "kid")]
        assert count_generations(persons, rels) == 2

    def test_unreachable_cycle_excluded(self, make_person, child_of):
        """A cycle no root leads to is left out of the count."""
        persons = [make_person("root"), make_person("x"), make_person("y"), make_person("z")]
        rels = [child_of("x", "y"), child_of("y", "z"), child_of("z", "x")]
        assert count_generations(persons, rels) == 1

    def test_cycle_below_root_terminates(self, make_person, child_of):
        persons = [make_person("root"), make_person("a"), make_person("b")]
        rels = [child_of("root", "a"), child_of("a", "b"), child_of("b", "a")]
        assert count_generations(persons, rels) == 3

    def test_end_to_end_two_person_example(self, make_person, child_of):
        """Male root born 1900 with a daughter born 1925."""
        persons = [
            make_person("1", gender="male", birth_year=1900),
            make_person("2", gender="female", birth_year=1925),
        ]
        rels = [child_of("1", "2")]
        assert resolve_root_id(persons, rels) == "1"
        assert count_generations(persons, rels) == 2

    def test_idempotent(self, make_person, child_of):
        persons = [make_person("a"), make_person("b")]
        rels = [child_of("a", "b")]
        assert count_generations(persons, rels) == count_generations(persons, rels) == 2

    def test_unreachable_logged_at_debug_only(self, caplog, make_person, child_of):
        """Unreachable persons are reported through statistics, not warnings."""
        persons = [make_person("root"), make_person("x"), make_person("y")]
        rels = [child_of("x", "y"), child_of("y", "x")]
        caplog.set_level(logging.DEBUG, logger="family_tree_server.tree")

        assert count_generations(persons, rels) == 1

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
        assert any("unreachable" in r.getMessage() for r in caplog.records)

    def test_assign_generations_first_visit_wins(self, make_person, child_of):
        """A child reached from two roots keeps the shallower generation."""
        persons = [make_person("gp"), make_person("p"), make_person("in_law"), make_person("c")]
        rels = [child_of("gp", "p"), child_of("p", "c"), child_of("in_law", "c")]
        assert assign_generations(persons, rels) == {"gp": 1, "in_law": 1, "p": 2, "c": 2}


class TestTopologyHelpers:
    """Tests for children map, topological roots and reachability."""

    def test_children_map_keeps_edge_order(self, child_of, married):
        rels = [child_of("p", "c2"), married("p", "s"), child_of("p", "c1")]
        assert build_children_map(rels) == {"p": ["c2", "c1"]}

    def test_topological_roots_in_birth_order(self, make_person, child_of):
        persons = [
            make_person("c", birth_year=1950),
            make_person("b", birth_year=None),
            make_person("a", birth_year=1900),
        ]
        roots = topological_roots(persons, [child_of("a", "c")])
        assert [p.id for p in roots] == ["a", "b"]

    def test_cycle_members_left_unassigned(self, make_person, child_of):
        persons = [make_person("root"), make_person("x"), make_person("y")]
        rels = [child_of("x", "y"), child_of("y", "x")]
        assert assign_generations(persons, rels) == {"root": 1}

    def test_every_person_assigned_in_forest(self, make_person, child_of):
        persons = [make_person("a"), make_person("b")]
        assert assign_generations(persons, [child_of("a", "b")]) == {"a": 1, "b": 2}


class TestBuildDescendantTree:
    """Tests for the nested tree used by tree views."""

    def test_unknown_root_returns_none(self, make_person):
        assert build_descendant_tree("ghost", [make_person("a")], [], 5) is None

    def test_none_root_returns_none(self, make_person):
        assert build_descendant_tree(None, [make_person("a")], [], 5) is None

    def test_children_ordered_by_sort_order_then_birth(self, make_person, child_of):
        persons = [
            make_person("p", birth_year=1900),
            make_person("late", birth_year=1940),
            make_person("early", birth_year=1930),
            make_person("first", birth_year=1950),
        ]
        rels = [
            child_of("p", "late"),
            child_of("p", "early"),
            child_of("p", "first", sort_order=1),
        ]
        tree = build_descendant_tree("p", persons, rels, 5)
        assert [c["id"] for c in tree["children"]] == ["first", "early", "late"]

    def test_spouses_attached(self, make_person, married):
        persons = [make_person("h"), make_person("w", gender="female")]
        tree = build_descendant_tree("h", persons, [married("w", "h")], 5)
        assert [s["id"] for s in tree["spouses"]] == ["w"]
        assert tree["children"] == []

    def test_generation_numbers(self, make_person, child_of):
        persons = [make_person("a"), make_person("b"), make_person("c")]
        rels = [child_of("a", "b"), child_of("b", "c")]
        tree = build_descendant_tree("a", persons, rels, 5)
        assert tree["generation"] == 1
        assert tree["children"][0]["generation"] == 2
        assert tree["children"][0]["children"][0]["generation"] == 3

    def test_depth_limit(self, make_person, child_of):
        persons = [make_person("a"), make_person("b"), make_person("c")]
        rels = [child_of("a", "b"), child_of("b", "c")]
        tree = build_descendant_tree("a", persons, rels, 2)
        assert tree["children"][0]["children"] == []

    def test_cycle_does_not_recurse_forever(self, make_person, child_of):
        persons = [make_person("a"), make_person("b")]
        rels = [child_of("a", "b"), child_of("b", "a")]
        tree = build_descendant_tree("a", persons, rels, 10)
        assert tree["children"][0]["id"] == "b"
        assert tree["children"][0]["children"] == []

    def test_relationship_type_on_children(self, make_person, child_of):
        persons = [make_person("a"), make_person("b")]
        rels = [child_of("a", "b", type="adopted_child")]
        tree = build_descendant_tree("a", persons, rels, 5)
        assert tree["children"][0]["relationship_type"] == "adopted_child"
