"""
Tests for the query resolver.

These tests verify:
1. Constraint discovery only draws candidates from the target category
2. Entry matching scans the whole knowledge base in source order
3. An empty constraint set matches the first entry vacuously
4. NotFoundError echoes the exact query and target
5. Resolution never mutates the knowledge base
"""

import threading

import pytest

from expertkb.errors import NotFoundError
from expertkb.model import KnowledgeBase
from expertkb.parser import parse
from expertkb.resolver import discover_constraints, find_value, matches, resolve


# =============================================================================
# TEST FIXTURES
# =============================================================================

FRUIT_AND_VEHICLES = """
1 { Color: Red   Size: Small } => Fruit: Cherry
2 { Color: Red   Size: Large } => Fruit: Apple
3 { Color: Red   Wheels: 4   } => Vehicle: "Fire truck"
4 { Color: Yellow Size: Long } => Fruit: Banana
"""

VEHICLE_FIRST = """
1 { Color: Red Wheels: 4 } => Vehicle: "Fire truck"
2 { Color: Red Size: Small } => Fruit: Cherry
"""


@pytest.fixture
def kb():
    return parse(FRUIT_AND_VEHICLES)


# =============================================================================
# CONSTRAINT DISCOVERY TESTS
# =============================================================================

class TestConstraintDiscovery:
    """Test phase 1: confirmed constraints."""

    def test_no_target_means_no_constraints(self, kb):
        """Without a target, nothing is confirmed."""
        assert discover_constraints(kb, None, [("Color", "Red")]) == []

    def test_answers_matching_target_attributes_are_confirmed(self, kb):
        """Answers equal to attributes of target entries are confirmed."""
        constraints = discover_constraints(kb, "Fruit", [("Size", "Large"), ("Color", "Red")])
        assert constraints == [("Color", "Red"), ("Size", "Large")]

    def test_attributes_of_other_categories_ignored(self, kb):
        """Pairs only found on non-target entries are not confirmed."""
        constraints = discover_constraints(kb, "Fruit", [("Color", "Red"), ("Wheels", "4")])
        assert constraints == [("Color", "Red")]

    def test_value_must_match_exactly(self, kb):
        """Same category with another value is not a match."""
        assert discover_constraints(kb, "Fruit", [("Color", "Crimson")]) == []

    def test_constraints_are_deduplicated(self, kb):
        """A pair found on several target entries is confirmed once."""
        constraints = discover_constraints(kb, "Fruit", [("Color", "Red"), ("Color", "Red")])
        assert constraints == [("Color", "Red")]

    def test_unknown_target(self, kb):
        """A target with no entries confirms nothing."""
        assert discover_constraints(kb, "Mineral", [("Color", "Red")]) == []


# =============================================================================
# RESOLUTION TESTS
# =============================================================================

class TestResolve:
    """Test phase 2 and the full resolve contract."""

    def test_single_constraint(self, kb):
        """First matching entry wins."""
        assert resolve(kb, "Fruit", [("Color", "Red")]) == "Cherry"

    def test_narrowing_constraints(self, kb):
        """More answers narrow the match."""
        assert resolve(kb, "Fruit", [("Color", "Red"), ("Size", "Large")]) == "Apple"

    def test_target_scoped_discovery(self, kb):
        """An answer only found on Vehicle entries does not constrain a Fruit query."""
        assert resolve(kb, "Fruit", [("Color", "Red"), ("Wheels", "4")]) == "Cherry"

    def test_matching_scans_all_entries(self):
        """Phase 2 is not limited to the target category."""
        kb = parse(VEHICLE_FIRST)
        assert resolve(kb, "Fruit", [("Color", "Red")]) == "Fire truck"

    def test_vacuous_match_without_target(self, kb):
        """No target and no answers returns the first entry."""
        assert resolve(kb, None, []) == "Cherry"

    def test_vacuous_match_ignores_answers_without_target(self, kb):
        """Without a target, answers are not consulted."""
        assert resolve(kb, None, [("Color", "Yellow")]) == "Cherry"

    def test_vacuous_match_when_nothing_confirmed(self):
        """Nothing confirmed under the target falls through to the first entry."""
        kb = parse(VEHICLE_FIRST)
        assert resolve(kb, "Fruit", [("Color", "Blue")]) == "Fire truck"

    def test_extra_attributes_are_irrelevant(self, kb):
        """Entries may carry attributes beyond the constraints."""
        assert resolve(kb, "Fruit", [("Size", "Long")]) == "Banana"

    def test_find_value_returns_none_on_empty_base(self):
        """An empty base has nothing to match, not even vacuously."""
        assert find_value(KnowledgeBase.empty(), None, []) is None

    def test_matches_helper(self, kb):
        """matches() requires every constraint verbatim."""
        cherry = kb.entries[0]

        assert matches(cherry, [])
        assert matches(cherry, [("Color", "Red"), ("Size", "Small")])
        assert not matches(cherry, [("Color", "Red"), ("Size", "Large")])


# =============================================================================
# NOT FOUND TESTS
# =============================================================================

class TestNotFound:
    """Test the failure contract."""

    def test_contradictory_constraints(self):
        """Constraints no single entry satisfies raise NotFoundError."""
        kb = parse(
            "1 { Color: Red } => Fruit: Cherry\n"
            "2 { Size: Large } => Fruit: Melon\n"
        )
        query = [("Color", "Red"), ("Size", "Large")]

        with pytest.raises(NotFoundError) as exc_info:
            resolve(kb, "Fruit", query)

        assert exc_info.value.query == query
        assert exc_info.value.target == "Fruit"

    def test_empty_base_not_found(self):
        """Resolving against an empty base fails."""
        with pytest.raises(NotFoundError) as exc_info:
            resolve(KnowledgeBase.empty(), None, [])

        assert exc_info.value.query == []
        assert exc_info.value.target is None

    def test_message_mentions_query_and_target(self):
        """The message carries the full query for diagnostics."""
        error = NotFoundError(query=[("Color", "Red")], target="Fruit")

        assert "('Color', 'Red')" in str(error)
        assert "'Fruit'" in str(error)

    def test_generator_answers_are_echoed(self):
        """Answers given as an iterator are materialized and echoed."""
        kb = parse(
            "1 { Color: Red } => Fruit: Cherry\n"
            "2 { Size: Large } => Fruit: Melon\n"
        )
        answers = (pair for pair in [("Color", "Red"), ("Size", "Large")])

        with pytest.raises(NotFoundError) as exc_info:
            resolve(kb, "Fruit", answers)

        assert exc_info.value.query == [("Color", "Red"), ("Size", "Large")]


# =============================================================================
# PURITY TESTS
# =============================================================================

class TestPurity:
    """Test that resolution is deterministic and side-effect free."""

    def test_knowledge_base_unchanged(self, kb):
        before = parse(FRUIT_AND_VEHICLES)

        resolve(kb, "Fruit", [("Color", "Red")])
        with pytest.raises(NotFoundError):
            resolve(kb, "Fruit", [("Size", "Small"), ("Size", "Large")])

        assert kb == before

    def test_concurrent_resolution(self, kb):
        """Many threads on one snapshot get the same answers."""
        results = []
        lock = threading.Lock()

        def worker():
            value = resolve(kb, "Fruit", [("Color", "Red"), ("Size", "Large")])
            with lock:
                results.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["Apple"] * 8


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
