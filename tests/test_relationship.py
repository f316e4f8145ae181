"""Tests for kinship/relationship.py — shortest path and phrase rendering."""
import pytest

from kinship.graph import Step, build_graph
from kinship.models import Gender
from kinship.relationship import (
    NO_CONNECTION, SELF_PHRASE, PathStep, describe_path, find_path,
    find_relationship, label_step, reduce_siblings,
)
from tests.conftest import married, parent, person


class TestFindRelationship:
    def test_self(self, small_family):
        assert find_relationship(small_family, "g", "g") == SELF_PHRASE

    def test_fathers_sister(self, small_family):
        assert find_relationship(small_family, "g", "d") == "Your Father's Sister"

    def test_direct_father(self, small_family):
        assert find_relationship(small_family, "g", "s") == "Father"

    def test_sibling(self, small_family):
        assert find_relationship(small_family, "s", "d") == "Sister"
        assert find_relationship(small_family, "d", "s") == "Brother"

    def test_grandfather(self, small_family):
        assert find_relationship(small_family, "g", "r") == "Your Father's Father"

    def test_grandson(self, small_family):
        assert find_relationship(small_family, "r", "g") == "Your Son's Son"

    def test_nephew(self, small_family):
        assert find_relationship(small_family, "d", "g") == "Your Brother's Son"

    def test_married_cousins_terminate(self, cousins_family):
        assert find_relationship(cousins_family, "c1", "c2") == "Wife"
        assert find_relationship(cousins_family, "c2", "c1") == "Husband"

    def test_cousin_through_marriage_cycle(self, cousins_family):
        # the marriage is the shortest way from c1 to their aunt
        assert find_relationship(cousins_family, "c1", "b") == "Your Wife's Mother"

    def test_unknown_person(self, small_family):
        assert find_relationship(small_family, "g", "nobody") == NO_CONNECTION
        assert find_relationship(small_family, "nobody", "g") == NO_CONNECTION

    def test_disconnected(self):
        model = build_graph([person("a", "m"), person("b", "f")], [])
        assert find_relationship(model, "a", "b") == NO_CONNECTION

    def test_unspecified_gender_is_neutral(self):
        model = build_graph(
            [person("p", "other"), person("k", "U"), person("k2", "")],
            [parent("p", "k"), parent("p", "k2")],
        )
        assert find_relationship(model, "k", "p") == "Parent"
        assert find_relationship(model, "p", "k") == "Child"
        assert find_relationship(model, "k", "k2") == "Sibling"

    def test_spouse_neutral(self):
        model = build_graph([person("a", "m"), person("b", "")], [married("a", "b")])
        assert find_relationship(model, "a", "b") == "Spouse"

    def test_mothers_brother(self):
        model = build_graph(
            [person("gp", "m"), person("mum", "f"), person("uncle", "m"), person("me", "f")],
            [parent("gp", "mum"), parent("gp", "uncle"), parent("mum", "me")],
        )
        assert find_relationship(model, "me", "uncle") == "Your Mother's Brother"


class TestFindPath:
    def test_shortest(self, small_family):
        path = find_path(small_family, "g", "d")
        assert [s.person_id for s in path] == ["s", "r", "d"]
        assert [s.step for s in path] == [Step.PARENT, Step.PARENT, Step.CHILD]

    def test_self_is_empty(self, small_family):
        assert find_path(small_family, "g", "g") == []

    def test_unreachable_is_none(self):
        model = build_graph([person("a", "m"), person("b", "f")], [])
        assert find_path(model, "a", "b") is None

    def test_ties_follow_input_order(self):
        # k can reach t through either parent; the first recorded wins
        model = build_graph(
            [person(p, g) for p, g in (("k", "m"), ("mum", "f"), ("dad", "m"), ("t", "m"))],
            [parent("mum", "k"), parent("dad", "k"), parent("mum", "t"), parent("dad", "t")],
        )
        assert [s.person_id for s in find_path(model, "k", "t")] == ["mum", "t"]

    @pytest.mark.parametrize("a,b", [("g", "d"), ("r", "g"), ("d", "s"), ("g", "r")])
    def test_path_length_symmetric(self, small_family, a, b):
        assert len(find_path(small_family, a, b)) == len(find_path(small_family, b, a))

    def test_path_length_symmetric_across_marriage(self, cousins_family):
        ids = cousins_family.person_ids
        for a in ids:
            for b in ids:
                assert len(find_path(cousins_family, a, b)) == len(find_path(cousins_family, b, a))


class TestLabels:
    def test_label_step(self):
        assert label_step(PathStep("x", Step.PARENT, Gender.FEMALE)) == "Mother"
        assert label_step(PathStep("x", Step.CHILD, Gender.MALE)) == "Son"
        assert label_step(PathStep("x", Step.SPOUSE, Gender.FEMALE)) == "Wife"

    @pytest.mark.parametrize("step", list(Step))
    @pytest.mark.parametrize("gender", list(Gender))
    def test_every_combination_labelled(self, step, gender):
        assert label_step(PathStep("x", step, gender))


class TestReduceSiblings:
    def test_father_son_is_brother(self):
        assert reduce_siblings(["Father", "Son"]) == ["Brother"]

    def test_mother_daughter_is_sister(self):
        assert reduce_siblings(["Mother", "Daughter"]) == ["Sister"]

    def test_single_pass(self):
        assert reduce_siblings(["Father", "Father", "Son", "Son"]) == ["Father", "Brother", "Son"]

    def test_child_then_parent_untouched(self):
        assert reduce_siblings(["Son", "Father"]) == ["Son", "Father"]

    def test_spouse_breaks_pattern(self):
        assert reduce_siblings(["Father", "Wife", "Son"]) == ["Father", "Wife", "Son"]

    def test_two_separate_pairs(self):
        assert reduce_siblings(["Father", "Son", "Mother", "Daughter"]) == ["Brother", "Sister"]


class TestDescribePath:
    def test_possessive_chain(self):
        path = [
            PathStep("a", Step.PARENT, Gender.FEMALE),
            PathStep("b", Step.PARENT, Gender.MALE),
            PathStep("c", Step.CHILD, Gender.MALE),
        ]
        assert describe_path(path) == "Your Mother's Brother"

    def test_empty_path_is_self(self):
        assert describe_path([]) == SELF_PHRASE
