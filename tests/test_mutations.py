"""Tests for in-memory tree edits and relationship queries."""

import pytest
from conftest import edge, member

from famtree.errors import MalformedInput, NotFound, ValidationFailed
from famtree.models import FamilyTree, Subfamily
from famtree.trees import (
    add_edge,
    add_member,
    children_of,
    members_in_generation,
    parents_of,
    remove_edge,
    remove_member,
    set_head_of_family,
    siblings_of,
    spouses_of,
    update_edge,
    update_member,
)


@pytest.fixture
def tree():
    t = FamilyTree.empty("owner-1")
    for m in (
        member("grandpa", "George", generation=0),
        member("mum", "Mary", generation=1),
        member("dad", "David", generation=1),
        member("kid1", "Kim", generation=2),
        member("kid2", "Kai", generation=2),
    ):
        add_member(t, m)
    add_edge(t, edge("e1", "grandpa", "mum"))
    add_edge(t, edge("e2", "mum", "dad", "spouse"))
    add_edge(t, edge("e3", "mum", "kid1"))
    add_edge(t, edge("e4", "dad", "kid1"))
    add_edge(t, edge("e5", "mum", "kid2"))
    return t


class TestMembers:
    """Tests for member edits."""

    def test_duplicate_member(self, tree):
        """Test duplicate member."""
        with pytest.raises(ValidationFailed) as exc_info:
            add_member(tree, member("mum"))
        assert exc_info.value.code == "DuplicateMember"

    def test_add_member_checks_dates(self, tree):
        """Test add member checks dates."""
        with pytest.raises(ValidationFailed) as exc_info:
            add_member(tree, member("new", birth_date="2999-01-01"))
        assert exc_info.value.code == "InvalidDate"
        assert tree.get_member("new") is None

    def test_update_member(self, tree):
        """Test update member."""
        updated = update_member(tree, "kid1", {"notes": "likes trains", "birthDate": "2010-04-01"})

        assert updated.notes == "likes trains"
        assert updated.birth_date == "2010-04-01"
        assert tree.get_member("kid1").notes == "likes trains"

    def test_update_member_accepts_snake_case(self, tree):
        """Test update member accepts snake case."""
        updated = update_member(tree, "kid1", {"is_deceased": True})
        assert updated.is_deceased is True

    def test_update_member_keeps_id_and_created_at(self, tree):
        """Test update member keeps ID and created at."""
        before = tree.get_member("kid1")
        updated = update_member(tree, "kid1", {"id": "other", "createdAt": "2000-01-01T00:00:00Z"})

        assert updated.id == "kid1"
        assert updated.created_at == before.created_at

    def test_update_member_rejects_bad_dates(self, tree):
        """Test update member rejects bad dates."""
        update_member(tree, "grandpa", {"birthDate": "1900-01-01"})
        with pytest.raises(ValidationFailed):
            update_member(tree, "grandpa", {"deathDate": "1899-01-01"})
        assert tree.get_member("grandpa").death_date is None

    def test_update_member_rejects_bad_values(self, tree):
        """Test update member rejects bad values."""
        with pytest.raises(MalformedInput):
            update_member(tree, "kid1", {"gender": 42})

    def test_update_missing_member(self, tree):
        """Test update missing member."""
        with pytest.raises(NotFound):
            update_member(tree, "nobody", {"notes": "x"})

    def test_remove_member_takes_its_edges(self, tree):
        """Test remove member takes its edges."""
        removed = remove_member(tree, "mum")

        assert {e.id for e in removed} == {"e1", "e2", "e3", "e5"}
        assert [e.id for e in tree.edges] == ["e4"]
        assert tree.get_member("mum") is None

    def test_remove_member_updates_subfamilies(self, tree):
        """Test remove member updates subfamilies."""
        tree.subfamilies = [
            Subfamily(
                name="Mum's side",
                head_member_id="mum",
                member_ids=["mum", "kid1"],
                parent_family_id="owner-1",
            )
        ]

        remove_member(tree, "mum")

        assert tree.subfamilies[0].member_ids == ["kid1"]
        assert tree.subfamilies[0].head_member_id is None


class TestEdges:
    """Tests for edge edits."""

    def test_add_edge_rejects_self_loop(self, tree):
        """Test add edge rejects self loop."""
        with pytest.raises(ValidationFailed) as exc_info:
            add_edge(tree, edge("bad", "kid1", "kid1", "other"))
        assert exc_info.value.code == "SelfLoop"
        assert tree.get_edge("bad") is None

    def test_add_edge_rejects_missing_target(self, tree):
        """Test add edge rejects missing target."""
        with pytest.raises(ValidationFailed) as exc_info:
            add_edge(tree, edge("bad", "kid1", "ghost", "cousin_big"))
        assert exc_info.value.code == "MissingTarget"

    def test_duplicate_edge_id(self, tree):
        """Test duplicate edge ID."""
        with pytest.raises(ValidationFailed):
            add_edge(tree, edge("e1", "dad", "kid2"))

    def test_parallel_edges_are_allowed(self, tree):
        """Test parallel edges are allowed."""
        add_edge(tree, edge("e6", "grandpa", "mum", "guardian"))
        assert len([e for e in tree.edges if e.from_id == "grandpa"]) == 2

    def test_update_edge_type_and_strength(self, tree):
        """Test update edge type and strength."""
        updated = update_edge(tree, "e4", {"type": "step", "metadata": {"strength": 0.5}})

        assert updated.type.value == "step"
        assert updated.metadata.strength == 0.5
        assert updated.metadata.updated_at >= updated.metadata.created_at

    def test_update_edge_revalidates(self, tree):
        """Test update edge revalidates."""
        with pytest.raises(ValidationFailed):
            update_edge(tree, "e4", {"toId": "dad"})
        assert tree.get_edge("e4").to_id == "kid1"

    def test_remove_edge(self, tree):
        """Test remove edge."""
        removed = remove_edge(tree, "e2")
        assert removed.type.value == "spouse"
        with pytest.raises(NotFound):
            remove_edge(tree, "e2")


class TestHeadOfFamily:
    """Tests for set_head_of_family."""

    def test_exclusive(self, tree):
        """Test that an exclusive head clears other heads."""
        set_head_of_family(tree, "grandpa")
        set_head_of_family(tree, "mum")

        heads = [m.id for m in tree.members if m.is_head_of_family]
        assert heads == ["mum"]

    def test_not_exclusive(self, tree):
        """Test that a non-exclusive head keeps other heads."""
        set_head_of_family(tree, "grandpa")
        set_head_of_family(tree, "mum", exclusive=False)

        heads = {m.id for m in tree.members if m.is_head_of_family}
        assert heads == {"grandpa", "mum"}


class TestQueries:
    """Tests for relationship lookups."""

    def test_children_and_parents(self, tree):
        """Test children and parents."""
        assert [m.id for m in children_of(tree, "mum")] == ["kid1", "kid2"]
        assert [m.id for m in parents_of(tree, "kid1")] == ["mum", "dad"]

    def test_spouses(self, tree):
        """Test spouse lookup."""
        assert [m.id for m in spouses_of(tree, "dad")] == ["mum"]
        assert [m.id for m in spouses_of(tree, "mum")] == ["dad"]

    def test_siblings(self, tree):
        """Test sibling lookup through shared parents."""
        assert [m.id for m in siblings_of(tree, "kid1")] == ["kid2"]
        assert siblings_of(tree, "grandpa") == []

    def test_generation(self, tree):
        """Test members in a generation."""
        assert [m.id for m in members_in_generation(tree, 1)] == ["mum", "dad"]
