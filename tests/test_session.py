"""Tests for undo/redo edit sessions."""

import pytest
from conftest import edge, member

from famtree.errors import ValidationFailed
from famtree.models import FamilyTree
from famtree.trees import HISTORY_LIMIT, EditSession, TreeService


@pytest.fixture
def session():
    return EditSession(FamilyTree.empty("owner-1"))


def member_ids(session):
    return [m.id for m in session.tree.members]


class TestUndoRedo:
    """Tests for stepping through edit history."""

    def test_nothing_to_undo_or_redo(self, session):
        """Test that a fresh session has empty stacks."""
        assert not session.can_undo
        assert not session.can_redo
        assert session.undo() is False
        assert session.redo() is False

    def test_undo_then_redo(self, session):
        """Test undoing and redoing a pair of edits."""
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))

        assert session.undo() is True
        assert member_ids(session) == ["a"]
        assert session.undo() is True
        assert member_ids(session) == []
        assert not session.can_undo

        assert session.redo() is True
        assert member_ids(session) == ["a"]
        assert session.redo() is True
        assert member_ids(session) == ["a", "b"]
        assert not session.can_redo

    def test_new_edit_clears_redo(self, session):
        """Test that editing after an undo discards the redo stack."""
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))
        session.undo()
        assert session.can_redo

        session.add_member(member("c", "Cy"))

        assert not session.can_redo
        assert member_ids(session) == ["a", "c"]

    def test_history_is_capped(self, session):
        """Test that only the most recent 50 edits can be undone."""
        for i in range(HISTORY_LIMIT + 5):
            session.add_member(member(f"m{i}"))

        assert session.undo_depth == HISTORY_LIMIT
        while session.undo():
            pass
        # The five oldest edits fell off the stack
        assert member_ids(session) == [f"m{i}" for i in range(5)]
        assert session.redo_depth == HISTORY_LIMIT

    def test_custom_limit(self):
        """Test a smaller history limit."""
        session = EditSession(FamilyTree.empty("owner-1"), limit=2)
        for member_id in ("a", "b", "c"):
            session.add_member(member(member_id))

        assert session.undo_depth == 2

    def test_limit_must_be_positive(self):
        """Test that a zero limit is rejected."""
        with pytest.raises(ValueError):
            EditSession(FamilyTree.empty("owner-1"), limit=0)

    def test_failed_edit_records_nothing(self, session):
        """Test that a rejected mutation leaves history untouched."""
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))
        session.undo()

        with pytest.raises(ValidationFailed):
            session.add_edge(edge("e1", "a", "missing"))

        assert session.undo_depth == 1
        assert session.can_redo

    def test_undo_restores_nested_state(self, session):
        """Test that snapshots are deep copies of members and edges."""
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))
        session.add_edge(edge("e1", "a", "b"))
        session.update_member("a", {"first_name": "Anna", "full_name": "Anna"})
        session.remove_member("b")

        session.undo()
        assert member_ids(session) == ["a", "b"]
        assert [e.id for e in session.tree.edges] == ["e1"]

        session.undo()
        assert session.tree.get_member("a").full_name == "Ann"

    def test_head_of_family_and_edges(self, session):
        """Test the remaining mutation wrappers."""
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))
        session.add_edge(edge("e1", "a", "b"))
        session.update_edge("e1", {"type": "spouse"})
        session.set_head_of_family("a")
        session.remove_edge("e1")

        assert session.tree.edges == []
        session.undo()
        session.undo()
        assert not session.tree.get_member("a").is_head_of_family
        assert session.tree.get_edge("e1").type.value == "spouse"

    def test_apply_arbitrary_mutation(self, session):
        """Test recording a caller-supplied mutation."""

        def rename(tree, name):
            tree.settings.color_scheme = name
            return name

        assert session.apply(rename, "sepia") == "sepia"
        session.undo()
        assert session.tree.settings.color_scheme == "default"


class TestSessionWithService:
    """Tests for saving a session's tree."""

    def test_saves_current_tree(self, store, settings):
        """Test that the undone state is what gets saved."""
        trees = TreeService(store, settings)
        session = EditSession(trees.load_tree("owner-1"))
        session.add_member(member("a", "Ann"))
        session.add_member(member("b", "Ben"))
        session.undo()

        trees.save_tree("owner-1", session.tree)

        assert [m.id for m in trees.load_tree("owner-1").members] == ["a"]
