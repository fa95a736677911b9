from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from famtree.cli import app
from famtree.store import FAMILY_CODES, SHARES, TREES, USERS, SQLiteDocumentStore

runner = CliRunner()


@pytest.fixture
def db(tmp_path: Path) -> Path:
    path = tmp_path / "famtree.db"
    store = SQLiteDocumentStore(path)
    store.set(USERS, "head", {"email": "head@example.com", "isFamilyHead": True, "displayName": "Heads"})
    store.set(USERS, "kin", {"email": "kin@example.com"})
    store.set(
        TREES,
        "head",
        {
            "id": "head",
            "ownerId": "head",
            "members": [
                {"id": "a", "fullName": "Alma", "isHeadOfFamily": True},
                {"id": "b", "fullName": "Bert"},
            ],
            "edges": [
                {"id": "e1", "fromId": "a", "toId": "b", "type": "parent"},
                {"id": "e2", "fromId": "a", "toId": "gone", "type": "spouse"},
            ],
            "version": {"current": 4, "history": []},
        },
    )
    return path


def invoke(db: Path, *args: str):
    return runner.invoke(app, [*args, "--db", str(db)], catch_exceptions=False)


def test_show(db: Path) -> None:
    """Test showing a tree's members and version."""
    result = invoke(db, "show", "head")
    assert result.exit_code == 0
    assert "Alma" in result.stdout
    assert "Version: 4" in result.stdout


def test_check_then_cleanup(db: Path) -> None:
    """Test check then cleanup."""
    result = invoke(db, "check", "head")
    assert result.exit_code == 1
    assert "e2" in result.stdout

    result = invoke(db, "cleanup", "head")
    assert result.exit_code == 0
    assert "Removed 1 orphaned edges" in result.stdout

    stored = SQLiteDocumentStore(db).get(TREES, "head")
    assert [e["id"] for e in stored["edges"]] == ["e1"]
    assert stored["version"]["current"] == 5

    result = invoke(db, "check", "head")
    assert result.exit_code == 0
    assert "Tree is clean" in result.stdout


def test_share_and_access(db: Path) -> None:
    """Test share and access."""
    result = invoke(db, "access", "head", "kin")
    assert result.exit_code == 1

    result = invoke(db, "share", "head", "kin@example.com", "--role", "editor")
    assert result.exit_code == 0
    assert SQLiteDocumentStore(db).get(SHARES, "head_kin")["role"] == "editor"

    result = invoke(db, "access", "head", "kin")
    assert result.exit_code == 0
    assert "editor" in result.stdout

    result = invoke(db, "share", "head", "kin", "--revoke")
    assert result.exit_code == 0
    assert SQLiteDocumentStore(db).get(SHARES, "head_kin") is None


def test_share_revoke_by_email(db: Path) -> None:
    """Test share revoke by email."""
    invoke(db, "share", "head", "kin@example.com", "--role", "editor")

    result = invoke(db, "share", "head", "kin@example.com", "--revoke")
    assert result.exit_code == 0
    assert "Revoked access" in result.stdout
    assert SQLiteDocumentStore(db).get(SHARES, "head_kin") is None

    result = invoke(db, "share", "head", "kin@example.com", "--revoke")
    assert result.exit_code == 0
    assert "had no access" in result.stdout


def test_share_bad_role(db: Path) -> None:
    """Test share bad role."""
    result = invoke(db, "share", "head", "kin", "--role", "admin")
    assert result.exit_code == 1
    assert "Invalid share role" in result.stdout


def test_code_generate(db: Path) -> None:
    """Test code generate."""
    result = invoke(db, "code-generate", "head", "--name", "Heads of Home")
    assert result.exit_code == 0
    assert "Heads of Home" in result.stdout

    codes = SQLiteDocumentStore(db).query(FAMILY_CODES, {"generatedBy": "head"})
    assert len(codes) == 1


def test_code_generate_requires_family_head(db: Path) -> None:
    """Test code generate requires family head."""
    result = invoke(db, "code-generate", "kin")
    assert result.exit_code == 1
    assert "family heads" in result.stdout


def test_code_format() -> None:
    """Test code format."""
    result = runner.invoke(app, ["code-format", "abcd1234"])
    assert result.exit_code == 0
    assert "ABCD-1234" in result.stdout

    result = runner.invoke(app, ["code-format", "ABC"])
    assert result.exit_code == 1


def test_delete_cascades(db: Path) -> None:
    """Test delete cascades."""
    invoke(db, "share", "head", "kin")
    invoke(db, "code-generate", "head")

    result = invoke(db, "delete", "head", "--yes")
    assert result.exit_code == 0

    store = SQLiteDocumentStore(db)
    assert store.get(TREES, "head") is None
    assert store.query(SHARES) == []
    assert store.query(FAMILY_CODES) == []
