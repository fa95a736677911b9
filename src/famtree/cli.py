"""Command-line interface for famtree."""
from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .errors import FamtreeError

app = typer.Typer(
    name="famtree",
    help="Family tree storage: inspect, repair and share trees",
    add_completion=False,
)
console = Console()

DbOption = typer.Option(
    None,
    "--db",
    envvar="FAMTREE_DB_PATH",
    help="SQLite database path (default: FAMTREE_DB_PATH or ./data/famtree.db)",
)


def get_store(db: Path | None = None):
    """Load .env, configure logging and open the SQLite store.

    Returns the store together with the settings it was opened with.
    """
    from dotenv import load_dotenv

    load_dotenv()

    from .config import Settings
    from .logging import configure_logging
    from .store.sqlite import SQLiteDocumentStore

    settings = Settings()
    configure_logging(settings.log_level.upper())
    return SQLiteDocumentStore(db or settings.db_path), settings


def _fail(error: FamtreeError) -> NoReturn:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


@app.command()
def show(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    db: Path = DbOption,
):
    """Show the members and relationships of a tree."""
    from .trees.service import TreeService

    store, settings = get_store(db)
    tree = TreeService(store, settings).load_tree(owner_id)

    console.print(
        Panel(
            f"Owner: {tree.owner_id}\n"
            f"Version: {tree.version.current}\n"
            f"Members: {len(tree.members)}  Edges: {len(tree.edges)}  "
            f"Subfamilies: {len(tree.subfamilies or [])}",
            title="Family Tree",
        )
    )

    if tree.members:
        table = Table(title="Members")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Born")
        table.add_column("Died")
        table.add_column("Head")
        for member in tree.members:
            table.add_row(
                member.id,
                member.full_name,
                member.birth_date or "",
                member.death_date or "",
                "yes" if member.is_head_of_family else "",
            )
        console.print(table)

    names = {m.id: m.full_name or m.id for m in tree.members}
    if tree.edges:
        table = Table(title="Relationships")
        table.add_column("From")
        table.add_column("Type")
        table.add_column("To")
        for edge in tree.edges:
            table.add_row(
                names.get(edge.from_id, f"[red]{edge.from_id}[/red]"),
                edge.type.value,
                names.get(edge.to_id, f"[red]{edge.to_id}[/red]"),
            )
        console.print(table)


@app.command()
def check(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    db: Path = DbOption,
):
    """Report integrity problems without changing the tree."""
    from .trees.service import TreeService

    store, settings = get_store(db)
    report = TreeService(store, settings).integrity(owner_id)

    if report.is_clean:
        console.print("[green]Tree is clean[/green]")
    else:
        table = Table(title="Invalid Edges")
        table.add_column("Edge", style="dim")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Reason")
        for invalid in report.invalid_edges:
            table.add_row(invalid.edge_id, invalid.from_id, invalid.to_id, invalid.reason)
        console.print(table)

    for member_id, error in report.date_errors.items():
        console.print(f"[yellow]{member_id}: {error}[/yellow]")
    for warning in report.head_warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    if not report.is_clean:
        raise typer.Exit(1)


@app.command()
def cleanup(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    db: Path = DbOption,
):
    """Remove relationships that point at missing members."""
    from .trees.service import TreeService

    store, settings = get_store(db)
    result = TreeService(store, settings).cleanup_tree(owner_id)

    if not result.removed_count:
        console.print("[green]No orphaned edges found[/green]")
        return
    for edge in result.removed_edges:
        console.print(f"[dim]removed {edge.id} ({edge.from_id} -> {edge.to_id})[/dim]")
    console.print(f"[green]Removed {result.removed_count} orphaned edges[/green]")


@app.command()
def delete(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    keep_shares: bool = typer.Option(
        False, "--keep-shares", help="Leave grants, requests and codes in place"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    db: Path = DbOption,
):
    """Delete a tree and, unless told otherwise, everything shared from it."""
    from .trees.service import TreeService

    if not yes:
        typer.confirm(f"Delete the tree of {owner_id}?", abort=True)

    store, settings = get_store(db)
    result = TreeService(store, settings).delete_tree(owner_id, cascade=not keep_shares)
    console.print(f"[green]Deleted tree {owner_id}[/green]")
    if not keep_shares:
        console.print(
            f"[dim]grants: {result.grants_removed}, requests: {result.requests_removed}, "
            f"codes: {result.codes_removed}[/dim]"
        )


@app.command("code-generate")
def code_generate(
    user_id: str = typer.Argument(..., help="Family head user id"),
    family_name: str = typer.Option(None, "--name", "-n", help="Family name shown with the code"),
    db: Path = DbOption,
):
    """Issue a family join code for a family head."""
    from .codes.family_code import format_family_code
    from .codes.registry import FamilyCodeRegistry

    try:
        store, settings = get_store(db)
        record = FamilyCodeRegistry(store, settings).issue(user_id, family_name)
    except FamtreeError as e:
        _fail(e)

    console.print(
        Panel(
            f"[bold]{format_family_code(record.code)}[/bold]\n"
            f"Family: {record.family_name}\n"
            f"Expires: {record.expires_at:%Y-%m-%d}",
            title="Family Code",
        )
    )


@app.command("code-format")
def code_format(code: str = typer.Argument(..., help="Code to check")):
    """Validate a family code and print its display form."""
    from .codes.family_code import format_family_code, normalize_family_code, validate_family_code

    clean = normalize_family_code(code)
    if not validate_family_code(clean):
        console.print(f"[red]Invalid family code: {code}[/red]")
        raise typer.Exit(1)
    console.print(format_family_code(clean))


@app.command()
def share(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    target: str = typer.Argument(None, help="User id or email to share with"),
    role: str = typer.Option("viewer", "--role", "-r", help="viewer or editor"),
    revoke: bool = typer.Option(False, "--revoke", help="Remove the grant instead"),
    db: Path = DbOption,
):
    """Grant, revoke or list share grants on a tree."""
    from .sharing.service import SharingService

    store, _ = get_store(db)
    sharing = SharingService(store)

    if target is None:
        grants = sharing.list_grants(owner_id)
        if not grants:
            console.print(f"[yellow]Tree {owner_id} is not shared[/yellow]")
            return
        table = Table(title=f"Shares of {owner_id}")
        table.add_column("User")
        table.add_column("Email")
        table.add_column("Role")
        for grant in grants:
            table.add_row(grant.target_user_id, grant.target_email or "", grant.role.value)
        console.print(table)
        return

    try:
        if revoke:
            if sharing.revoke_share(owner_id, target):
                console.print(f"[green]Revoked access for {target}[/green]")
            else:
                console.print(f"[yellow]{target} had no access to {owner_id}[/yellow]")
            return
        grant = sharing.grant_share(owner_id, target, role)
    except FamtreeError as e:
        _fail(e)

    console.print(f"[green]{grant.target_user_id} can now open the tree as {grant.role.value}[/green]")


@app.command()
def access(
    owner_id: str = typer.Argument(..., help="Owner user id"),
    user_id: str = typer.Argument(..., help="User asking for access"),
    db: Path = DbOption,
):
    """Show the role a user has on someone's tree."""
    from .sharing.service import SharingService

    store, _ = get_store(db)
    decision = SharingService(store).resolve_access(owner_id, user_id)
    if not decision.allowed:
        console.print(f"[red]{user_id} has no access to {owner_id}[/red]")
        raise typer.Exit(1)
    console.print(f"{user_id}: {decision.role.value}")


if __name__ == "__main__":
    app()
