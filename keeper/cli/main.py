# keeper/cli/main.py
"""
CLI for initializing, updating and inspecting a hash membership registry.
"""

import os
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from keeper.core.encoding import decode_flag
from keeper.core.errors import KeeperError
from keeper.core.types import MembershipResult
from keeper.dispatch.router import MembershipService
from keeper.registry.membership import MembershipRegistry
from keeper.storage import SQLiteStore
from keeper.verify.verifier import RegistryVerifier

app = typer.Typer(
    name="keeper",
    help="Record and query which users claimed a content hash",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

DbOption = typer.Option(None, "--db", help="Path to SQLite database (overrides KEEPER_DB_PATH env var)")


def get_db_path(db_flag: Optional[Path] = None) -> Path:
    """Resolve DB path in this order:
    1. --db flag
    2. KEEPER_DB_PATH environment variable
    3. Default: ~/.keeper/keeper-state.db
    """
    if db_flag:
        path = db_flag.resolve()
    else:
        env_path = os.environ.get("KEEPER_DB_PATH")
        if env_path:
            path = Path(env_path).resolve()
        else:
            path = Path.home() / ".keeper" / "keeper-state.db"

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def open_store(db: Optional[Path]) -> SQLiteStore:
    db_path = get_db_path(db)
    try:
        return SQLiteStore(db_path)
    except Exception as e:
        console.print(f"[red]Failed to open database {db_path}: {escape(str(e))}[/]")
        raise typer.Exit(1)


def fail(e: KeeperError) -> NoReturn:
    console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/]")
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log registry activity"),
):
    """Manage a hash membership registry."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def init(db: Optional[Path] = DbOption):
    """Create (or reset) an empty registry."""
    with open_store(db) as store:
        try:
            MembershipRegistry(store).initialize()
        except KeeperError as e:
            fail(e)
    console.print("[green]Registry initialized[/]")


@app.command()
def record(
    hash_: str = typer.Argument(..., metavar="HASH", help="Content hash"),
    user: str = typer.Argument(..., help="User identifier"),
    db: Optional[Path] = DbOption,
):
    """Record USER as a member of HASH."""
    with open_store(db) as store:
        try:
            result = MembershipRegistry(store).record_membership(hash_, user)
        except KeeperError as e:
            fail(e)

    if result is MembershipResult.ADDED:
        console.print(f"[green]added[/] {escape(user)} → {escape(hash_)}")
    else:
        console.print(f"[yellow]already recorded[/] {escape(user)} → {escape(hash_)}")


@app.command()
def query(
    hash_: str = typer.Argument(..., metavar="HASH", help="Content hash"),
    user: str = typer.Argument(..., help="User identifier"),
    db: Optional[Path] = DbOption,
):
    """Check whether USER is a member of HASH (exit 1 when not found)."""
    with open_store(db) as store:
        try:
            payload = MembershipService(MembershipRegistry(store)).query("query", [hash_, user])
        except KeeperError as e:
            fail(e)

    if decode_flag(payload):
        console.print(f"[green]found[/] {escape(user)} → {escape(hash_)}")
    else:
        console.print(f"[yellow]not found[/] {escape(user)} → {escape(hash_)}")
        raise typer.Exit(1)


@app.command()
def invoke(
    function: str = typer.Argument(..., help="Function name: invoke, init or delete"),
    args: Optional[List[str]] = typer.Argument(None, help="Positional string arguments"),
    db: Optional[Path] = DbOption,
):
    """Raw dispatch, as a hosting runtime would call it. Prints the result payload as hex."""
    with open_store(db) as store:
        try:
            payload = MembershipService(MembershipRegistry(store)).invoke(function, args or [])
        except KeeperError as e:
            fail(e)

    console.print(f"result: {payload.hex() or '(empty)'}")


@app.command()
def members(
    hash_: str = typer.Argument(..., metavar="HASH", help="Content hash"),
    db: Optional[Path] = DbOption,
):
    """List the members of HASH in the order they were recorded."""
    with open_store(db) as store:
        try:
            users = MembershipRegistry(store).members(hash_)
        except KeeperError as e:
            fail(e)

    if not users:
        console.print(f"[yellow]No members recorded for '{escape(hash_)}'[/]")
        return

    table = Table(title=f"Members of {escape(hash_)}")
    table.add_column("#")
    table.add_column("User")
    for i, user in enumerate(users):
        table.add_row(str(i), escape(user))
    console.print(table)


@app.command()
def show(db: Optional[Path] = DbOption):
    """List every recorded hash with its member count."""
    with open_store(db) as store:
        try:
            registry = MembershipRegistry(store).snapshot()
        except KeeperError as e:
            fail(e)

    if not registry:
        console.print("[yellow]Registry is empty.[/]")
        return

    table = Table(title="Registry")
    table.add_column("Hash")
    table.add_column("Members")
    for hash_ in sorted(registry):
        table.add_row(escape(hash_), str(len(registry[hash_])))
    console.print(table)


@app.command()
def delete(
    key: str = typer.Argument(..., help="Top-level store key to delete (e.g. 'keeper')"),
    db: Optional[Path] = DbOption,
):
    """Delete an arbitrary store key. Deleting 'keeper' drops the whole registry."""
    with open_store(db) as store:
        try:
            MembershipRegistry(store).delete_key(key)
        except KeeperError as e:
            fail(e)
    console.print(f"[green]Deleted key '{escape(key)}'[/]")


@app.command()
def verify(db: Optional[Path] = DbOption):
    """Audit the stored registry for malformed entries and duplicate members."""
    with open_store(db) as store:
        result = RegistryVerifier().verify_from_store(store)

    if result.is_valid:
        console.print(f"[green]✓ {result}[/]")
    else:
        console.print(f"[red]✗ {escape(result.message)}[/]")
        for failure in result.failures:
            where = failure.hash if failure.hash is not None else "-"
            console.print(f"  • [{where}] {failure.category}: {failure.message}", markup=False)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
