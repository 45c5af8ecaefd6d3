"""
URNA CLI: Package init.

Re-exports the main CLI group and shared utilities.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from urna import __version__, config
from urna.contract import LedgerContract, open_contract
from urna.exceptions import UrnaError
from urna.models import RawRecord

console = Console()
DEFAULT_DB = str(config.DB_PATH)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def get_contract(db: str = DEFAULT_DB) -> LedgerContract:
    """Open a contract on the SQLite ledger at ``db``."""
    return open_contract(db_path=db, mode="sqlite")


def fail(message: str) -> None:
    console.print(f"[red]✗ {message}[/]")
    sys.exit(1)


@contextmanager
def ledger_session(db: str) -> Iterator[LedgerContract]:
    """Open the ledger for one command; ledger errors exit with status 1."""
    contract = get_contract(db)
    try:
        yield contract
    except UrnaError as e:
        fail(str(e))
    finally:
        contract.close()


def show_record(title: str, record, border_style: str = "cyan") -> None:
    """Render one entity (or a RawRecord) as a key/value panel."""
    data = record.to_dict() if hasattr(record, "to_dict") else dict(record)
    if isinstance(record, RawRecord):
        title = f"{title} (corrupt)"
        border_style = "yellow"
    body = "\n".join(
        f"[bold cyan]{k}:[/] {v}" for k, v in data.items() if k != "passwordHash"
    )
    console.print(Panel(body, title=title, border_style=border_style))


def show_table(title: str, columns: list[str], rows: list[list]) -> None:
    if not rows:
        console.print("[dim]No records found.[/]")
        return
    table = Table(title=f"{title} ({len(rows)})", border_style="cyan")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row))
    console.print(table)


# ─── Main Group ──────────────────────────────────────────────────

@click.group()
@click.version_option(__version__, prog_name="urna")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose) -> None:
    """URNA: single-admin, one-vote-per-voter election ledger."""
    setup_logging(verbose)


# ─── Register all sub-modules ───────────────────────────────────
from urna.cli import core  # noqa: E402, F401
from urna.cli.admin_cmds import admin  # noqa: E402
from urna.cli.voter_cmds import voter  # noqa: E402
from urna.cli.candidate_cmds import candidate  # noqa: E402
from urna.cli.election_cmds import election  # noqa: E402
from urna.cli.vote_cmds import audit, vote  # noqa: E402

cli.add_command(admin)
cli.add_command(voter)
cli.add_command(candidate)
cli.add_command(election)
cli.add_command(vote)
cli.add_command(audit)


if __name__ == "__main__":
    cli()
