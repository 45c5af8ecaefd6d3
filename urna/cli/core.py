"""CLI commands: init, status."""

from __future__ import annotations

import click
from rich.panel import Panel

from urna import __version__
from urna.cli import DEFAULT_DB, cli, console, ledger_session
from urna.models import Election


@cli.command()
@click.option("--db", default=DEFAULT_DB, help="Database path")
def init(db) -> None:
    """Initialize the ledger database."""
    with ledger_session(db) as contract:
        # Opening the first connection creates the kv table.
        contract.store.get("meta-init")
        console.print(
            Panel(
                f"[bold green]✓ URNA v{__version__} initialized[/]\nDatabase: {db}",
                title="🗳  URNA",
                border_style="green",
            )
        )


@cli.command()
@click.option("--db", default=DEFAULT_DB, help="Database path")
def status(db) -> None:
    """Summarize the ledger contents."""
    with ledger_session(db) as contract:
        admins = contract.get_all_admins()
        voters = contract.get_all_voters()
        tally = contract.see_vote_count()
        elections = contract.get_all_elections()
        open_count = sum(1 for e in elections if isinstance(e, Election) and e.is_open())
        voted = sum(1 for v in voters if v.voted)
        console.print(
            Panel(
                f"[bold cyan]Admin:[/] {admins[0].did if admins else '(none)'}\n"
                f"[bold cyan]Voters:[/] {len(voters)} ({voted} voted)\n"
                f"[bold cyan]Candidates:[/] {len(tally)}\n"
                f"[bold cyan]Elections:[/] {len(elections)} ({open_count} open)\n"
                f"[bold cyan]Votes cast:[/] {sum(row['votes'] for row in tally)}",
                title="📊 Ledger Status",
                border_style="cyan",
            )
        )
