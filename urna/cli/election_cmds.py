"""CLI commands: election create, close, show, list, reset, declare-winner, winner."""

from __future__ import annotations

import click
from rich.panel import Panel

from urna.cli import DEFAULT_DB, console, ledger_session, show_record, show_table
from urna.models import ELECTION_STATUSES, STATUS_OPEN, RawRecord


@click.group()
def election():
    """Run the election lifecycle."""
    pass


@election.command("create")
@click.argument("election_id")
@click.option("--status", type=click.Choice(ELECTION_STATUSES), default=STATUS_OPEN)
@click.option("--start-date", default=None, help="Defaults to now (UTC)")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_create(election_id, status, start_date, db):
    """Create an election."""
    with ledger_session(db) as contract:
        contract.create_election(election_id, status, start_date)
        console.print(f"[green]✓[/] Election [bold]{election_id}[/] created ({status}).")


@election.command("close")
@click.argument("election_id")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_close(election_id, db):
    """Close voting (irreversible)."""
    with ledger_session(db) as contract:
        contract.close_election(election_id)
        console.print(f"[green]✓[/] Election [bold]{election_id}[/] closed.")


@election.command("show")
@click.argument("election_id")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_show(election_id, db):
    """Show one election."""
    with ledger_session(db) as contract:
        show_record("Election", contract.get_election(election_id))


@election.command("list")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_list(db):
    """List every election."""
    with ledger_session(db) as contract:
        rows = []
        for record in contract.get_all_elections():
            if isinstance(record, RawRecord):
                rows.append([record.key, "[yellow]corrupt[/]", "", "", ""])
            else:
                rows.append([record.election_id, record.status, record.start_date, record.end_date, record.winner])
        show_table("Elections", ["ID", "Status", "Start", "End", "Winner"], rows)


@election.command("reset")
@click.argument("election_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_reset(election_id, yes, db):
    """Delete the election, all candidates and all non-admin voters."""
    if not yes:
        click.confirm(f"Reset {election_id}? Candidates and voters will be deleted", abort=True)
    with ledger_session(db) as contract:
        removed = contract.reset_election(election_id)
        console.print(
            f"[green]✓[/] Election [bold]{election_id}[/] reset: "
            f"{removed['candidates']} candidates, {removed['votes']} votes, "
            f"{removed['users']} voters removed."
        )


@election.command("declare-winner")
@click.argument("election_id")
@click.option("--admin", "admin_did", required=True, help="Admin DID authorizing the change")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_declare_winner(election_id, admin_did, db):
    """Assign the top candidate of a closed election as winner."""
    with ledger_session(db) as contract:
        winner = contract.declare_winner(admin_did, election_id)
        console.print(
            f"[green]✓[/] Winner of [bold]{election_id}[/]: "
            f"[bold]{winner.name}[/] ({winner.did}, {winner.votes} votes)"
        )


@election.command("winner")
@click.argument("election_id")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def election_winner(election_id, db):
    """Show the declared winner."""
    with ledger_session(db) as contract:
        result = contract.see_winner(election_id)
        winner = result["winner"]
        console.print(
            Panel(
                f"[bold cyan]Election:[/] {result['electionID']} ({result['electionStatus']})\n"
                f"[bold cyan]Winner:[/] {winner['name']} ({winner['did']})\n"
                f"[bold cyan]Votes:[/] {winner['votes']}\n"
                f"[bold cyan]Birthplace:[/] {winner['birthplace']}",
                title="🏆 Winner",
                border_style="green",
            )
        )
