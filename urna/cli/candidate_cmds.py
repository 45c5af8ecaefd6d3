"""CLI commands: candidate create, update, delete, list, tally."""

from __future__ import annotations

import click

from urna.cli import DEFAULT_DB, console, ledger_session, show_record, show_table
from urna.models import RawRecord


@click.group()
def candidate():
    """Manage candidates."""
    pass


@candidate.command("create")
@click.argument("did")
@click.option("--admin", "admin_did", required=True, help="Admin DID authorizing the change")
@click.option("--name", required=True)
@click.option("--dob", required=True)
@click.option("--logo", required=True, help="Logo path or URL")
@click.option("--birthplace", required=True)
@click.option("--db", default=DEFAULT_DB, help="Database path")
def candidate_create(did, admin_did, name, dob, logo, birthplace, db):
    """Register a candidate (requires an open election)."""
    with ledger_session(db) as contract:
        contract.create_candidate(admin_did, did, name, dob, logo, birthplace)
        console.print(f"[green]✓[/] Candidate [bold]{did}[/] ({name}) registered.")


@candidate.command("update")
@click.argument("did")
@click.option("--name", default=None)
@click.option("--dob", default=None)
@click.option("--logo", default=None)
@click.option("--birthplace", default=None)
@click.option("--db", default=DEFAULT_DB, help="Database path")
def candidate_update(did, name, dob, logo, birthplace, db):
    """Patch a candidate (vote count is never editable)."""
    with ledger_session(db) as contract:
        record = contract.update_candidate(did, name=name, dob=dob, logo=logo, birthplace=birthplace)
        show_record("Candidate", record)


@candidate.command("delete")
@click.argument("did")
@click.option("--admin", "admin_did", required=True, help="Admin DID authorizing the change")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def candidate_delete(did, admin_did, db):
    """Delete a candidate and its tally."""
    with ledger_session(db) as contract:
        contract.delete_candidate(admin_did, did)
        console.print(f"[green]✓[/] Candidate [bold]{did}[/] deleted.")


@candidate.command("list")
@click.option("--as", "caller", required=True, help="Caller DID")
@click.option("--admin-view", is_flag=True, help="Use the admin-only listing")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def candidate_list(caller, admin_view, db):
    """List candidates, including records that fail to decode."""
    with ledger_session(db) as contract:
        if admin_view:
            records = contract.get_all_candidates(caller)
        else:
            records = contract.get_all_candidates_users(caller)
        rows = []
        for record in records:
            if isinstance(record, RawRecord):
                rows.append([record.key, "[yellow]corrupt[/]", "", "", record.raw[:40]])
            else:
                rows.append([record.did, record.name, record.birthplace, record.votes, record.logo])
        show_table("Candidates", ["DID", "Name", "Birthplace", "Votes", "Logo"], rows)


@candidate.command("tally")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def candidate_tally(db):
    """Public vote count per candidate."""
    with ledger_session(db) as contract:
        rows = [[row["did"], row["name"], row["votes"]] for row in contract.see_vote_count()]
        show_table("Vote Count", ["DID", "Name", "Votes"], rows)
