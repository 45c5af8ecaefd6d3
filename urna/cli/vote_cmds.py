"""CLI commands: vote cast/receipt, audit log/verify."""

from __future__ import annotations

import click

from urna.cli import DEFAULT_DB, console, fail, ledger_session, show_record, show_table
from urna.models import RawRecord


@click.group()
def vote():
    """Cast votes and read receipts."""
    pass


@vote.command("cast")
@click.argument("did")
@click.argument("candidate_did")
@click.argument("election_id")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def vote_cast(did, candidate_did, election_id, db):
    """Cast DID's vote for CANDIDATE_DID in ELECTION_ID."""
    with ledger_session(db) as contract:
        receipt = contract.cast_vote(did, candidate_did, election_id)
        console.print(
            f"[green]✓[/] Vote recorded for [bold]{candidate_did}[/] in {election_id}.\n"
            f"   [dim]{receipt.timestamp}[/]"
        )


@vote.command("receipt")
@click.argument("election_id")
@click.argument("did")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def vote_receipt(election_id, did, db):
    """Show the receipt of DID's vote in ELECTION_ID."""
    with ledger_session(db) as contract:
        show_record("Vote Receipt", contract.get_vote_receipt(election_id, did))


@click.group()
def audit():
    """Inspect the hash-chained audit trail."""
    pass


@audit.command("log")
@click.option("--actor", default=None, help="Only entries for this DID / election ID")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def audit_log(actor, db):
    """List audit entries."""
    with ledger_session(db) as contract:
        rows = []
        for entry in contract.get_audit_log(actor):
            if isinstance(entry, RawRecord):
                rows.append([entry.key, "[yellow]corrupt[/]", "", "", ""])
            else:
                rows.append([entry.seq, entry.action, entry.actor, entry.timestamp, entry.hash[:16]])
        show_table("Audit Trail", ["#", "Action", "Actor", "Timestamp", "Hash"], rows)


@audit.command("verify")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def audit_verify(db):
    """Recompute every hash in the audit chain."""
    with ledger_session(db) as contract:
        with console.status("[bold blue]Verifying audit chain...[/]"):
            report = contract.verify_audit_trail()
        if report["valid"]:
            console.print(f"[green]✅ Audit chain OK[/] ({report['entries_checked']} entries)")
            return
        for v in report["violations"]:
            console.print(f"  [red]✗[/] {v['type']} at #{v.get('seq', v.get('key', '?'))}")
    fail("Audit chain verification failed")
