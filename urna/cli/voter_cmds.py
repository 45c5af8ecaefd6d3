"""CLI commands: voter register, login, update, info, list."""

from __future__ import annotations

import click

from urna.cli import DEFAULT_DB, console, ledger_session, show_record, show_table


@click.group()
def voter():
    """Manage voters."""
    pass


@voter.command("register")
@click.argument("did")
@click.option("--name", required=True, help="Full name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--birthplace", required=True, help="Place of birth")
@click.option("--user-name", "-u", required=True, help="Login name")
@click.option("--password-hash", required=True, help="Pre-computed password hash")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def voter_register(did, name, dob, birthplace, user_name, password_hash, db):
    """Register a voter."""
    with ledger_session(db) as contract:
        contract.register_user(did, name, dob, birthplace, user_name, password_hash)
        console.print(f"[green]✓[/] Voter [bold]{did}[/] registered.")


@voter.command("login")
@click.argument("did")
@click.option("--user-name", "-u", required=True, help="Login name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def voter_login(did, user_name, dob, db):
    """Check voter credentials."""
    with ledger_session(db) as contract:
        show_record("Voter", contract.login_user(did, user_name, dob), border_style="green")


@voter.command("update")
@click.argument("did")
@click.option("--name", default=None)
@click.option("--dob", default=None)
@click.option("--birthplace", default=None)
@click.option("--user-name", "-u", default=None)
@click.option("--password-hash", default=None)
@click.option("--db", default=DEFAULT_DB, help="Database path")
def voter_update(did, name, dob, birthplace, user_name, password_hash, db):
    """Patch a voter profile (only the given fields change)."""
    with ledger_session(db) as contract:
        record = contract.update_personal_info(
            did,
            name=name,
            dob=dob,
            birthplace=birthplace,
            user_name=user_name,
            password_hash=password_hash,
        )
        show_record("Voter", record)


@voter.command("info")
@click.argument("did")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def voter_info(did, db):
    """Show a voter profile."""
    with ledger_session(db) as contract:
        show_record("Voter", contract.get_personal_info(did))


@voter.command("list")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def voter_list(db):
    """List every voter."""
    with ledger_session(db) as contract:
        rows = [
            [v.did, v.name, v.user_name, v.birthplace, "✓" if v.voted else ""]
            for v in contract.get_all_voters()
        ]
        show_table("Voters", ["DID", "Name", "User", "Birthplace", "Voted"], rows)
