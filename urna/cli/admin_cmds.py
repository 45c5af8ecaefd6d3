"""CLI commands: admin register, login, update, list, verify."""

from __future__ import annotations

import click

from urna.cli import DEFAULT_DB, console, ledger_session, show_record, show_table


@click.group()
def admin():
    """Manage the ledger administrator."""
    pass


@admin.command("register")
@click.argument("did")
@click.option("--user-name", "-u", required=True, help="Login name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--password-hash", required=True, help="Pre-computed password hash")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def admin_register(did, user_name, dob, password_hash, db):
    """Register the single administrator."""
    with ledger_session(db) as contract:
        contract.register_admin(did, user_name, dob, password_hash)
        console.print(f"[green]✓[/] Admin [bold]{did}[/] registered.")


@admin.command("login")
@click.argument("did")
@click.option("--user-name", "-u", required=True, help="Login name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def admin_login(did, user_name, dob, db):
    """Check admin credentials."""
    with ledger_session(db) as contract:
        record = contract.login_admin(did, user_name, dob)
        show_record("Admin", record, border_style="green")


@admin.command("update")
@click.argument("did")
@click.option("--user-name", "-u", required=True, help="Login name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--password-hash", required=True, help="Pre-computed password hash")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def admin_update(did, user_name, dob, password_hash, db):
    """Overwrite the admin's mutable fields."""
    with ledger_session(db) as contract:
        contract.update_admin(did, user_name, dob, password_hash)
        console.print(f"[green]✓[/] Admin [bold]{did}[/] updated.")


@admin.command("list")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def admin_list(db):
    """List admin records."""
    with ledger_session(db) as contract:
        admins = contract.get_all_admins()
        show_table("Admins", ["DID", "User", "DOB"], [[a.did, a.user_name, a.dob] for a in admins])


@admin.command("verify")
@click.argument("did")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def admin_verify(did, db):
    """Check that DID holds the admin role."""
    with ledger_session(db) as contract:
        contract.verify_admin(did)
        console.print(f"[green]✓[/] {did} is the admin.")
