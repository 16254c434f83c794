"""Main CLI entry point."""

import logging

import click
from kasbook.database.base import DEFAULT_MAX_ATTEMPTS
from kasbook.database.factories import create_sqlite_database
from kasbook.domain.entities import OperatorContext

# Import and register all commands at module level
from kasbook.cli.commands import (
    account,
    role,
    customer,
    ppob,
    kas,
    entry,
    report,
    fee,
)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KASBOOK_DB_PATH environment variable)",
    envvar="KASBOOK_DB_PATH",
)
@click.option(
    "--device",
    default="Unknown Device",
    show_default=True,
    help="Device name stamped on every entry (KASBOOK_DEVICE_NAME)",
    envvar="KASBOOK_DEVICE_NAME",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_ATTEMPTS,
    show_default=True,
    help="Attempts per transaction before giving up on a write conflict (KASBOOK_MAX_ATTEMPTS)",
    envvar="KASBOOK_MAX_ATTEMPTS",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or debug output (-vv)")
@click.pass_context
def cli(ctx, db_path: str | None, device: str, max_attempts: int, verbose: int):
    """Kasbook - Cash and account ledger for BRILink and PPOB kiosks.

    Record customer transfers, withdrawals, top-ups and bill payments
    against your kas accounts, and keep every balance backed by its ledger.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["operator"] = OperatorContext(device_name=device)
        ctx.obj["max_attempts"] = max_attempts
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
role.register_commands(cli)
customer.register_commands(cli)
ppob.register_commands(cli)
kas.register_commands(cli)
entry.register_commands(cli)
report.register_commands(cli)
fee.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
