"""Account management commands."""

import click
from kasbook.cli.account_resolution import resolve_account_or_exit
from kasbook.cli.date_filters import date_range_options, resolve_cli_date_range
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import AMOUNT, get_db, get_max_attempts, get_operator
from kasbook.domain.account import AccountService
from kasbook.domain.engine import TransactionEngine
from kasbook.domain.entities import AccountType
from kasbook.domain.errors import DomainError
from kasbook.domain.kinds import kind_for_category, parse_kind
from kasbook.domain.reconciliation import Reconciler
from kasbook.utils.amount_parser import format_rupiah
from kasbook.utils.date_parser import range_bounds

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage kas accounts."""
    pass


@account_group.command("create")
@click.argument("label", metavar="LABEL")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    default=AccountType.BANK.value,
    show_default=True,
    help="Account type",
)
@click.option("--opening-balance", type=AMOUNT, default=0, help="Starting balance")
@click.option("--minimum-balance", type=AMOUNT, default=0, help="Advisory minimum balance")
@click.option("--settle-to", help="Account receiving settlements (merchant accounts)")
@click.pass_context
def create_account(
    ctx,
    label: str,
    account_type: str,
    opening_balance: int,
    minimum_balance: int,
    settle_to: str | None,
):
    """Create a new kas account.

    Examples:
        kasbook account create "BRI"
        kasbook account create "Laci" --type Tunai --opening-balance 500rb
        kasbook account create "QRIS" --type Merchant --settle-to "BRI"
    """
    db = get_db(ctx)
    service = AccountService(db)

    settlement_destination_id = None
    if settle_to is not None:
        settlement_destination_id = resolve_account_or_exit(ctx, service, settle_to)

    account_type = next(t for t in AccountType if t.value.lower() == account_type.lower())
    try:
        account_id = service.create_account(
            label=label,
            account_type=account_type,
            opening_balance=opening_balance,
            minimum_balance=minimum_balance,
            settlement_destination_id=settlement_destination_id,
            context=get_operator(ctx),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account '{label.strip()}' (ID: {account_id})")
    if opening_balance:
        click.echo(f"Opening balance: {format_rupiah(opening_balance)}")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    service = AccountService(get_db(ctx))

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    roles = {}
    for role, account_id in service.role_bindings().items():
        roles.setdefault(account_id, []).append(role.value)

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        line = (
            f"ID: {acc.id:3d} | {acc.label:20s} | {acc.account_type.value:8s} | "
            f"{format_rupiah(acc.balance):>16s}"
        )
        if acc.id in roles:
            line += f" | role: {', '.join(roles[acc.id])}"
        if acc.below_minimum:
            line += f" | below minimum {format_rupiah(acc.minimum_balance)}"
        click.echo(line)
    click.echo("-" * 80)
    click.echo(f"Total: {format_rupiah(sum(acc.balance for acc in accounts))}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_label", metavar="NEW_LABEL")
@click.pass_context
def rename_account(ctx, account: str, new_label: str) -> None:
    """Rename an account.

    ACCOUNT can be an account label or ID. Role bindings follow the account.

    Examples:
        kasbook account rename "BRI" "BRI Utama"
        kasbook account rename 1 "Laci Depan"
    """
    service = AccountService(get_db(ctx))
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id, new_label)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed account to '{new_label.strip()}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account label or ID.

    The account can only be deleted if no ledger entries and no role
    bindings refer to it.

    Examples:
        kasbook account delete "Dana Lama"
        kasbook account delete 4 --yes
    """
    service = AccountService(get_db(ctx))
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes:
        if not click.confirm(f"Delete account '{account_obj.label}' (ID: {account_id})?"):
            click.echo("Cancelled.")
            return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted account '{account_obj.label}' (ID: {account_id})")


@account_group.command("history")
@click.argument("account", metavar="[ACCOUNT]", required=False)
@date_range_options
@click.option("--kind", help="Only entries of this transaction kind (e.g. customer_transfer)")
@click.pass_context
def account_history(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    kind: str | None,
) -> None:
    """Show the ledger of an account, oldest first.

    Without ACCOUNT the entries of every account are listed together.

    Examples:
        kasbook account history "Laci" --period today
        kasbook account history BRI --start-date 2024-01-01 --kind customer_transfer
        kasbook account history --period this-week
    """
    service = AccountService(get_db(ctx))
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, service, account)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    kind_filter = None
    if kind is not None:
        try:
            kind_filter = parse_kind(kind)
        except ValueError as e:
            handle_domain_error(ctx, e)
            return

    start_at, end_at = range_bounds(start, end)
    entries = service.list_entries(account_id, start=start_at, end=end_at)
    if kind_filter is not None:
        entries = [e for e in entries if kind_for_category(e.category) == kind_filter]

    if not entries:
        click.echo("No entries found.")
        return

    if account_id is None:
        labels = {a.id: a.label for a in service.list_accounts()}
        click.echo(
            f"{'ID':>5}  {'Date':16}  {'Account':14}  {'Memo':30}  {'Amount':>14}  "
            f"{'Balance':>14}  Audit"
        )
        click.echo("-" * 112)
        for entry in entries:
            click.echo(
                f"{entry.id:5d}  {entry.date:%Y-%m-%d %H:%M}  "
                f"{labels.get(entry.account_id, '?')[:14]:14}  {entry.name[:30]:30}  "
                f"{format_rupiah(entry.signed_amount):>14}  {format_rupiah(entry.balance_after):>14}  "
                f"{entry.audit_id if entry.audit_id is not None else '-'}"
            )
        return

    click.echo(
        f"{'ID':>5}  {'Date':16}  {'Memo':34}  {'Amount':>14}  {'Balance':>14}  Audit"
    )
    click.echo("-" * 100)
    for entry in entries:
        click.echo(
            f"{entry.id:5d}  {entry.date:%Y-%m-%d %H:%M}  {entry.name[:34]:34}  "
            f"{format_rupiah(entry.signed_amount):>14}  {format_rupiah(entry.balance_after):>14}  "
            f"{entry.audit_id if entry.audit_id is not None else '-'}"
        )


@account_group.command("adjust")
@click.argument("account", metavar="ACCOUNT")
@click.argument("actual_balance", type=AMOUNT, metavar="ACTUAL_BALANCE")
@click.option("--reason", help="Why the balance differs")
@click.pass_context
def adjust_account(ctx, account: str, actual_balance: int, reason: str | None) -> None:
    """Set an account to its counted balance.

    The difference is posted as a balance adjustment so the ledger keeps
    explaining the balance.

    Examples:
        kasbook account adjust Laci 1.250.000 --reason "Hitung ulang laci"
    """
    db = get_db(ctx)
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    engine = TransactionEngine(db, max_attempts=get_max_attempts(ctx))

    try:
        receipt = engine.adjust_balance(account_id, actual_balance, get_operator(ctx), reason=reason)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if receipt is None:
        click.echo("Balance already matches; nothing recorded.")
        return
    click.echo(
        f"Adjusted by {format_rupiah(receipt.delta_for(account_id))} "
        f"(Audit ID: {receipt.audit_id})"
    )
    click.echo(f"New balance: {format_rupiah(receipt.balances[account_id])}")


@account_group.command("reconcile")
@click.argument("account", metavar="ACCOUNT", required=False)
@click.pass_context
def reconcile_accounts(ctx, account: str | None) -> None:
    """Replay the ledger and compare it with stored balances.

    Without ACCOUNT every account is checked. Exits with status 1 when an
    account is inconsistent.

    Examples:
        kasbook account reconcile
        kasbook account reconcile Laci
    """
    db = get_db(ctx)
    reconciler = Reconciler(db)

    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)
        reports = [reconciler.reconcile(account_id)]
    else:
        reports = reconciler.reconcile_all()

    if not reports:
        click.echo("No accounts found.")
        return

    labels = {acc.id: acc.label for acc in db.list_accounts()}
    inconsistent = 0
    for report in reports:
        status = "OK" if report.is_consistent else "MISMATCH"
        click.echo(
            f"{labels.get(report.account_id, report.account_id)}: {status} "
            f"(stored {format_rupiah(report.stored_balance)}, "
            f"replayed {format_rupiah(report.replayed_balance)}, {report.entry_count} entries)"
        )
        for fault in report.arithmetic_faults:
            click.echo(
                f"  Entry {fault.entry_id}: balance after should be "
                f"{format_rupiah(fault.expected)}, recorded {format_rupiah(fault.recorded)}"
            )
        if report.chain_gaps:
            click.echo(f"  {len(report.chain_gaps)} snapshot gap(s) from reversed transactions")
        if not report.is_consistent:
            inconsistent += 1

    if inconsistent:
        ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
