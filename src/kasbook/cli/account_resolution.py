"""CLI helper resolving the account arguments of kasbook commands."""

from __future__ import annotations

import click
from kasbook.cli.error_handling import handle_domain_error
from kasbook.domain.account import AccountService
from kasbook.domain.errors import DomainError
from kasbook.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve a kas account label or ID, exiting with ``Error: ...`` when unknown."""
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
