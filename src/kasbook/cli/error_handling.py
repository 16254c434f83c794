"""CLI error handling helpers."""

from typing import Callable, Optional, TypeVar

import click

from kasbook.domain.errors import DomainError, DuplicateDetected

T = TypeVar("T")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def run_with_duplicate_prompt(
    ctx: click.Context, action: Callable[[bool], T], force: bool = False
) -> Optional[T]:
    """Run an engine action, asking the operator before recording a probable duplicate.

    ``action`` receives the force flag. It is re-run with ``force=True`` only
    after the operator confirms. Returns None when the operator declines.
    """
    try:
        return action(force)
    except DuplicateDetected as e:
        click.echo(f"Warning: {e}", err=True)
        if not click.confirm("Record this transaction anyway?", default=False):
            click.echo("Transaction cancelled.")
            return None
    except DomainError as e:
        handle_domain_error(ctx, e)
        return None

    try:
        return action(True)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return None
